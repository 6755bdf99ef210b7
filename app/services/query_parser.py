"""LLM-based query parser producing raw MongoDB filter objects."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..mappers import NO_MATCH_QUERY
from ..translators import QueryTranslator

logger = logging.getLogger(__name__)

# Prefixes models sometimes put before the JSON object
RESPONSE_PREFIXES = ("output:", "response:", "json:", "result:", "answer:")


class QueryParser:
    """
    Turns free text into a translated query via the translator collaborator.

    Never raises: every translator failure (missing configuration, network
    error, timeout, empty or non-JSON output) degrades to the no-match query.
    """

    def __init__(self, translator: Optional[QueryTranslator] = None):
        """
        Initialize query parser.

        Args:
            translator: Translator collaborator; None disables translation
        """
        self.translator = translator

    async def parse(self, query: str, collection_hint: str) -> Dict[str, Any]:
        """
        Translate a natural language query for one collection.

        Args:
            query: Free-text search string
            collection_hint: Target collection (users, events, dating)

        Returns:
            Parsed JSON object, or the no-match query on any failure
        """
        if not query or not query.strip():
            return self._no_match_response("empty prompt")

        if self.translator is None:
            return self._no_match_response("translator not configured")

        current_time = datetime.now(timezone.utc).isoformat(timespec="seconds")

        try:
            raw = await self.translator.translate(query, collection_hint, current_time)
        except Exception as e:
            logger.error(f"Query translation failed for {collection_hint}: {type(e).__name__}: {e}")
            return self._no_match_response("translator error")

        if not raw or not raw.strip():
            return self._no_match_response("empty translator output")

        logger.debug(f"Translator output for {collection_hint} ({query!r}): {raw}")

        try:
            parsed = json.loads(self._extract_json(raw))
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON from translator for {collection_hint}: {e}")
            logger.error(f"Raw translator output: {raw}")
            return self._no_match_response("invalid JSON")

        if not isinstance(parsed, dict):
            return self._no_match_response(f"translator returned {type(parsed).__name__}")

        logger.info(f"Translated query for {collection_hint}: {json.dumps(parsed, default=str)}")
        return parsed

    @staticmethod
    def _extract_json(response: str) -> str:
        """Extract the JSON object from model output, handling markdown and prefixes."""
        result = response.strip()

        # Remove markdown code blocks
        if "```" in result:
            start = result.find("```")
            end = result.rfind("```")
            if start != end:
                content = result[start + 3:end]
                if content.startswith("json"):
                    content = content[4:]
                result = content.strip()

        for prefix in RESPONSE_PREFIXES:
            if result.lower().startswith(prefix):
                result = result[len(prefix):].strip()

        start_idx = result.find("{")
        end_idx = result.rfind("}")
        if start_idx != -1 and end_idx != -1 and end_idx > start_idx:
            result = result[start_idx:end_idx + 1]

        return result

    @staticmethod
    def _no_match_response(reason: str) -> Dict[str, Any]:
        """Return a fresh no-match query."""
        logger.warning(f"Falling back to no-match query: {reason}")
        return dict(NO_MATCH_QUERY)
