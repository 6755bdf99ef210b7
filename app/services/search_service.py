"""Search service orchestrating translation, query safety and execution."""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from ..config import (
    DATING_COLLECTION,
    EVENTS_COLLECTION,
    IDENTITY_COLLECTION,
    SEARCHABLE_COLLECTIONS,
    Settings,
    get_settings,
)
from ..mappers import Ambiguous, NoMatch, QueryMapper, RecordMapper, Redirect
from ..store import MongoDocumentStore
from .name_match import NameMatchService
from .query_parser import QueryParser
from .reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)

AMBIGUOUS_NOTE = "Ambiguous query returned by model. Please pick one alternative."


class SearchService:
    """
    Natural-language search over users, events and dating records.

    Orchestrates:
    - Query translation (degrades to no-match on failure)
    - Outcome decoding: no-match, ambiguous, redirect or filter
    - Name-match widening for events and dating
    - Bounded execution with sensitive-field projection
    - Redaction and reference population
    """

    def __init__(
        self,
        store: MongoDocumentStore,
        query_parser: QueryParser,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize search service.

        Args:
            store: Document store
            query_parser: Parser wrapping the translator collaborator
            settings: Application settings (default: cached settings)
        """
        self.store = store
        self.query_parser = query_parser
        self.settings = settings or get_settings()
        self.resolver = ReferenceResolver(
            store,
            allow_pii=self.settings.allow_pii,
            sensitive_fields=self.settings.sensitive_fields,
        )
        self.name_match: Optional[NameMatchService] = None
        if self.settings.name_match_enabled:
            self.name_match = NameMatchService(store, limit=self.settings.name_match_limit)

    async def search_users(self, text: str, limit: Any = None) -> Dict[str, Any]:
        """Search identity records; results are always redacted."""
        return await self.search(IDENTITY_COLLECTION, text, limit=limit, populate=False)

    async def search_events(self, text: str, limit: Any = None, populate: bool = True) -> Dict[str, Any]:
        """Search events, optionally populating participants."""
        return await self.search(EVENTS_COLLECTION, text, limit=limit, populate=populate)

    async def search_dating(self, text: str, limit: Any = None, populate: bool = True) -> Dict[str, Any]:
        """Search dating records, optionally populating both partners."""
        return await self.search(DATING_COLLECTION, text, limit=limit, populate=populate)

    async def search(
        self,
        collection_key: str,
        text: str,
        limit: Any = None,
        populate: bool = True,
    ) -> Dict[str, Any]:
        """
        Search a single collection.

        Returns:
            {"count", "results"} envelope (plus ambiguity details when relevant)
        """
        _, envelope = await self.search_detailed(collection_key, text, limit=limit, populate=populate)
        return envelope

    async def search_detailed(
        self,
        collection_key: str,
        text: str,
        limit: Any = None,
        populate: bool = True,
        ceiling: Optional[int] = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Search a single collection and also return the raw translated query.

        Args:
            collection_key: users, events or dating
            text: Free-text search string
            limit: Caller-requested limit (clamped)
            populate: Resolve identity references on events / dating
            ceiling: Limit ceiling (default: max_search_limit)

        Returns:
            Tuple of (translated query, envelope)
        """
        if collection_key not in SEARCHABLE_COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection_key}")

        ceiling = ceiling or self.settings.max_search_limit
        effective_limit = QueryMapper.clamp_limit(limit, self.settings.default_search_limit, ceiling)

        start_time = time.time()
        raw_query = await self.query_parser.parse(text, collection_key)
        envelope = await self._execute(collection_key, text, raw_query, effective_limit, ceiling, populate)

        search_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Search {collection_key}: {envelope['count']} results "
            f"(limit={effective_limit}) in {search_time_ms:.2f}ms"
        )
        return raw_query, envelope

    async def search_all(self, text: str, limit: Any = None, populate: bool = False) -> Dict[str, Any]:
        """
        Search users, events and dating concurrently.

        Each collection runs its own pipeline; a translator failure only
        empties its own section. A store failure is re-raised once all
        three pipelines have finished.
        """
        ceiling = self.settings.max_combined_limit
        outcomes = await asyncio.gather(
            *(
                self.search_detailed(key, text, limit=limit, populate=populate, ceiling=ceiling)
                for key in SEARCHABLE_COLLECTIONS
            ),
            return_exceptions=True,
        )

        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            for failure in failures:
                logger.error(f"Combined search section failed: {type(failure).__name__}: {failure}")
            raise failures[0]

        results: Dict[str, Any] = {}
        queries: Dict[str, Any] = {}
        total = 0
        for key, (raw_query, envelope) in zip(SEARCHABLE_COLLECTIONS, outcomes):
            section = {"count": envelope["count"], "data": envelope["results"]}
            if envelope.get("ambiguous"):
                section["ambiguous"] = True
                section["alternatives"] = envelope["alternatives"]
            results[key] = section
            queries[key] = raw_query
            total += envelope["count"]

        return {"count": total, "results": results, "queries": queries}

    async def _execute(
        self,
        collection_key: str,
        text: str,
        raw_query: Dict[str, Any],
        limit: int,
        ceiling: int,
        populate: bool,
    ) -> Dict[str, Any]:
        """Route a translated query through the safety gate and run it."""
        outcome = QueryMapper.decode(raw_query)

        if isinstance(outcome, NoMatch):
            logger.info(f"No-match for {collection_key} ({outcome.reason}), skipping execution")
            return self._envelope([])

        if isinstance(outcome, Ambiguous):
            logger.info(f"Ambiguous query for {collection_key} with {len(outcome.alternatives)} alternatives")
            envelope = self._envelope([])
            envelope["ambiguous"] = True
            envelope["alternatives"] = outcome.alternatives
            envelope["note"] = AMBIGUOUS_NOTE
            return envelope

        if isinstance(outcome, Redirect):
            logger.info(f"Redirecting {collection_key} search through {outcome.collection}")
            matches = await self.store.find(outcome.collection, outcome.criteria, limit=ceiling)
            identities = await self.resolver.identities_for(matches, outcome.collection, limit)
            return self._envelope(identities)

        query = outcome.filter
        if collection_key == IDENTITY_COLLECTION:
            documents = await self.store.find(
                IDENTITY_COLLECTION,
                query,
                limit=limit,
                projection=RecordMapper.projection(self.settings.allow_pii, self.settings.sensitive_fields),
            )
            return self._envelope(
                RecordMapper.redact_all(documents, self.settings.allow_pii, self.settings.sensitive_fields)
            )

        if self.name_match is not None:
            query = await self.name_match.augment(query, collection_key, text)

        documents = await self.store.find(collection_key, query, limit=limit)
        documents = await self.resolver.populate(documents, collection_key, populate)
        return self._envelope(documents)

    @staticmethod
    def _envelope(results: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {"count": len(results), "results": results}
