"""Query mapper for translator output to executable query conversion."""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config.collections import (
    DATING_COLLECTION,
    EVENTS_COLLECTION,
    IDENTITY_COLLECTION,
    REFERENCE_FIELDS,
)
from .date_literals import normalize_dates

logger = logging.getLogger(__name__)

# Control keys the translator may put in its output
NO_MATCH_KEY = "__no_match"
AMBIGUOUS_KEY = "__ambiguous"
LOOKUP_KEY = "__lookup"

NO_MATCH_QUERY = {NO_MATCH_KEY: True}


@dataclass
class FilterQuery:
    """Executable filter; an empty dict matches every document."""
    filter: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NoMatch:
    """Deliberate zero-match; nothing is executed."""
    reason: str = "no_match"


@dataclass
class Ambiguous:
    """Translator could not decide; alternatives go back to the caller."""
    alternatives: List[Any] = field(default_factory=list)


@dataclass
class Redirect:
    """Identity records derived from matches in a secondary collection."""
    collection: str
    criteria: Dict[str, Any] = field(default_factory=dict)


QueryOutcome = Union[FilterQuery, NoMatch, Ambiguous, Redirect]


class QueryMapper:
    """
    Maps untrusted translator output to a typed, bounded query outcome.

    Handles:
    - Sentinel detection (no-match, ambiguous, foreign-key redirect)
    - Date literal normalization
    - Case-insensitive regex enforcement on location fields
    - Limit clamping
    - Collection detection from free text
    """

    # Substrings of field names whose regexes are always case-insensitive
    CASE_INSENSITIVE_FIELD_HINTS = ("location", "place")

    # Keyword patterns for collection detection, checked in order
    COLLECTION_KEYWORDS = [
        (EVENTS_COLLECTION, re.compile(r"event|meetup|conference|workshop|gathering")),
        (IDENTITY_COLLECTION, re.compile(r"user|person|people|member|profile|age|gender|location|name")),
        (DATING_COLLECTION, re.compile(r"dating|match|relationship|couple|date")),
    ]

    @classmethod
    def decode(cls, raw: Any) -> QueryOutcome:
        """
        Decode a translated query into a tagged outcome.

        Args:
            raw: Parsed translator output

        Returns:
            FilterQuery, NoMatch, Ambiguous or Redirect
        """
        if not isinstance(raw, dict):
            logger.warning(f"Translated query is not an object ({type(raw).__name__}), treating as no-match")
            return NoMatch(reason="not_an_object")

        if raw.get(NO_MATCH_KEY):
            return NoMatch()

        if raw.get(AMBIGUOUS_KEY):
            alternatives = raw.get("alternatives")
            if not isinstance(alternatives, list):
                alternatives = []
            return Ambiguous(alternatives=alternatives)

        if LOOKUP_KEY in raw:
            return cls._decode_redirect(raw[LOOKUP_KEY])

        prepared = cls.enforce_case_insensitive(normalize_dates(cls.strip_control_keys(raw)))
        return FilterQuery(filter=prepared)

    @classmethod
    def _decode_redirect(cls, lookup: Any) -> QueryOutcome:
        """Validate a redirect marker; anything malformed becomes a no-match."""
        if not isinstance(lookup, dict):
            logger.warning("Redirect marker is not an object, treating as no-match")
            return NoMatch(reason="invalid_redirect")

        collection = lookup.get("collection")
        criteria = lookup.get("criteria", {})

        if not REFERENCE_FIELDS.get(collection):
            logger.warning(f"Redirect to unsupported collection {collection!r}, treating as no-match")
            return NoMatch(reason="invalid_redirect")

        if not isinstance(criteria, dict):
            logger.warning("Redirect criteria is not an object, treating as no-match")
            return NoMatch(reason="invalid_redirect")

        prepared = cls.enforce_case_insensitive(normalize_dates(criteria))
        return Redirect(collection=collection, criteria=prepared)

    @classmethod
    def strip_control_keys(cls, query: Dict[str, Any]) -> Dict[str, Any]:
        """
        Drop inactive control keys (e.g. {"__no_match": false}) from a filter.

        "alternatives" only belongs to an ambiguity marker and goes with it.
        """
        control = {NO_MATCH_KEY, AMBIGUOUS_KEY}
        if AMBIGUOUS_KEY in query:
            control.add("alternatives")
        return {key: value for key, value in query.items() if key not in control}

    @classmethod
    def enforce_case_insensitive(cls, query: Any) -> Any:
        """
        Force $options "i" on every $regex under a location/place field.

        Returns a copy; the input is left untouched.
        """
        if isinstance(query, list):
            return [cls.enforce_case_insensitive(item) for item in query]

        if not isinstance(query, dict):
            return query

        result = {}
        for key, value in query.items():
            value = cls.enforce_case_insensitive(value)
            lowered = key.lower()
            if (
                isinstance(value, dict)
                and "$regex" in value
                and any(hint in lowered for hint in cls.CASE_INSENSITIVE_FIELD_HINTS)
            ):
                value = {**value, "$options": "i"}
            result[key] = value
        return result

    @classmethod
    def clamp_limit(cls, requested: Any, default: int, ceiling: int) -> int:
        """
        Clamp a caller-supplied limit.

        Non-numeric, boolean and non-positive values fall back to the default.

        Args:
            requested: Raw limit from the caller
            default: Default page size
            ceiling: Endpoint maximum

        Returns:
            Effective limit in [1, ceiling]
        """
        value: Optional[float] = None
        if isinstance(requested, bool):
            value = None
        elif isinstance(requested, (int, float)):
            value = requested
        elif isinstance(requested, str):
            try:
                value = float(requested.strip())
            except ValueError:
                value = None

        if value is None or not math.isfinite(value) or int(value) <= 0:
            value = default

        return max(1, min(int(value), ceiling))

    @classmethod
    def is_match_all(cls, query: Dict[str, Any]) -> bool:
        """Check if a filter matches every document."""
        return not query

    @classmethod
    def detect_collection(cls, text: str) -> str:
        """Guess the target collection from free text (events by default)."""
        lowered = (text or "").lower()
        for collection, pattern in cls.COLLECTION_KEYWORDS:
            if pattern.search(lowered):
                return collection
        return EVENTS_COLLECTION
