"""Filter building utilities for MongoDB queries."""

import re
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId


class FilterBuilder:
    """Build MongoDB filters for identifier lookups and name matching."""

    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        """Convert a 24-hex string to ObjectId; anything else is returned as-is."""
        if isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24:
            return ObjectId(value)
        return value

    @classmethod
    def id_key(cls, value: Any) -> str:
        """String form used to de-duplicate and look up identifiers."""
        return str(value)

    @classmethod
    def unique_ids(cls, values: Iterable[Any]) -> List[Any]:
        """
        De-duplicate identifiers by their string form, keeping first-seen order.

        Empty values (None, "") are dropped and 24-hex strings become ObjectIds.
        """
        seen = set()
        result = []
        for value in values:
            if value is None or value == "":
                continue
            key = cls.id_key(value)
            if key in seen:
                continue
            seen.add(key)
            result.append(cls.coerce_id(value))
        return result

    @classmethod
    def id_variants(cls, ids: Iterable[Any]) -> List[Any]:
        """
        Both ObjectId and string forms of each identifier.

        References may be stored either way, so $in clauses carry both.
        """
        variants = []
        seen = set()
        for value in ids:
            for variant in (value, cls.id_key(value)):
                marker = (type(variant).__name__, cls.id_key(variant))
                if marker not in seen:
                    seen.add(marker)
                    variants.append(variant)
        return variants

    @classmethod
    def by_ids(cls, ids: List[Any], field: str = "_id") -> Dict[str, Any]:
        """Filter matching any of the given identifiers."""
        return {field: {"$in": list(ids)}}

    @classmethod
    def name_contains_any(cls, field: str, terms: Iterable[str]) -> Optional[Dict[str, Any]]:
        """
        Case-insensitive filter matching a text field containing any of the terms.

        Terms are regex-escaped and joined into a single alternation.
        Returns None when no non-blank term is given.
        """
        cleaned = [term.strip() for term in terms if term and term.strip()]
        if not cleaned:
            return None
        pattern = "|".join(re.escape(term) for term in cleaned)
        return {field: {"$regex": pattern, "$options": "i"}}

    @classmethod
    def union(cls, query: Dict[str, Any], clauses: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Widen a query so it also matches any of the given clauses.

        A query that is exactly {"$or": [...]} gets the clauses appended;
        any other non-empty query becomes one branch of a new $or. The
        empty query already matches everything and is returned unchanged.
        """
        if not clauses or not query:
            return query

        existing = query.get("$or")
        if set(query.keys()) == {"$or"} and isinstance(existing, list):
            return {"$or": [*existing, *clauses]}

        return {"$or": [query, *clauses]}
