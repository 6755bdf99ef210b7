"""Name matching service for widening event / dating searches by participant."""

import logging
import re
from typing import Any, Dict, List

from ..config import IDENTITY_COLLECTION, IDENTITY_NAME_FIELD, get_reference_fields
from ..store import FilterBuilder, MongoDocumentStore

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"[^\W\d_]+")


class NameMatchService:
    """
    Finds identity records whose name contains a word of the search text and
    widens a translated query to also match records that reference them.

    Lets "events with Priya" find Priya's events even though the event
    documents themselves never mention her name.
    """

    # Words of search prompts that never identify a person
    STOP_WORDS = frozenset({
        "all", "and", "any", "are", "around", "at", "attended", "attending",
        "between", "by", "couple", "couples", "date", "dated", "dates", "dating",
        "datings", "during", "event", "events", "female", "females", "find",
        "for", "from", "gathering", "gatherings", "girl", "girls", "guy", "guys",
        "has", "have", "in", "into", "last", "list", "male", "males", "match",
        "matches", "meetup", "meetups", "men", "month", "near", "next", "not",
        "of", "on", "or", "people", "person", "show", "that", "the", "their",
        "this", "today", "tomorrow", "user", "users", "week", "went", "where",
        "which", "who", "with", "women", "woman", "year",
        "january", "february", "march", "april", "may", "june", "july",
        "august", "september", "october", "november", "december",
    })

    # Shorter words match far too many names as substrings
    MIN_TERM_LENGTH = 3

    def __init__(self, store: MongoDocumentStore, limit: int = 100):
        """
        Initialize name match service.

        Args:
            store: Document store
            limit: Max identity matches considered per search
        """
        self.store = store
        self.limit = limit

    @classmethod
    def name_terms(cls, text: str) -> List[str]:
        """
        Candidate name words of a search text, lowercased, in order.

        Stop words, numbers and words shorter than MIN_TERM_LENGTH are dropped.
        """
        terms: List[str] = []
        for word in WORD_PATTERN.findall((text or "").lower()):
            if len(word) < cls.MIN_TERM_LENGTH or word in cls.STOP_WORDS or word in terms:
                continue
            terms.append(word)
        return terms

    async def find_identity_ids(self, text: str) -> List[Any]:
        """
        Case-insensitive substring search of the text's words on identity names.

        One bounded read covers every candidate word.

        Args:
            text: Raw free-text search string

        Returns:
            Identifiers of matching identity records
        """
        name_filter = FilterBuilder.name_contains_any(IDENTITY_NAME_FIELD, self.name_terms(text))
        if name_filter is None:
            return []

        matches = await self.store.find(
            IDENTITY_COLLECTION,
            name_filter,
            limit=self.limit,
            projection={"_id": 1},
        )
        return FilterBuilder.unique_ids(doc.get("_id") for doc in matches)

    async def augment(
        self,
        query: Dict[str, Any],
        collection_key: str,
        text: str,
    ) -> Dict[str, Any]:
        """
        Union reference clauses for name-matched identities into the query.

        Args:
            query: Date-normalized translated query
            collection_key: events or dating
            text: Raw free-text search string

        Returns:
            A new widened query, or the original when nothing matched
        """
        reference_fields = get_reference_fields(collection_key)
        if not reference_fields or not query:
            return query

        ids = await self.find_identity_ids(text)
        if not ids:
            return query

        variants = FilterBuilder.id_variants(ids)
        clauses = [FilterBuilder.by_ids(variants, field=ref.source) for ref in reference_fields]

        logger.info(f"Name match: {len(ids)} identities widen the {collection_key} query")
        return FilterBuilder.union(query, clauses)
