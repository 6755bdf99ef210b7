"""Reference resolver attaching identity records to events and dating records."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..config import IDENTITY_COLLECTION, ReferenceField, get_reference_fields
from ..mappers import RecordMapper
from ..store import FilterBuilder, MongoDocumentStore

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """
    Resolves identity references across a result page with one batched read.

    Works for any collection from its declared reference fields: list fields
    (event participants) and scalar fields (dating partners).
    """

    def __init__(
        self,
        store: MongoDocumentStore,
        allow_pii: bool = False,
        sensitive_fields: Iterable[str] = ("Salary", "email"),
    ):
        """
        Initialize reference resolver.

        Args:
            store: Document store
            allow_pii: Process-wide PII flag
            sensitive_fields: Identity fields stripped unless PII is allowed
        """
        self.store = store
        self.allow_pii = allow_pii
        self.sensitive_fields = list(sensitive_fields)

    @staticmethod
    def _references(record: Dict[str, Any], ref: ReferenceField) -> List[Any]:
        """Raw reference values of one field, always as a list."""
        value = record.get(ref.source)
        if value is None or value == "":
            return []
        if isinstance(value, list):
            return value
        return [value]

    def collect_ids(self, records: List[Dict[str, Any]], collection_key: str) -> List[Any]:
        """Distinct identity references across a page, in first-seen order."""
        reference_fields = get_reference_fields(collection_key)
        return FilterBuilder.unique_ids(
            value
            for record in records
            for ref in reference_fields
            for value in self._references(record, ref)
        )

    async def fetch_identities(self, ids: List[Any], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Fetch and redact identity records in a single read.

        All ids are queried so that dangling ones do not shorten the page;
        the store applies the limit to the records that exist.

        Args:
            ids: Distinct identifiers
            limit: Optional cap below len(ids)

        Returns:
            Redacted identity records
        """
        if not ids:
            return []

        identities = await self.store.find_by_ids(
            IDENTITY_COLLECTION,
            ids,
            projection=RecordMapper.projection(self.allow_pii, self.sensitive_fields),
            limit=limit,
        )
        return RecordMapper.redact_all(identities, self.allow_pii, self.sensitive_fields)

    async def populate(
        self,
        records: List[Dict[str, Any]],
        collection_key: str,
        populate: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Attach resolved identity records to each record of a page.

        Dangling references become {"_id": <original id>}; missing scalar
        references become None. Input records are not mutated.

        Args:
            records: Page of events or dating records
            collection_key: Logical collection of the page
            populate: False returns the records unchanged

        Returns:
            Records with resolved sub-documents
        """
        if not populate or not records:
            return records

        reference_fields = get_reference_fields(collection_key)
        if not reference_fields:
            return records

        ids = self.collect_ids(records, collection_key)
        identities = await self.fetch_identities(ids)
        by_id = {FilterBuilder.id_key(doc.get("_id")): doc for doc in identities}

        logger.info(
            f"Populated {collection_key}: {len(records)} records, "
            f"{len(ids)} references, {len(identities)} resolved"
        )

        populated = []
        for record in records:
            resolved = dict(record)
            for ref in reference_fields:
                values = self._references(record, ref)
                if ref.many:
                    resolved[ref.target] = [self._lookup(by_id, value) for value in values]
                else:
                    resolved[ref.target] = self._lookup(by_id, values[0]) if values else None
            populated.append(resolved)

        return populated

    async def identities_for(
        self,
        records: List[Dict[str, Any]],
        collection_key: str,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Identity records referenced by a page of another collection, bounded by limit."""
        ids = self.collect_ids(records, collection_key)
        return await self.fetch_identities(ids, limit=limit)

    @staticmethod
    def _lookup(by_id: Dict[str, Dict[str, Any]], value: Any) -> Dict[str, Any]:
        """Resolved record or an identifier-only placeholder."""
        found = by_id.get(FilterBuilder.id_key(value))
        if found is None:
            return {"_id": value}
        return found
