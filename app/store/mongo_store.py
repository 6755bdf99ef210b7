"""MongoDB document store wrapper."""

import logging
from typing import Any, Dict, List, Optional

from pymongo import AsyncMongoClient

from ..config.collections import SEARCHABLE_COLLECTIONS, get_collection_candidates
from .filters import FilterBuilder

logger = logging.getLogger(__name__)


class MongoDocumentStore:
    """
    Read-only MongoDB access by logical collection name.

    Handles:
    - Physical collection name fallback (first existing candidate wins and is cached)
    - Bounded find with projection
    - Batched identifier lookups
    - Connection health checks
    """

    def __init__(
        self,
        database: Any,
        client: Optional[AsyncMongoClient] = None,
        dating_collection_names: Optional[List[str]] = None,
    ):
        """
        Initialize the store.

        Args:
            database: pymongo AsyncDatabase (or compatible object)
            client: Owning client, closed by close()
            dating_collection_names: Ordered candidate names for the dating collection
        """
        self.database = database
        self.client = client
        self._candidates: Dict[str, List[str]] = {
            key: get_collection_candidates(key, dating_collection_names)
            for key in SEARCHABLE_COLLECTIONS
        }
        self._resolved: Dict[str, str] = {}

    @classmethod
    def connect(
        cls,
        uri: str,
        db_name: str,
        timeout_ms: int = 5000,
        dating_collection_names: Optional[List[str]] = None,
    ) -> "MongoDocumentStore":
        """Create a store backed by a new AsyncMongoClient."""
        client = AsyncMongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        logger.info(f"MongoDB client created for database: {db_name}")
        return cls(
            database=client[db_name],
            client=client,
            dating_collection_names=dating_collection_names,
        )

    async def resolve_collection(self, collection_key: str) -> Optional[str]:
        """
        Resolve a logical collection to an existing physical collection.

        Candidates are probed in order; the first hit is cached for the
        lifetime of the store. Returns None when no candidate exists.
        """
        if collection_key in self._resolved:
            return self._resolved[collection_key]

        if collection_key not in self._candidates:
            raise ValueError(f"Unknown collection: {collection_key}")

        candidates = self._candidates[collection_key]
        if len(candidates) == 1:
            self._resolved[collection_key] = candidates[0]
            return candidates[0]

        for name in candidates:
            existing = await self.database.list_collection_names(filter={"name": name})
            if name in existing:
                logger.info(f"Resolved collection '{collection_key}' to '{name}'")
                self._resolved[collection_key] = name
                return name

        logger.warning(f"No collection found for '{collection_key}' (tried {candidates})")
        return None

    async def find(
        self,
        collection_key: str,
        query: Dict[str, Any],
        limit: Optional[int] = None,
        projection: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute a find against a logical collection.

        Args:
            collection_key: Logical collection (users, events, dating)
            query: MongoDB filter
            limit: Max documents (None or <= 0 means unbounded)
            projection: Optional projection

        Returns:
            List of documents; empty if the collection does not exist
        """
        name = await self.resolve_collection(collection_key)
        if name is None:
            return []

        cursor = self.database[name].find(query, projection)
        if limit is not None and limit > 0:
            cursor = cursor.limit(limit)

        documents = await cursor.to_list()
        logger.debug(f"find on {name} returned {len(documents)} documents")
        return documents

    async def find_by_ids(
        self,
        collection_key: str,
        ids: List[Any],
        projection: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch documents by _id in a single read.

        Bounded by the number of ids, or by limit when it is smaller.
        """
        if not ids:
            return []
        bound = len(ids) if limit is None else min(limit, len(ids))
        return await self.find(
            collection_key,
            FilterBuilder.by_ids(ids),
            limit=bound,
            projection=projection,
        )

    async def ping(self) -> bool:
        """Check database connectivity."""
        try:
            await self.database.command("ping")
            return True
        except Exception as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close the owning client, if any."""
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB client closed")
