"""Document store layer for MongoDB integration."""

from .filters import FilterBuilder
from .mongo_store import MongoDocumentStore

__all__ = [
    "FilterBuilder",
    "MongoDocumentStore",
]
