"""Business logic services for NL Mongo Search."""

from .search_service import SearchService
from .query_parser import QueryParser
from .name_match import NameMatchService
from .reference_resolver import ReferenceResolver

__all__ = [
    "SearchService",
    "QueryParser",
    "NameMatchService",
    "ReferenceResolver",
]
