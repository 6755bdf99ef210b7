"""API layer for NL Mongo Search."""

from .routes import router
from .dependencies import get_query_parser, get_search_service, get_store, get_translator

__all__ = [
    "router",
    "get_query_parser",
    "get_search_service",
    "get_store",
    "get_translator",
]
