"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Optional

from ..config import get_settings
from ..services import QueryParser, SearchService
from ..store import MongoDocumentStore
from ..translators import OpenAITranslator, QueryTranslator


@lru_cache
def get_store() -> MongoDocumentStore:
    """Get cached document store (one client per process)."""
    settings = get_settings()
    return MongoDocumentStore.connect(
        uri=settings.mongo_uri,
        db_name=settings.db_name,
        timeout_ms=settings.mongo_timeout_ms,
        dating_collection_names=settings.dating_collection_names,
    )


@lru_cache
def get_translator() -> Optional[QueryTranslator]:
    """
    Get cached translator instance.

    Returns None if OpenAI API key is not configured.
    """
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    return OpenAITranslator()


@lru_cache
def get_query_parser() -> QueryParser:
    """Get cached query parser instance."""
    return QueryParser(translator=get_translator())


@lru_cache
def get_search_service() -> SearchService:
    """Get cached search service instance."""
    return SearchService(store=get_store(), query_parser=get_query_parser())
