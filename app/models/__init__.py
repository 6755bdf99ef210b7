"""Pydantic models for NL Mongo Search."""

from .requests import (
    AutoSearchRequest,
    ParseRequest,
    SearchRequest,
    SearchType,
)
from .responses import (
    CollectionSection,
    CombinedSearchResponse,
    DetectedSearchResponse,
    ParseResponse,
    SearchResponse,
)

__all__ = [
    # Requests
    "AutoSearchRequest",
    "ParseRequest",
    "SearchRequest",
    "SearchType",
    # Responses
    "CollectionSection",
    "CombinedSearchResponse",
    "DetectedSearchResponse",
    "ParseResponse",
    "SearchResponse",
]
