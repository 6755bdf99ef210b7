"""Response models for API endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class SearchResponse(BaseModel):
    """Response from a single-collection search."""
    count: int
    results: List[Dict[str, Any]]

    # Set when the translator could not decide between interpretations
    ambiguous: Optional[bool] = None
    alternatives: Optional[List[Any]] = None
    note: Optional[str] = None


class DetectedSearchResponse(SearchResponse):
    """Search response echoing the detected collection and translated query."""
    search_type: str
    query: Dict[str, Any]


class CollectionSection(BaseModel):
    """One collection's share of a combined search."""
    count: int
    data: List[Dict[str, Any]]
    ambiguous: Optional[bool] = None
    alternatives: Optional[List[Any]] = None


class CombinedSearchResponse(BaseModel):
    """Response from searching all collections."""
    count: int
    results: Dict[str, CollectionSection]
    queries: Dict[str, Any]


class ParseResponse(BaseModel):
    """Response from query translation."""
    search_type: str
    query: Dict[str, Any]


