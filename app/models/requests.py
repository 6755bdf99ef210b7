"""Request models for API endpoints."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

SearchType = Literal["users", "events", "dating"]


class SearchRequest(BaseModel):
    """Request to search one or all collections."""
    q: str = Field("", description="Natural language search query")

    # Clamped server-side; non-numeric values fall back to the default
    limit: Any = Field(10, description="Maximum results (default 10, max 100; 30 for combined search)")


class AutoSearchRequest(SearchRequest):
    """Search request with an optional target collection."""
    search_type: Optional[SearchType] = Field(
        None,
        description="Target collection; detected from the query when omitted",
    )


class ParseRequest(BaseModel):
    """Request to translate a query without executing it."""
    q: str = Field(..., min_length=1, description="Natural language search query")
    search_type: SearchType = Field("events", description="Target collection hint")
