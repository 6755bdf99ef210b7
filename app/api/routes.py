"""API route definitions."""

import logging
from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from ..mappers import QueryMapper
from ..models import (
    AutoSearchRequest,
    CombinedSearchResponse,
    DetectedSearchResponse,
    ParseRequest,
    ParseResponse,
    SearchRequest,
    SearchResponse,
)
from ..services import QueryParser, SearchService
from .dependencies import get_query_parser, get_search_service

logger = logging.getLogger(__name__)

router = APIRouter()

SERVER_ERROR = "Server error"


def _encode(payload: Any) -> Any:
    """Make store documents JSON-safe (ObjectId → str, datetime → ISO)."""
    return jsonable_encoder(payload, custom_encoder={ObjectId: str})


@router.post(
    "/search/users",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    tags=["search"],
)
async def search_users(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
):
    """Search users with plain English (salary and email are hidden unless PII is allowed)."""
    try:
        result = await search_service.search_users(request.q, limit=request.limit)
    except Exception as e:
        logger.error(f"search/users failed: {e}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    return _encode(result)


@router.post(
    "/search/events",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    tags=["search"],
)
async def search_events(
    request: SearchRequest,
    populate: bool = Query(True, description="Include participant user documents"),
    search_service: SearchService = Depends(get_search_service),
):
    """Search events with plain English."""
    try:
        result = await search_service.search_events(request.q, limit=request.limit, populate=populate)
    except Exception as e:
        logger.error(f"search/events failed: {e}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    return _encode(result)


@router.post(
    "/search/dating",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    tags=["search"],
)
async def search_dating(
    request: SearchRequest,
    populate: bool = Query(True, description="Include Male / Female user documents"),
    search_service: SearchService = Depends(get_search_service),
):
    """Search dating records with plain English."""
    try:
        result = await search_service.search_dating(request.q, limit=request.limit, populate=populate)
    except Exception as e:
        logger.error(f"search/dating failed: {e}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    return _encode(result)


@router.post(
    "/search/all",
    response_model=CombinedSearchResponse,
    response_model_exclude_none=True,
    tags=["search"],
)
async def search_all(
    request: SearchRequest,
    populate: bool = Query(False, description="Include user documents for related records"),
    search_service: SearchService = Depends(get_search_service),
):
    """
    Search users, events and dating concurrently.

    The per-collection limit is capped at 30. The translated query of each
    collection is returned alongside the results.
    """
    try:
        result = await search_service.search_all(request.q, limit=request.limit, populate=populate)
    except Exception as e:
        logger.error(f"search/all failed: {e}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    return _encode(result)


@router.post(
    "/search",
    response_model=DetectedSearchResponse,
    response_model_exclude_none=True,
    tags=["search"],
)
async def search_detected(
    request: AutoSearchRequest,
    populate: bool = Query(True, description="Include user documents for related records"),
    search_service: SearchService = Depends(get_search_service),
):
    """
    Search one collection, detecting it from the query when not given.

    Echoes the chosen collection and the translated query for debugging.
    """
    if not request.q.strip():
        raise HTTPException(status_code=400, detail="Missing 'q' in request body.")

    search_type = request.search_type or QueryMapper.detect_collection(request.q)

    try:
        raw_query, result = await search_service.search_detailed(
            search_type, request.q, limit=request.limit, populate=populate
        )
    except Exception as e:
        logger.error(f"search ({search_type}) failed: {e}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return _encode({"search_type": search_type, "query": raw_query, **result})


@router.post("/parse", response_model=ParseResponse, tags=["search"])
async def parse_query(
    request: ParseRequest,
    query_parser: QueryParser = Depends(get_query_parser),
):
    """
    Translate a natural language query into a MongoDB filter.

    Does not touch the database.
    """
    if query_parser.translator is None:
        raise HTTPException(
            status_code=503,
            detail="Query parsing unavailable - OpenAI API key not configured"
        )

    parsed = await query_parser.parse(request.q, request.search_type)
    return _encode({"search_type": request.search_type, "query": parsed})
