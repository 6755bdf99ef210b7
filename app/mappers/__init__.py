"""Translator output and record mapping layer."""

from .date_literals import normalize_dates, parse_date_string, resolve_timezone
from .query_mapper import (
    NO_MATCH_QUERY,
    Ambiguous,
    FilterQuery,
    NoMatch,
    QueryMapper,
    QueryOutcome,
    Redirect,
)
from .record_mapper import RecordMapper

__all__ = [
    "normalize_dates",
    "parse_date_string",
    "resolve_timezone",
    "NO_MATCH_QUERY",
    "Ambiguous",
    "FilterQuery",
    "NoMatch",
    "QueryMapper",
    "QueryOutcome",
    "Redirect",
    "RecordMapper",
]
