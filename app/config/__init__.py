"""Configuration modules for NL Mongo Search."""

from .settings import Settings, get_settings
from .collections import (
    DATING_COLLECTION,
    DATING_COLLECTION_CANDIDATES,
    EVENTS_COLLECTION,
    IDENTITY_COLLECTION,
    IDENTITY_NAME_FIELD,
    SEARCHABLE_COLLECTIONS,
    ReferenceField,
    get_collection_candidates,
    get_reference_fields,
)

__all__ = [
    "Settings",
    "get_settings",
    "DATING_COLLECTION",
    "DATING_COLLECTION_CANDIDATES",
    "EVENTS_COLLECTION",
    "IDENTITY_COLLECTION",
    "IDENTITY_NAME_FIELD",
    "SEARCHABLE_COLLECTIONS",
    "ReferenceField",
    "get_collection_candidates",
    "get_reference_fields",
]
