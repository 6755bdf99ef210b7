"""
Hardcoded collection layout for the users / events / dating data set.

Logical collection keys are what the API and the translator talk about.
Each one maps to an ordered list of physical collection names (the dating
collection is named differently across deployments) and to the fields that
carry references to identity records.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ReferenceField:
    """A field holding identity references and where the resolved records go."""
    source: str
    target: str
    many: bool = False


IDENTITY_COLLECTION = "users"
EVENTS_COLLECTION = "events"
DATING_COLLECTION = "dating"

# Physical names tried in order for the dating collection
DATING_COLLECTION_CANDIDATES = ("datings", "dating", "Dating")

# Display-name field on identity records
IDENTITY_NAME_FIELD = "Name"

# Logical collection → reference fields
REFERENCE_FIELDS: Dict[str, List[ReferenceField]] = {
    IDENTITY_COLLECTION: [],
    EVENTS_COLLECTION: [
        ReferenceField(source="participant_ids", target="participants", many=True),
    ],
    DATING_COLLECTION: [
        ReferenceField(source="Male_id", target="Male"),
        ReferenceField(source="Female_id", target="Female"),
    ],
}

SEARCHABLE_COLLECTIONS = list(REFERENCE_FIELDS.keys())


def get_reference_fields(collection_key: str) -> List[ReferenceField]:
    """Get reference fields for a logical collection."""
    if collection_key not in REFERENCE_FIELDS:
        raise ValueError(f"Unknown collection: {collection_key}")
    return REFERENCE_FIELDS[collection_key]


def get_collection_candidates(
    collection_key: str,
    dating_names: Optional[List[str]] = None,
) -> List[str]:
    """Get the physical collection names to try, in order."""
    if collection_key == DATING_COLLECTION:
        return list(dating_names or DATING_COLLECTION_CANDIDATES)
    if collection_key not in REFERENCE_FIELDS:
        raise ValueError(f"Unknown collection: {collection_key}")
    return [collection_key]
