"""
Pytest configuration and shared fixtures for NL Mongo Search tests.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from app.config import Settings
from app.services import QueryParser, SearchService
from app.store import MongoDocumentStore

from fakes import FakeDatabase, FakeTranslator

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    """Configure pytest with asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )


PRIYA_ID = ObjectId("64b000000000000000000001")
ARJUN_ID = ObjectId("64b000000000000000000002")
KAVYA_ID = ObjectId("64b000000000000000000003")
GHOST_ID = ObjectId("64b0000000000000000000ff")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ============================================================================
# DATA
# ============================================================================

@pytest.fixture
def users():
    return [
        {
            "_id": PRIYA_ID,
            "Name": "Priya Sharma",
            "Gender": "female",
            "Location": "Bengaluru",
            "Occupation": "UX Designer",
            "DOB": utc(1995, 5, 1),
            "Salary": 120000,
            "email": "priya@example.com",
        },
        {
            "_id": ARJUN_ID,
            "Name": "Arjun Mehta",
            "Gender": "male",
            "Location": "Pune",
            "Occupation": "Software Engineer",
            "DOB": utc(1990, 8, 12),
            "Salary": 150000,
            "email": "arjun@example.com",
        },
        {
            "_id": KAVYA_ID,
            "Name": "Kavya Rao",
            "Gender": "female",
            "Location": "Mumbai",
            "Occupation": "Data Scientist",
            "DOB": utc(1998, 2, 20),
            "Salary": 110000,
            "email": "kavya@example.com",
        },
    ]


@pytest.fixture
def events():
    return [
        {
            "_id": ObjectId("64c000000000000000000001"),
            "Event_type": "Tech Meetup",
            "Event_location": "Bengaluru",
            "Event_date": utc(2025, 11, 15, 18, 0),
            "participant_ids": [PRIYA_ID, ARJUN_ID],
        },
        {
            "_id": ObjectId("64c000000000000000000002"),
            "Event_type": "Startup Pitch",
            "Event_location": "Pune",
            "Event_date": utc(2025, 12, 5, 10, 0),
            # Stored as strings in some records
            "participant_ids": [str(ARJUN_ID)],
        },
        {
            "_id": ObjectId("64c000000000000000000003"),
            "Event_type": "Music Festival",
            "Event_location": "Goa",
            "Event_date": utc(2025, 11, 20, 16, 0),
            "participant_ids": [KAVYA_ID, GHOST_ID],
        },
    ]


@pytest.fixture
def datings():
    return [
        {
            "_id": ObjectId("64d000000000000000000001"),
            "Dating_location": "Bengaluru",
            "Dating_Date": utc(2025, 12, 10, 19, 30),
            "Male_id": ARJUN_ID,
            "Female_id": PRIYA_ID,
        },
        {
            "_id": ObjectId("64d000000000000000000002"),
            "Dating_location": "Mumbai",
            "Dating_Date": utc(2025, 10, 2, 20, 0),
            "Male_id": GHOST_ID,
            "Female_id": KAVYA_ID,
        },
    ]


@pytest.fixture
def database(users, events, datings):
    """Database whose dating collection lives under its first fallback name."""
    return FakeDatabase({"users": users, "events": events, "datings": datings})


@pytest.fixture
def store(database):
    return MongoDocumentStore(database, dating_collection_names=["datings", "dating", "Dating"])


# ============================================================================
# SERVICES
# ============================================================================

@pytest.fixture
def settings():
    return Settings(
        openai_api_key=None,
        allow_pii=False,
        sensitive_fields=["Salary", "email"],
        default_search_limit=10,
        max_search_limit=100,
        max_combined_limit=30,
        name_match_enabled=True,
        name_match_limit=100,
        dating_collection_names=["datings", "dating", "Dating"],
    )


@pytest.fixture
def make_service(store, settings):
    """Build a SearchService around a scripted translator."""

    def _make(responses=None, default=None, **overrides):
        translator = FakeTranslator(responses, default=default)
        service_settings = settings.model_copy(update=overrides) if overrides else settings
        service = SearchService(store, QueryParser(translator), settings=service_settings)
        return service, translator

    return _make
