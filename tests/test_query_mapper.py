"""
Query Safety Tests
==================

Translator output is untrusted: sentinels must be recognized before any
execution, malformed redirects must collapse to no-match, and caller
limits must always land inside [1, ceiling].
"""

from datetime import datetime, timezone

import pytest

from app.mappers import (
    NO_MATCH_QUERY,
    Ambiguous,
    FilterQuery,
    NoMatch,
    QueryMapper,
    Redirect,
)


# ============================================================================
# TEST: DECODE
# ============================================================================

class TestDecode:

    def test_no_match_sentinel(self):
        assert isinstance(QueryMapper.decode(dict(NO_MATCH_QUERY)), NoMatch)

    def test_non_object_is_no_match(self):
        outcome = QueryMapper.decode(["Event_type"])
        assert isinstance(outcome, NoMatch)
        assert outcome.reason == "not_an_object"

    def test_ambiguous_keeps_alternatives(self):
        alternatives = [{"Event_location": {"$regex": "goa"}}, {"Event_type": {"$regex": "goa"}}]

        outcome = QueryMapper.decode({"__ambiguous": True, "alternatives": alternatives})

        assert isinstance(outcome, Ambiguous)
        assert outcome.alternatives == alternatives

    def test_ambiguous_without_alternative_list(self):
        outcome = QueryMapper.decode({"__ambiguous": True, "alternatives": "events or dating"})
        assert isinstance(outcome, Ambiguous)
        assert outcome.alternatives == []

    def test_empty_object_matches_all(self):
        outcome = QueryMapper.decode({})
        assert isinstance(outcome, FilterQuery)
        assert outcome.filter == {}
        assert QueryMapper.is_match_all(outcome.filter)

    def test_inactive_markers_dropped_from_filter(self):
        outcome = QueryMapper.decode({"__no_match": False, "Event_location": {"$regex": "goa"}})

        assert isinstance(outcome, FilterQuery)
        assert outcome.filter == {"Event_location": {"$regex": "goa", "$options": "i"}}

    def test_inactive_ambiguity_dropped_with_alternatives(self):
        outcome = QueryMapper.decode({"__ambiguous": False, "alternatives": [], "Event_type": "Music"})

        assert isinstance(outcome, FilterQuery)
        assert outcome.filter == {"Event_type": "Music"}

    def test_only_inactive_markers_is_match_all(self):
        outcome = QueryMapper.decode({"__no_match": False})
        assert isinstance(outcome, FilterQuery)
        assert QueryMapper.is_match_all(outcome.filter)

    def test_filter_dates_normalized(self):
        outcome = QueryMapper.decode(
            {"Event_date": {"$gte": {"$dateFromString": {"dateString": "2025-11-01T00:00:00Z"}}}}
        )

        assert isinstance(outcome, FilterQuery)
        assert outcome.filter["Event_date"]["$gte"] == datetime(2025, 11, 1, tzinfo=timezone.utc)
        assert not QueryMapper.is_match_all(outcome.filter)

    def test_redirect(self):
        outcome = QueryMapper.decode({
            "__lookup": {
                "collection": "events",
                "criteria": {
                    "Event_location": {"$regex": "PUNE"},
                    "Event_date": {"$lte": {"$dateFromString": {"dateString": "2025-12-31T23:59:59Z"}}},
                },
            }
        })

        assert isinstance(outcome, Redirect)
        assert outcome.collection == "events"
        assert outcome.criteria["Event_location"] == {"$regex": "PUNE", "$options": "i"}
        assert outcome.criteria["Event_date"]["$lte"] == datetime(2025, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

    def test_redirect_criteria_default_to_match_all(self):
        outcome = QueryMapper.decode({"__lookup": {"collection": "dating"}})
        assert outcome == Redirect(collection="dating", criteria={})

    @pytest.mark.parametrize("lookup", [
        "events",
        {"collection": "users", "criteria": {}},
        {"collection": "venues", "criteria": {}},
        {"criteria": {"Event_location": "Pune"}},
        {"collection": "events", "criteria": ["Pune"]},
    ])
    def test_malformed_redirect_is_no_match(self, lookup):
        outcome = QueryMapper.decode({"__lookup": lookup})
        assert isinstance(outcome, NoMatch)
        assert outcome.reason == "invalid_redirect"


# ============================================================================
# TEST: CASE-INSENSITIVE LOCATIONS
# ============================================================================

class TestEnforceCaseInsensitive:

    def test_location_regex_forced(self):
        result = QueryMapper.enforce_case_insensitive({"Event_location": {"$regex": "Bengaluru"}})
        assert result == {"Event_location": {"$regex": "Bengaluru", "$options": "i"}}

    def test_existing_options_overridden(self):
        result = QueryMapper.enforce_case_insensitive({"Dating_location": {"$regex": "goa", "$options": ""}})
        assert result["Dating_location"]["$options"] == "i"

    def test_nested_place_field(self):
        query = {"$or": [{"meeting_place": {"$regex": "cafe"}}, {"Event_type": {"$regex": "Music"}}]}

        result = QueryMapper.enforce_case_insensitive(query)

        assert result["$or"][0]["meeting_place"]["$options"] == "i"
        assert result["$or"][1] == {"Event_type": {"$regex": "Music"}}

    def test_other_fields_untouched(self):
        query = {"Name": {"$regex": "Priya"}}
        assert QueryMapper.enforce_case_insensitive(query) == {"Name": {"$regex": "Priya"}}

    def test_input_not_mutated(self):
        query = {"Location": {"$regex": "Pune"}}
        QueryMapper.enforce_case_insensitive(query)
        assert query == {"Location": {"$regex": "Pune"}}


# ============================================================================
# TEST: LIMIT CLAMPING
# ============================================================================

class TestClampLimit:

    @pytest.mark.parametrize("requested,expected", [
        (None, 10),
        (5, 5),
        (100, 100),
        (500, 100),
        (0, 10),
        (-3, 10),
        (7.9, 7),
        (0.5, 10),
        ("25", 25),
        ("abc", 10),
        (True, 10),
        (float("nan"), 10),
        (float("inf"), 10),
        ([5], 10),
    ])
    def test_single_collection(self, requested, expected):
        assert QueryMapper.clamp_limit(requested, default=10, ceiling=100) == expected

    def test_combined_ceiling(self):
        assert QueryMapper.clamp_limit(50, default=10, ceiling=30) == 30
        assert QueryMapper.clamp_limit(None, default=10, ceiling=30) == 10


# ============================================================================
# TEST: COLLECTION DETECTION
# ============================================================================

class TestDetectCollection:

    @pytest.mark.parametrize("text,expected", [
        ("tech meetup in pune", "events"),
        ("Workshops this weekend", "events"),
        ("users in mumbai", "users"),
        ("people working as designers", "users"),
        ("dating in goa", "dating"),
        ("hello world", "events"),
        ("", "events"),
    ])
    def test_detect(self, text, expected):
        assert QueryMapper.detect_collection(text) == expected
