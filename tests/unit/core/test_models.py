from datetime import datetime, timezone

import pytest

from skillscout.core.errors import DiscoveryError, JobValidationError
from skillscout.core.models import Freshness, JobRecord, Preferences, Proficiency, parse_timestamp


@pytest.mark.parametrize("days, expected", [
    (None, Freshness.UNKNOWN),
    (0, Freshness.FRESH),
    (30, Freshness.FRESH),
    (31, Freshness.AGING),
    (90, Freshness.AGING),
    (91, Freshness.STALE),
])
def test_freshness_from_days(days, expected):
    assert Freshness.from_days(days) is expected


def test_proficiency_rank_orders_tiers():
    assert [p.rank for p in Proficiency] == [0, 1, 2, 3]
    assert Proficiency.EXPERT.rank > Proficiency.FAMILIAR.rank


@pytest.mark.parametrize("value, expected", [
    ("2026-10-10T12:00:00+02:00", datetime(2026, 10, 10, 10, 0, tzinfo=timezone.utc)),
    ("2024-01-02 10:00:00 +0000", datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)),
    ("not a date", None),
    ("", None),
    (None, None),
])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


def test_job_record_from_dict_applies_defaults():
    job = JobRecord.from_dict({"id": "x", "title": "t", "company": "c", "skills": None})
    assert job.skills == []
    assert job.location == "Not specified"
    assert job.status == "new"


def test_preferences_from_missing_section():
    assert Preferences.from_dict(None) == Preferences()


def test_error_payloads():
    error = DiscoveryError("/nope", "No such file or directory")
    assert error.to_dict() == {
        "success": False,
        "error": "Cannot read repository root /nope: No such file or directory",
        "details": {"path": "/nope"},
    }
    assert JobValidationError(job={}, errors=["bad"]).to_dict() == {"job": {}, "errors": ["bad"]}
