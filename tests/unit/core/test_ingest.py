import json

import pytest

from skillscout.core.errors import IngestError
from skillscout.core.ingest import (
    JobIngestor,
    extract_skills_from_description,
    generate_job_id,
    ingest_jobs,
    job_stats,
    normalize_job,
    normalize_skills,
    parse_payload,
    validate_job,
)
from skillscout.core.matcher import match_jobs_to_profile
from skillscout.core.models import JobRecord, SkillsProfile


def test_reingesting_identical_job_is_skipped(now):
    raw = {"title": "Dev", "company": "Acme", "skills": ["react", "python"]}

    first = ingest_jobs([raw], [], now=now)
    second = ingest_jobs([dict(raw)], first.jobs, now=now)

    assert (first.added, first.skipped) == (1, 0)
    assert (second.added, second.skipped) == (0, 1)
    assert len(second.jobs) == 1


def test_malformed_entry_does_not_block_batch(now):
    payload = [
        {"title": "A", "company": "One"},
        {"title": "B"},
        {"title": "C", "company": "Three"},
    ]

    result = ingest_jobs(payload, [], now=now)

    assert result.added == 2
    assert len(result.errors) == 1
    assert result.errors[0].job == {"title": "B"}
    assert result.errors[0].errors == ["Missing required field: company"]
    assert [j.title for j in result.jobs] == ["A", "C"]


def test_existing_jobs_come_first(make_job, now):
    existing = [make_job("old-1")]
    result = ingest_jobs([{"title": "New", "company": "Co"}], existing, now=now)
    assert [j.id for j in result.jobs][0] == "old-1"
    assert result.jobs[1].title == "New"


def test_duplicates_within_one_batch_are_skipped(now):
    raw = {"title": "Dev", "company": "Acme"}
    result = ingest_jobs([raw, dict(raw)], [], now=now)
    assert (result.added, result.skipped) == (1, 1)


def test_different_postings_with_same_title_get_distinct_ids():
    a = generate_job_id({"title": "Dev", "company": "Acme", "location": "Berlin"})
    b = generate_job_id({"title": "Dev", "company": "Acme", "location": "Paris"})
    assert a != b
    assert a.startswith("acme-dev-")


def test_job_id_ignores_key_order():
    assert generate_job_id({"title": "Dev", "company": "Acme"}) == generate_job_id({"company": "Acme", "title": "Dev"})


def test_supplied_id_is_kept(now):
    job = normalize_job({"id": "abc-1", "title": "Dev", "company": "Acme"}, now=now)
    assert job.id == "abc-1"


def test_defaults_are_applied(now):
    job = normalize_job({"title": " Dev ", "company": "Acme"}, now=now)

    assert job.title == "Dev"
    assert job.location == "Not specified"
    assert job.type == "full-time"
    assert job.source == "manual"
    assert job.status == "new"
    assert job.remote is None
    assert job.skills == []
    assert job.date_posted == "2026-10-18"
    assert job.date_added == now.isoformat()


def test_remote_is_inferred_from_location(now):
    assert normalize_job({"title": "a", "company": "b", "location": "Remote (EU)"}, now=now).remote is True
    assert normalize_job({"title": "a", "company": "b", "location": "Remote", "remote": False}, now=now).remote is False


def test_camel_case_dates_are_accepted(now):
    job = normalize_job({"title": "a", "company": "b", "datePosted": "2026-01-01"}, now=now)
    assert job.date_posted == "2026-01-01"


@pytest.mark.parametrize("skills, expected", [
    ("React, Python ,,", ["react", "python"]),
    (["  Go", "RUST", ""], ["go", "rust"]),
    (None, []),
])
def test_normalize_skills(skills, expected):
    assert normalize_skills(skills) == expected


@pytest.mark.parametrize("raw, errors", [
    ("not a job", ["Job entry must be an object"]),
    ({"title": "", "company": "  "}, ["Missing required field: title", "Missing required field: company"]),
    ({"title": "a", "company": "b", "skills": 5}, ["Skills must be an array or a comma-separated string"]),
    ({"title": "a", "company": "b", "skills": "x, y"}, []),
])
def test_validate_job(raw, errors):
    assert validate_job(raw) == errors


def test_payload_object_with_jobs_array(now):
    result = ingest_jobs(json.dumps({"jobs": [{"title": "a", "company": "b"}]}), [], now=now)
    assert result.added == 1


@pytest.mark.parametrize("payload", ['{"title": ', {"title": "a"}, 42, '"text"'])
def test_unusable_payload_raises(payload):
    with pytest.raises(IngestError):
        parse_payload(payload)


def test_invalid_json_reports_position():
    with pytest.raises(IngestError) as exc:
        parse_payload('[{"title": }]')
    assert exc.value.message.startswith("Invalid JSON")
    assert exc.value.details["line"] == 1


def test_skills_inferred_from_description_when_enabled(now):
    raw = {"title": "a", "company": "b", "description": "We use React and PostgreSQL with Docker."}

    assert normalize_job(raw, now=now).skills == []
    assert normalize_job(raw, now=now, infer_skills=True).skills == ["react", "postgresql", "docker"]


def test_extract_skills_from_description_dedupes():
    assert extract_skills_from_description("Python, python and Go") == ["python", "go"]
    assert extract_skills_from_description("") == []


def test_ingest_file_persists_merged_jobs(tmp_path, store, now):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps([{"title": "Dev", "company": "Acme"}]), encoding="utf-8")

    result = JobIngestor().ingest_file(str(path), store, now=now)

    assert result.added == 1
    assert [j.title for j in store.load_jobs()] == ["Dev"]


def test_ingest_file_missing(store):
    with pytest.raises(IngestError, match="File not found"):
        JobIngestor().ingest_file("/nonexistent/jobs.json", store)


def test_ingest_result_to_dict(now):
    result = ingest_jobs([{"title": "a", "company": "b"}, {"company": "c"}], [], now=now)
    data = result.to_dict()
    assert data["added"] == 1
    assert data["total_jobs"] == 1
    assert data["errors"][0]["errors"] == ["Missing required field: title"]


def test_job_stats():
    jobs = [
        JobRecord(id="1", title="a", company="X", location="Remote", remote=True, salary="100k"),
        JobRecord(id="2", title="b", company="X", source="linkedin"),
        JobRecord(id="3", title="c", company="Y", status="applied"),
    ]

    stats = job_stats(jobs)

    assert stats["total"] == 3
    assert stats["companies"] == 2
    assert stats["remote"] == 1
    assert stats["with_salary"] == 1
    assert stats["by_source"] == {"manual": 2, "linkedin": 1}
    assert stats["by_status"] == {"new": 2, "applied": 1}
    assert stats["by_location"] == {"Remote": 1, "Not specified": 2}


def test_non_text_fields_are_coerced_to_text(now):
    raw = {"title": "Dev", "company": "Acme", "description": 123, "location": ["NYC", "Remote"],
           "url": {"href": "x"}, "type": 7, "status": None, "source": ["board"]}

    result = ingest_jobs([raw], [], now=now)
    job = result.jobs[0]

    assert result.added == 1
    assert job.description == "123"
    assert job.location == "NYC, Remote"
    assert job.remote is True
    assert job.url is None
    assert job.type == "7"
    assert job.status == "new"
    assert job.source == "board"


def test_coerced_jobs_can_be_matched(now):
    result = ingest_jobs([{"title": "Dev", "company": "Acme", "description": 123, "location": ["NYC"]}], [], now=now)

    matches = match_jobs_to_profile(result.jobs, SkillsProfile())

    assert [m.score for m in matches] == [0]
