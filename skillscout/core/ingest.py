"""
Job Ingestor - Validates, normalizes and deduplicates externally supplied jobs.

Raw job data is untrusted. Each entry is validated on its own so one bad
posting never blocks the rest of a batch; only an unreadable payload aborts
the whole call.
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Union
import hashlib
import json
import logging
import re

from .errors import IngestError, JobValidationError
from .models import IngestResult, JobRecord
from .taxonomy import DESCRIPTION_SKILL_PATTERNS


REQUIRED_FIELDS = ("title", "company")

SLUG_LENGTH = 40
HASH_LENGTH = 6

_DESCRIPTION_SKILL_RES = [re.compile(p, re.IGNORECASE) for p in DESCRIPTION_SKILL_PATTERNS]


def _field(raw: dict, name: str, camel: Optional[str] = None) -> Any:
    """Read a field that may arrive in snake_case or camelCase."""
    if camel and raw.get(camel) is not None:
        return raw[camel]
    return raw.get(name)


def _text(value: Any, default: Optional[str] = "") -> Optional[str]:
    """Coerce an untrusted optional field to stripped text; lists are joined."""
    if _is_blank(value) or isinstance(value, dict):
        return default
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v).strip() for v in value if not _is_blank(v))
    return str(value).strip() or default


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    return not str(value).strip()


def validate_job(raw: Any) -> list[str]:
    """
    Check a raw job entry.

    Returns:
        List of problems; empty when the entry can be ingested
    """
    if not isinstance(raw, dict):
        return ["Job entry must be an object"]

    errors = []
    for name in REQUIRED_FIELDS:
        if _is_blank(raw.get(name)):
            errors.append(f"Missing required field: {name}")

    skills = raw.get("skills")
    if skills is not None and not isinstance(skills, (list, tuple, str)):
        errors.append("Skills must be an array or a comma-separated string")

    return errors


def normalize_skills(skills: Union[str, Iterable, None]) -> list[str]:
    """Lower-case and trim skill tokens, accepting a list or comma-separated text."""
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [str(s).strip().lower() for s in skills if s is not None and str(s).strip()]


def slugify(text: str, max_length: int = SLUG_LENGTH) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower())[:max_length]


def generate_job_id(raw: dict) -> str:
    """
    Deterministic id: company/title slug plus a short hash of the raw entry.

    Byte-identical entries always get the same id; two different postings for
    the same company and title get different ones.
    """
    base = slugify(f"{raw.get('company', '')}-{raw.get('title', '')}")
    serialized = json.dumps(raw, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    digest = hashlib.sha1(serialized.encode("utf-8")).hexdigest()[:HASH_LENGTH]
    return f"{base}-{digest}"


def extract_skills_from_description(description: str) -> list[str]:
    """Find well-known technology keywords in free text, in first-seen order."""
    found: list[str] = []
    for pattern in _DESCRIPTION_SKILL_RES:
        for match in pattern.finditer(description or ""):
            skill = match.group(0).lower()
            if skill not in found:
                found.append(skill)
    return found


def normalize_job(raw: dict, now: Optional[datetime] = None, infer_skills: bool = False) -> JobRecord:
    """Convert a validated raw entry into a JobRecord with defaults applied."""
    now = now or datetime.now()
    location = _text(raw.get("location"), "Not specified")

    remote = raw.get("remote")
    if remote is None:
        remote = True if "remote" in location.lower() else None
    else:
        remote = bool(remote)

    skills = normalize_skills(raw.get("skills"))
    description = _text(raw.get("description"))
    if infer_skills and not skills:
        skills = extract_skills_from_description(description)

    supplied_id = raw.get("id")
    job_id = str(supplied_id).strip() if not _is_blank(supplied_id) else generate_job_id(raw)

    return JobRecord(
        id=job_id,
        title=_text(raw.get("title"), "Unknown Position"),
        company=_text(raw.get("company"), "Unknown Company"),
        url=_text(raw.get("url"), None),
        description=description,
        skills=skills,
        location=location,
        salary=raw.get("salary") or None,
        type=_text(raw.get("type"), "full-time"),
        remote=remote,
        source=_text(raw.get("source"), "manual"),
        date_posted=_text(_field(raw, "date_posted", "datePosted"), now.date().isoformat()),
        date_added=_text(_field(raw, "date_added", "dateAdded"), now.isoformat()),
        status=_text(raw.get("status"), "new"),
    )


def parse_payload(payload: Any) -> list:
    """
    Unwrap a job import payload into a list of raw entries.

    Accepts JSON text or bytes, a list of entries, or a mapping with a
    ``jobs`` list.

    Raises:
        IngestError: If the payload cannot be parsed or has another shape
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise IngestError("Job payload is not valid UTF-8", str(e)) from e

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise IngestError(f"Invalid JSON: {e.msg}", {"line": e.lineno, "column": e.colno}) from e

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("jobs"), list):
        return payload["jobs"]

    raise IngestError("Job payload must be an array or an object with a 'jobs' array")


class JobIngestor:
    """Merges new job postings into an existing collection."""

    def __init__(self, infer_skills: bool = False):
        """
        Args:
            infer_skills: Fill in skills from the description when a job lists none
        """
        self.infer_skills = infer_skills
        self.logger = logging.getLogger(self.__class__.__name__)

    def ingest(
        self,
        payload: Any,
        existing_jobs: Iterable[JobRecord],
        now: Optional[datetime] = None,
    ) -> IngestResult:
        """
        Ingest a payload against the current collection.

        Returns:
            IngestResult whose ``jobs`` is the old collection followed by the
            newly added jobs
        """
        raw_jobs = parse_payload(payload)
        now = now or datetime.now()

        result = IngestResult(jobs=list(existing_jobs))
        known_ids = {job.id for job in result.jobs}

        for raw in raw_jobs:
            errors = validate_job(raw)
            if errors:
                result.errors.append(JobValidationError(job=raw, errors=errors))
                continue

            job = normalize_job(raw, now=now, infer_skills=self.infer_skills)
            if job.id in known_ids:
                result.skipped += 1
                continue

            result.jobs.append(job)
            known_ids.add(job.id)
            result.added += 1

        self.logger.info(
            f"Ingested {len(raw_jobs)} entries: {result.added} added, "
            f"{result.skipped} skipped, {len(result.errors)} rejected"
        )
        return result

    def ingest_file(self, file_path: str, store, now: Optional[datetime] = None) -> IngestResult:
        """
        Ingest a JSON file into a job store, rewriting the stored collection.

        Args:
            file_path: Path to a UTF-8 JSON job payload
            store: Object exposing ``load_jobs()`` and ``save_jobs(jobs)``
        """
        path = Path(file_path)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            raise IngestError(f"File not found: {file_path}") from None
        except OSError as e:
            raise IngestError(f"Cannot read {file_path}: {e}") from e

        result = self.ingest(content, store.load_jobs(), now=now)
        store.save_jobs(result.jobs)
        return result


def ingest_jobs(
    payload: Any,
    existing_jobs: Iterable[JobRecord],
    now: Optional[datetime] = None,
    infer_skills: bool = False,
) -> IngestResult:
    """Validate, normalize and merge a job payload into an existing collection."""
    return JobIngestor(infer_skills=infer_skills).ingest(payload, existing_jobs, now=now)


def ingest_jobs_from_file(file_path: str, store, infer_skills: bool = False) -> IngestResult:
    """Ingest a job file and persist the merged collection to ``store``."""
    return JobIngestor(infer_skills=infer_skills).ingest_file(file_path, store)


def job_stats(jobs: Iterable[JobRecord]) -> dict:
    """Count jobs by source, location, type and status."""
    jobs = list(jobs)
    return {
        "total": len(jobs),
        "by_source": dict(Counter(job.source for job in jobs)),
        "by_location": dict(Counter(job.location or "Unknown" for job in jobs)),
        "by_type": dict(Counter(job.type for job in jobs)),
        "by_status": dict(Counter(job.status for job in jobs)),
        "companies": len({job.company for job in jobs}),
        "remote": sum(1 for job in jobs if job.remote),
        "with_salary": sum(1 for job in jobs if job.salary),
    }
