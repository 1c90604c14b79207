import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from skillscout.core.models import (
    FileCounts,
    Freshness,
    JobRecord,
    LanguageStat,
    RepoFeatureRecord,
    RepoHistory,
)
from skillscout.repos.base import HistoryProvider
from skillscout.storage import JsonStore


NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeHistoryProvider(HistoryProvider):
    """Returns canned history keyed by repository directory name."""

    def __init__(self, histories: Optional[dict] = None, fail: bool = False):
        super().__init__()
        self.histories = histories or {}
        self.fail = fail
        self.calls = []

    @property
    def name(self) -> str:
        return "fake"

    def get_repo_history(self, repo_path, now=None):
        self.calls.append(repo_path)
        if self.fail:
            raise RuntimeError("history backend exploded")
        return self.histories.get(Path(repo_path).name, RepoHistory.unavailable())


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def fake_history() -> FakeHistoryProvider:
    return FakeHistoryProvider()


@pytest.fixture
def make_repo(tmp_path: Path):
    """Create a repository directory with a .git marker and the given files."""

    def _make(name: str, files: Optional[dict] = None, root: Optional[Path] = None, git: bool = True) -> Path:
        repo = (root or tmp_path) / name
        repo.mkdir(parents=True)
        if git:
            (repo / ".git").mkdir()
        for relative, content in (files or {}).items():
            path = repo / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            path.write_text(content, encoding="utf-8")
        return repo

    return _make


def history(commits: int = 10, first_days_ago: int = 400, last_days_ago: int = 5) -> RepoHistory:
    last = NOW - timedelta(days=last_days_ago)
    return RepoHistory(
        last_commit=last,
        first_commit=NOW - timedelta(days=first_days_ago),
        commit_count=commits,
        current_branch="main",
        days_since_last_commit=last_days_ago,
        freshness=Freshness.from_days(last_days_ago),
    )


def record(
    name: str,
    languages: Optional[dict] = None,
    patterns: Optional[list] = None,
    dependencies: Optional[dict] = None,
    excluded: bool = False,
    **history_kwargs,
) -> RepoFeatureRecord:
    """Build a RepoFeatureRecord without touching the filesystem."""
    languages = languages or {}
    total = sum(languages.values()) or 1
    return RepoFeatureRecord(
        name=name,
        path=f"/code/{name}",
        history=history(**history_kwargs),
        languages=[
            LanguageStat(name=lang, file_count=count, percentage=round(100 * count / total))
            for lang, count in languages.items()
        ],
        dependencies=dependencies or {},
        patterns=patterns or [],
        file_counts=FileCounts(total=sum(languages.values())),
        excluded=excluded,
    )


def job(job_id: str, skills=(), description: str = "", location: str = "Remote", remote=True) -> JobRecord:
    return JobRecord(
        id=job_id,
        title=f"Engineer {job_id}",
        company="Acme",
        skills=list(skills),
        description=description,
        location=location,
        remote=remote,
    )


@pytest.fixture
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(str(tmp_path / "data"))


@pytest.fixture
def make_record():
    return record


@pytest.fixture
def make_job():
    return job


@pytest.fixture
def make_history():
    return history


@pytest.fixture
def make_provider():
    return FakeHistoryProvider
