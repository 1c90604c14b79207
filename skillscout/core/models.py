"""
Core data models for repository analysis, skills profiles and job matching.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from dateutil import parser as date_parser


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a persisted or git-formatted timestamp.

    Accepts ``datetime`` objects, ISO 8601 strings and git's ``%ci`` format
    (``2024-01-02 10:00:00 +0100``). Anything unparsable becomes ``None``.
    """
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date_parser.isoparse(value)
    except ValueError:
        pass
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


class Freshness(Enum):
    """Recency of a repository's last commit."""
    FRESH = "fresh"
    AGING = "aging"
    STALE = "stale"
    UNKNOWN = "unknown"

    @classmethod
    def from_days(cls, days: Optional[int]) -> "Freshness":
        if days is None:
            return cls.UNKNOWN
        if days > 90:
            return cls.STALE
        if days > 30:
            return cls.AGING
        return cls.FRESH


class Proficiency(Enum):
    """Coarse skill level derived from how many repositories use a skill."""
    FAMILIAR = "familiar"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return list(Proficiency).index(self)


# ---------------------------------------------------------------------------
# Repository analysis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiscoveredRepo:
    """A candidate repository found under a discovery root."""
    name: str
    path: str

    def to_dict(self) -> dict:
        return {"name": self.name, "path": self.path}


@dataclass
class AuthorStat:
    name: str
    commits: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "commits": self.commits}


@dataclass
class RepoHistory:
    """Summary of a repository's local version-control history."""
    last_commit: Optional[datetime] = None
    first_commit: Optional[datetime] = None
    commit_count: int = 0
    current_branch: str = ""
    has_remote: bool = False
    commits_behind_upstream: int = 0
    days_since_last_commit: Optional[int] = None
    freshness: Freshness = Freshness.UNKNOWN
    top_authors: list[AuthorStat] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def unavailable(cls, reason: str = "Not a git repository or git history unavailable") -> "RepoHistory":
        """Sentinel used whenever history cannot be read."""
        return cls(error=reason)

    @property
    def is_available(self) -> bool:
        return self.freshness != Freshness.UNKNOWN and self.last_commit is not None

    def to_dict(self) -> dict:
        return {
            "last_commit": _iso(self.last_commit),
            "first_commit": _iso(self.first_commit),
            "commit_count": self.commit_count,
            "current_branch": self.current_branch,
            "has_remote": self.has_remote,
            "commits_behind_upstream": self.commits_behind_upstream,
            "days_since_last_commit": self.days_since_last_commit,
            "freshness": self.freshness.value,
            "top_authors": [a.to_dict() for a in self.top_authors],
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RepoHistory":
        try:
            freshness = Freshness(data.get("freshness", "unknown"))
        except ValueError:
            freshness = Freshness.UNKNOWN
        return cls(
            last_commit=parse_timestamp(data.get("last_commit")),
            first_commit=parse_timestamp(data.get("first_commit")),
            commit_count=int(data.get("commit_count") or 0),
            current_branch=data.get("current_branch") or "",
            has_remote=bool(data.get("has_remote", False)),
            commits_behind_upstream=int(data.get("commits_behind_upstream") or 0),
            days_since_last_commit=data.get("days_since_last_commit"),
            freshness=freshness,
            top_authors=[
                AuthorStat(name=a.get("name", ""), commits=int(a.get("commits") or 0))
                for a in data.get("top_authors", [])
            ],
            error=data.get("error"),
        )


@dataclass
class LanguageStat:
    """File count for one language within a repository."""
    name: str
    file_count: int
    percentage: int  # of classified files, rounded half-up

    def to_dict(self) -> dict:
        return {"name": self.name, "file_count": self.file_count, "percentage": self.percentage}


@dataclass
class FileCounts:
    total: int = 0
    code: int = 0
    config: int = 0
    docs: int = 0
    assets: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "code": self.code,
            "config": self.config,
            "docs": self.docs,
            "assets": self.assets,
        }


@dataclass(frozen=True)
class RepoFeatureRecord:
    """Everything the analyzer learned about one repository."""
    name: str
    path: str
    history: RepoHistory = field(default_factory=RepoHistory.unavailable)
    languages: list[LanguageStat] = field(default_factory=list)
    dependencies: dict[str, list[str]] = field(default_factory=dict)
    patterns: list[str] = field(default_factory=list)
    file_counts: FileCounts = field(default_factory=FileCounts)
    excluded: bool = False

    def with_excluded(self, excluded: bool = True) -> "RepoFeatureRecord":
        """Return a copy marked (or unmarked) as excluded from the profile."""
        return replace(self, excluded=excluded)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "history": self.history.to_dict(),
            "languages": [lang.to_dict() for lang in self.languages],
            "dependencies": {eco: list(deps) for eco, deps in self.dependencies.items()},
            "patterns": list(self.patterns),
            "file_counts": self.file_counts.to_dict(),
            "excluded": self.excluded,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RepoFeatureRecord":
        counts = data.get("file_counts", {})
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            history=RepoHistory.from_dict(data.get("history", {})),
            languages=[
                LanguageStat(
                    name=lang["name"],
                    file_count=int(lang.get("file_count", 0)),
                    percentage=int(lang.get("percentage", 0)),
                )
                for lang in data.get("languages", [])
            ],
            dependencies={eco: list(deps) for eco, deps in data.get("dependencies", {}).items()},
            patterns=list(data.get("patterns", [])),
            file_counts=FileCounts(
                total=int(counts.get("total", 0)),
                code=int(counts.get("code", 0)),
                config=int(counts.get("config", 0)),
                docs=int(counts.get("docs", 0)),
                assets=int(counts.get("assets", 0)),
            ),
            excluded=bool(data.get("excluded", False)),
        )


# ---------------------------------------------------------------------------
# Skills profile
# ---------------------------------------------------------------------------

@dataclass
class LanguageSkill:
    file_count: int
    repo_count: int
    proficiency: Proficiency
    level: str = "language"
    aliases: list[str] = field(default_factory=list)
    parent: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "file_count": self.file_count,
            "repo_count": self.repo_count,
            "proficiency": self.proficiency.value,
            "level": self.level,
            "aliases": self.aliases,
        }
        if self.parent:
            data["parent"] = self.parent
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LanguageSkill":
        return cls(
            file_count=int(data.get("file_count", 0)),
            repo_count=int(data.get("repo_count", 0)),
            proficiency=Proficiency(data.get("proficiency", "familiar")),
            level=data.get("level", "language"),
            aliases=list(data.get("aliases", [])),
            parent=data.get("parent"),
        )


@dataclass
class FrameworkSkill:
    key: str
    category: str
    repo_count: int
    proficiency: Proficiency

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "category": self.category,
            "repo_count": self.repo_count,
            "proficiency": self.proficiency.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FrameworkSkill":
        return cls(
            key=data.get("key", ""),
            category=data.get("category", ""),
            repo_count=int(data.get("repo_count", 0)),
            proficiency=Proficiency(data.get("proficiency", "familiar")),
        )


@dataclass
class ToolUsage:
    ecosystem: str
    repo_count: int

    def to_dict(self) -> dict:
        return {"ecosystem": self.ecosystem, "repo_count": self.repo_count}


@dataclass
class ProfileSummary:
    total_repos: int = 0
    excluded_repos: int = 0
    total_commits: int = 0
    years_active: int = 1
    top_languages: list[str] = field(default_factory=list)
    top_frameworks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_repos": self.total_repos,
            "excluded_repos": self.excluded_repos,
            "total_commits": self.total_commits,
            "years_active": self.years_active,
            "top_languages": self.top_languages,
            "top_frameworks": self.top_frameworks,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileSummary":
        return cls(
            total_repos=int(data.get("total_repos", 0)),
            excluded_repos=int(data.get("excluded_repos", 0)),
            total_commits=int(data.get("total_commits", 0)),
            years_active=max(1, int(data.get("years_active", 1))),
            top_languages=list(data.get("top_languages", [])),
            top_frameworks=list(data.get("top_frameworks", [])),
        )


@dataclass
class SkillsProfile:
    """Aggregated skills derived from every analyzed repository."""
    languages: dict[str, LanguageSkill] = field(default_factory=dict)
    frameworks: dict[str, FrameworkSkill] = field(default_factory=dict)
    tools: dict[str, ToolUsage] = field(default_factory=dict)
    patterns: list[str] = field(default_factory=list)
    domains: list[str] = field(default_factory=list)
    summary: ProfileSummary = field(default_factory=ProfileSummary)

    @property
    def is_empty(self) -> bool:
        return not self.languages and not self.frameworks

    def to_dict(self) -> dict:
        return {
            "languages": {name: skill.to_dict() for name, skill in self.languages.items()},
            "frameworks": {name: skill.to_dict() for name, skill in self.frameworks.items()},
            "tools": {name: tool.to_dict() for name, tool in self.tools.items()},
            "patterns": self.patterns,
            "domains": self.domains,
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SkillsProfile":
        return cls(
            languages={
                name: LanguageSkill.from_dict(skill)
                for name, skill in data.get("languages", {}).items()
            },
            frameworks={
                name: FrameworkSkill.from_dict(skill)
                for name, skill in data.get("frameworks", {}).items()
            },
            tools={
                name: ToolUsage(ecosystem=tool.get("ecosystem", ""), repo_count=int(tool.get("repo_count", 0)))
                for name, tool in data.get("tools", {}).items()
            },
            patterns=list(data.get("patterns", [])),
            domains=list(data.get("domains", [])),
            summary=ProfileSummary.from_dict(data.get("summary", {})),
        )


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

@dataclass
class JobRecord:
    """A normalized job posting."""
    id: str
    title: str
    company: str
    url: Optional[str] = None
    description: str = ""
    skills: list[str] = field(default_factory=list)
    location: str = "Not specified"
    salary: Any = None
    type: str = "full-time"
    remote: Optional[bool] = None
    source: str = "manual"
    date_posted: str = ""
    date_added: str = ""
    status: str = "new"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "url": self.url,
            "description": self.description,
            "skills": self.skills,
            "location": self.location,
            "salary": self.salary,
            "type": self.type,
            "remote": self.remote,
            "source": self.source,
            "date_posted": self.date_posted,
            "date_added": self.date_added,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobRecord":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            company=data.get("company", ""),
            url=data.get("url"),
            description=data.get("description") or "",
            skills=list(data.get("skills") or []),
            location=data.get("location") or "Not specified",
            salary=data.get("salary"),
            type=data.get("type") or "full-time",
            remote=data.get("remote"),
            source=data.get("source") or "manual",
            date_posted=data.get("date_posted") or "",
            date_added=data.get("date_added") or "",
            status=data.get("status") or "new",
        )


@dataclass
class IngestResult:
    """Outcome of one bulk ingestion."""
    added: int = 0
    skipped: int = 0
    errors: list = field(default_factory=list)  # list[JobValidationError]
    jobs: list[JobRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "added": self.added,
            "skipped": self.skipped,
            "errors": [e.to_dict() for e in self.errors],
            "total_jobs": len(self.jobs),
        }


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

@dataclass
class Preferences:
    """What the user wants to work with, wants to avoid, and where."""
    want_skills: list[str] = field(default_factory=list)
    avoid_skills: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "want_skills": self.want_skills,
            "avoid_skills": self.avoid_skills,
            "locations": self.locations,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Preferences":
        data = data or {}
        return cls(
            want_skills=list(data.get("want_skills") or []),
            avoid_skills=list(data.get("avoid_skills") or []),
            locations=list(data.get("locations") or []),
        )


@dataclass
class MatchedSkill:
    name: str
    type: str  # language or framework
    proficiency: Proficiency

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "proficiency": self.proficiency.value}


@dataclass
class MatchResult:
    """Score of one job against the current skills profile."""
    job: JobRecord
    score: int = 0
    base_score: int = 0
    matched_skills: list[MatchedSkill] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    bonus_skills: list[MatchedSkill] = field(default_factory=list)
    location_match: bool = True
    want_match: bool = False
    has_avoid: bool = False

    def to_dict(self) -> dict:
        return {
            "job": self.job.to_dict(),
            "score": self.score,
            "base_score": self.base_score,
            "matched_skills": [s.to_dict() for s in self.matched_skills],
            "missing_skills": self.missing_skills,
            "bonus_skills": [s.to_dict() for s in self.bonus_skills],
            "location_match": self.location_match,
            "want_match": self.want_match,
            "has_avoid": self.has_avoid,
        }


@dataclass
class MatchCategories:
    want: list[MatchResult] = field(default_factory=list)
    qualified: list[MatchResult] = field(default_factory=list)
    stretch: list[MatchResult] = field(default_factory=list)
    filtered: list[MatchResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "want": [m.to_dict() for m in self.want],
            "qualified": [m.to_dict() for m in self.qualified],
            "stretch": [m.to_dict() for m in self.stretch],
            "filtered": [m.to_dict() for m in self.filtered],
        }
