"""Core models, profile building, job ingestion and matching."""

from .errors import DiscoveryError, IngestError, JobValidationError, SkillScoutError
from .models import (
    DiscoveredRepo,
    FileCounts,
    Freshness,
    IngestResult,
    JobRecord,
    LanguageStat,
    MatchCategories,
    MatchResult,
    Preferences,
    Proficiency,
    RepoFeatureRecord,
    RepoHistory,
    SkillsProfile,
)
from .profile_builder import SkillsProfileBuilder, build_skills_profile
from .ingest import JobIngestor, ingest_jobs, ingest_jobs_from_file, job_stats
from .matcher import JobMatcher, categorize_matches, match_jobs_to_profile

__all__ = [
    "DiscoveryError",
    "IngestError",
    "JobValidationError",
    "SkillScoutError",
    "DiscoveredRepo",
    "FileCounts",
    "Freshness",
    "IngestResult",
    "JobRecord",
    "LanguageStat",
    "MatchCategories",
    "MatchResult",
    "Preferences",
    "Proficiency",
    "RepoFeatureRecord",
    "RepoHistory",
    "SkillsProfile",
    "SkillsProfileBuilder",
    "build_skills_profile",
    "JobIngestor",
    "ingest_jobs",
    "ingest_jobs_from_file",
    "job_stats",
    "JobMatcher",
    "categorize_matches",
    "match_jobs_to_profile",
]
