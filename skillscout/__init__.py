"""
skillscout - Build a skills profile from local repositories and match it to jobs

This package:
1. Discovers the git repositories under a directory
2. Extracts languages, dependencies, conventions and history from each one
3. Aggregates them into a skills profile with proficiency tiers
4. Ingests job postings from JSON files, deduplicating as it goes
5. Scores and categorizes jobs against the profile and your preferences
"""

__version__ = "1.0.0"

from skillscout.core import (
    IngestError,
    DiscoveryError,
    build_skills_profile,
    categorize_matches,
    ingest_jobs,
    match_jobs_to_profile,
)
from skillscout.repos import discover_repositories, extract_repo_features

__all__ = [
    "IngestError",
    "DiscoveryError",
    "build_skills_profile",
    "categorize_matches",
    "discover_repositories",
    "extract_repo_features",
    "ingest_jobs",
    "match_jobs_to_profile",
]
