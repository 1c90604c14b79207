"""
Local repository discovery and static feature extraction.
"""

from .base import HistoryProvider
from .git_history import GitHistoryProvider
from .discovery import discover_repositories
from .extractor import RepoExtractor, extract_repo_features
from .scanner import RepoScanner, scan_repositories

__all__ = [
    "HistoryProvider",
    "GitHistoryProvider",
    "discover_repositories",
    "RepoExtractor",
    "extract_repo_features",
    "RepoScanner",
    "scan_repositories",
]
