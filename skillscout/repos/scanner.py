"""
Repository scanner - discovers repositories under a root and extracts each one.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Optional
import logging

from .base import HistoryProvider
from .discovery import discover_repositories
from .extractor import RepoExtractor
from skillscout.core.models import DiscoveredRepo, RepoFeatureRecord


class RepoScanner:
    """Runs discovery and feature extraction over a directory of repositories."""

    def __init__(
        self,
        history_provider: Optional[HistoryProvider] = None,
        workers: int = 1,
    ):
        """
        Args:
            history_provider: Source of commit history (default: local git)
            workers: Repositories extracted concurrently; 1 runs sequentially
        """
        self.extractor = RepoExtractor(history_provider)
        self.workers = max(1, workers)
        self.logger = logging.getLogger(self.__class__.__name__)

    def scan(self, root_path: str, now: Optional[datetime] = None) -> list[RepoFeatureRecord]:
        """
        Analyze every repository directly under ``root_path``.

        Records come back in discovery order. A repository whose extraction
        fails unexpectedly is logged and left out.

        Raises:
            DiscoveryError: If ``root_path`` cannot be read
        """
        repos = discover_repositories(root_path)
        if not repos:
            self.logger.warning(f"No repositories found under {root_path}")
            return []

        if self.workers > 1 and len(repos) > 1:
            return self._scan_parallel(repos, now)
        return self._scan_sequential(repos, now)

    def _scan_sequential(self, repos: list[DiscoveredRepo], now: Optional[datetime]) -> list[RepoFeatureRecord]:
        records = []
        for repo in repos:
            record = self._extract(repo, now)
            if record is not None:
                records.append(record)
        return records

    def _scan_parallel(self, repos: list[DiscoveredRepo], now: Optional[datetime]) -> list[RepoFeatureRecord]:
        results: dict[str, RepoFeatureRecord] = {}

        with ThreadPoolExecutor(max_workers=min(self.workers, len(repos))) as executor:
            futures = {executor.submit(self._extract, repo, now): repo for repo in repos}
            for future in as_completed(futures):
                repo = futures[future]
                record = future.result()
                if record is not None:
                    results[repo.path] = record

        return [results[repo.path] for repo in repos if repo.path in results]

    def _extract(self, repo: DiscoveredRepo, now: Optional[datetime]) -> Optional[RepoFeatureRecord]:
        try:
            return self.extractor.extract(repo.path, now=now)
        except Exception as e:
            self.logger.warning(f"Could not analyze {repo.name}: {e}")
            return None


def scan_repositories(
    root_path: str,
    history_provider: Optional[HistoryProvider] = None,
    workers: int = 1,
) -> list[RepoFeatureRecord]:
    """Discover and analyze every repository under ``root_path``."""
    return RepoScanner(history_provider, workers=workers).scan(root_path)
