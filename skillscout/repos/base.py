"""
Base class for version-control history providers.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
import logging

from skillscout.core.models import Freshness, RepoHistory


class HistoryProvider(ABC):
    """Reads the local history of a repository."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @abstractmethod
    def get_repo_history(self, repo_path: str, now: Optional[datetime] = None) -> RepoHistory:
        """
        Summarize the history of one repository.

        Implementations never raise: any failure yields
        ``RepoHistory.unavailable()``.

        Args:
            repo_path: Repository working tree
            now: Reference time for freshness (default: current time)

        Returns:
            RepoHistory, or the unavailable sentinel
        """
        pass

    def is_available(self) -> bool:
        """Whether the provider can run in this environment."""
        return True

    @staticmethod
    def days_since(timestamp: datetime, now: Optional[datetime] = None) -> int:
        """Whole days between ``timestamp`` and ``now``, never negative."""
        if now is None:
            now = datetime.now(timezone.utc)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return max(0, int((now - timestamp).total_seconds() // 86400))

    @staticmethod
    def classify_freshness(days: Optional[int]) -> Freshness:
        return Freshness.from_days(days)
