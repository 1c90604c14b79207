"""
Git history provider - reads commit history through the local git binary.

Only local refs are consulted; nothing is fetched.
"""

from datetime import datetime
from typing import Optional
import re
import shutil
import subprocess

from .base import HistoryProvider
from skillscout.core.models import AuthorStat, RepoHistory, parse_timestamp


class GitHistoryProvider(HistoryProvider):
    """HistoryProvider backed by the ``git`` command line tool."""

    TOP_AUTHORS = 5

    def __init__(self, git_binary: str = "git", timeout: Optional[float] = None):
        """
        Args:
            git_binary: Name or path of the git executable
            timeout: Seconds allowed per git invocation (None = no limit)
        """
        super().__init__()
        self.git_binary = git_binary
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which(self.git_binary) is not None

    def get_repo_history(self, repo_path: str, now: Optional[datetime] = None) -> RepoHistory:
        last_commit = parse_timestamp(self._git(repo_path, "log", "-1", "--format=%cI"))
        if last_commit is None:
            return RepoHistory.unavailable()

        first_lines = (self._git(repo_path, "log", "--reverse", "--format=%cI") or "").splitlines()
        first_commit = parse_timestamp(first_lines[0]) if first_lines else None

        has_remote = bool(self._git(repo_path, "remote"))
        behind = 0
        if has_remote and self._git(repo_path, "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"):
            behind = self._parse_int(self._git(repo_path, "rev-list", "--count", "HEAD..@{upstream}"))

        days = self.days_since(last_commit, now)
        return RepoHistory(
            last_commit=last_commit,
            first_commit=first_commit or last_commit,
            commit_count=self._parse_int(self._git(repo_path, "rev-list", "--count", "HEAD")),
            current_branch=self._git(repo_path, "branch", "--show-current") or "",
            has_remote=has_remote,
            commits_behind_upstream=behind,
            days_since_last_commit=days,
            freshness=self.classify_freshness(days),
            top_authors=self._top_authors(repo_path),
        )

    def _top_authors(self, repo_path: str) -> list[AuthorStat]:
        output = self._git(repo_path, "shortlog", "-sn", "HEAD") or ""
        authors = []
        for line in output.splitlines():
            match = re.match(r"\s*(\d+)\s+(.+)", line)
            if match:
                authors.append(AuthorStat(name=match.group(2).strip(), commits=int(match.group(1))))
        return authors[:self.TOP_AUTHORS]

    def _git(self, repo_path: str, *args: str) -> Optional[str]:
        """Run one git command; return stripped stdout, or None on any failure."""
        try:
            result = subprocess.run(
                [self.git_binary, *args],
                cwd=repo_path,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                stdin=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.debug(f"git {' '.join(args)} failed in {repo_path}: {e}")
            return None

        if result.returncode != 0:
            self.logger.debug(f"git {' '.join(args)} exited {result.returncode} in {repo_path}")
            return None
        return result.stdout.strip()

    @staticmethod
    def _parse_int(value: Optional[str]) -> int:
        try:
            return int(value) if value else 0
        except ValueError:
            return 0
