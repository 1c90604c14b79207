"""
JSON Store - Persists repositories, the skills profile and jobs to a data directory.

A missing file reads as empty. A corrupted file is logged and also treated as
empty, so a damaged store never stops the core from running.
"""

from pathlib import Path
from typing import Any, Optional
import json
import logging

from skillscout.core.models import JobRecord, RepoFeatureRecord, SkillsProfile


class JsonStore:
    """Reads and writes skillscout state as JSON files."""

    JOBS_FILE = "jobs.json"
    SKILLS_FILE = "skills.json"
    REPOS_FILE = "repos.json"

    def __init__(self, data_dir: str = "~/.skillscout"):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the JSON files
        """
        self.data_dir = Path(data_dir).expanduser()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def jobs_path(self) -> Path:
        return self.data_dir / self.JOBS_FILE

    @property
    def skills_path(self) -> Path:
        return self.data_dir / self.SKILLS_FILE

    @property
    def repos_path(self) -> Path:
        return self.data_dir / self.REPOS_FILE

    def load_jobs(self) -> list[JobRecord]:
        """Load the job collection (empty if missing or unreadable)."""
        data = self._read(self.jobs_path)
        if not isinstance(data, list):
            return []

        jobs = []
        for entry in data:
            try:
                jobs.append(JobRecord.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                self.logger.warning(f"Skipping malformed job in {self.jobs_path}: {e}")
        return jobs

    def save_jobs(self, jobs: list[JobRecord]) -> None:
        """Rewrite the whole job collection."""
        self._write(self.jobs_path, [job.to_dict() for job in jobs])
        self.logger.info(f"Saved {len(jobs)} jobs to {self.jobs_path}")

    def load_skills_profile(self) -> Optional[SkillsProfile]:
        """Load the skills profile, or None if there is none."""
        data = self._read(self.skills_path)
        if not isinstance(data, dict):
            return None
        try:
            return SkillsProfile.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.warning(f"Ignoring corrupted skills profile {self.skills_path}: {e}")
            return None

    def save_skills_profile(self, profile: SkillsProfile) -> None:
        self._write(self.skills_path, profile.to_dict())
        self.logger.info(f"Saved skills profile to {self.skills_path}")

    def load_repos(self) -> list[RepoFeatureRecord]:
        """Load the analyzed repository records, including exclusion flags."""
        data = self._read(self.repos_path)
        if not isinstance(data, list):
            return []

        records = []
        for entry in data:
            try:
                records.append(RepoFeatureRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                self.logger.warning(f"Skipping malformed repo record in {self.repos_path}: {e}")
        return records

    def save_repos(self, records: list[RepoFeatureRecord]) -> None:
        self._write(self.repos_path, [record.to_dict() for record in records])
        self.logger.info(f"Saved {len(records)} repo records to {self.repos_path}")

    def _read(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Treating unreadable {path} as empty: {e}")
            return None

    def _write(self, path: Path, data: Any) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)
