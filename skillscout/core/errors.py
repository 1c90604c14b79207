"""
Error types raised or reported by the skillscout core.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


class SkillScoutError(Exception):
    """Base class for errors raised by skillscout."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        data = {"success": False, "error": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class DiscoveryError(SkillScoutError):
    """The discovery root directory could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read repository root {path}: {reason}", {"path": path})
        self.path = path


class IngestError(SkillScoutError):
    """A job import payload was missing or could not be parsed."""


@dataclass
class JobValidationError:
    """A raw job entry rejected during ingestion."""
    job: Any
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"job": self.job, "errors": self.errors}
