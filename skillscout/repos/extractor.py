"""
Repository Feature Extractor - Static analysis of one local repository.

Produces a RepoFeatureRecord from:
- local version-control history (through a HistoryProvider)
- file extensions, mapped to languages and file categories
- dependency manifests at the repository root
- directory conventions and well-known dependencies, mapped to pattern tags

All analysis is local and read-only. Unreadable directories and malformed
manifests degrade the record instead of failing it.
"""

from collections import Counter
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Iterator, Optional
import json
import logging
import os
import re
import tomllib

from .base import HistoryProvider
from .git_history import GitHistoryProvider
from skillscout.core.models import FileCounts, LanguageStat, RepoFeatureRecord, RepoHistory
from skillscout.core.taxonomy import (
    DEPENDENCY_PATTERNS,
    ECOSYSTEM_MANIFESTS,
    EXTENSION_LANGUAGES,
    IGNORED_DIRS,
    PATH_PATTERNS,
    dependency_base_name,
    file_category,
)


def walk_files(root: str) -> Iterator[str]:
    """
    Yield file paths under ``root``, skipping ignored and dot-prefixed entries.

    Symlinks are not followed. A directory that cannot be listed is skipped
    along with everything below it.
    """
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError:
        return

    for entry in entries:
        if entry.name in IGNORED_DIRS or entry.name.startswith("."):
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                yield from walk_files(entry.path)
            elif entry.is_file(follow_symlinks=False):
                yield entry.path
        except OSError:
            continue


def _extension(path: str) -> str:
    return os.path.splitext(path)[1].lower()


def _round_percentage(count: int, total: int) -> int:
    value = Decimal(count * 100) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify_languages(extension_counts: Counter) -> list[LanguageStat]:
    """
    Convert extension counts into languages sorted by file count.

    Percentages are over files with a known language only and are not
    adjusted to sum to exactly 100.
    """
    languages: Counter = Counter()
    for ext, count in extension_counts.items():
        language = EXTENSION_LANGUAGES.get(ext)
        if language:
            languages[language] += count

    total = sum(languages.values())
    if not total:
        return []

    ordered = sorted(languages.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        LanguageStat(name=name, file_count=count, percentage=_round_percentage(count, total))
        for name, count in ordered
    ]


def count_files(paths: list[str]) -> FileCounts:
    """Count files overall and by category."""
    counts = FileCounts(total=len(paths))
    for path in paths:
        category = file_category(_extension(path))
        if category:
            setattr(counts, category, getattr(counts, category) + 1)
    return counts


# ---------------------------------------------------------------------------
# Dependency manifests
# ---------------------------------------------------------------------------

def parse_package_json(content: str) -> list[str]:
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("package.json is not an object")
    deps: dict = {}
    for section in ("dependencies", "devDependencies"):
        value = data.get(section) or {}
        if isinstance(value, dict):
            deps.update(value)
    return list(deps)


_REQUIREMENT_NAME = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)")


def parse_requirements(content: str) -> list[str]:
    names = []
    for line in content.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        match = _REQUIREMENT_NAME.match(line)
        if match and match.group(1) not in names:
            names.append(match.group(1))
    return names


def parse_cargo_toml(content: str) -> list[str]:
    data = tomllib.loads(content)
    deps = data.get("dependencies") or {}
    return list(deps) if isinstance(deps, dict) else []


_GO_REQUIRE_BLOCK = re.compile(r"^require\s*\((.*?)^\)", re.MULTILINE | re.DOTALL)
_GO_REQUIRE_LINE = re.compile(r"^require\s+([^\s(]+)\s+\S+", re.MULTILINE)


def parse_go_mod(content: str) -> list[str]:
    modules = []
    for block in _GO_REQUIRE_BLOCK.findall(content):
        for line in block.splitlines():
            line = line.split("//", 1)[0].strip()
            if line:
                modules.append(line.split()[0])
    modules.extend(_GO_REQUIRE_LINE.findall(content))
    return list(dict.fromkeys(modules))


MANIFEST_PARSERS = {
    "npm": parse_package_json,
    "python": parse_requirements,
    "rust": parse_cargo_toml,
    "go": parse_go_mod,
}


class RepoExtractor:
    """Extracts a RepoFeatureRecord from a repository on disk."""

    def __init__(self, history_provider: Optional[HistoryProvider] = None):
        """
        Args:
            history_provider: Source of commit history (default: local git)
        """
        self.history_provider = history_provider or GitHistoryProvider()
        self.logger = logging.getLogger(self.__class__.__name__)

    def extract(self, repo_path: str, now: Optional[datetime] = None) -> RepoFeatureRecord:
        """Analyze a single repository."""
        path = os.path.abspath(os.path.expanduser(repo_path))

        files = list(walk_files(path))
        extensions = Counter(ext for ext in map(_extension, files) if ext)
        dependencies = self.extract_dependencies(path)

        record = RepoFeatureRecord(
            name=os.path.basename(path.rstrip(os.sep)),
            path=path,
            history=self._history(path, now),
            languages=classify_languages(extensions),
            dependencies=dependencies,
            patterns=self.detect_patterns(path, dependencies),
            file_counts=count_files(files),
        )

        self.logger.info(
            f"Analyzed {record.name}: {record.file_counts.total} files, "
            f"{len(record.languages)} languages, {len(record.patterns)} patterns"
        )
        return record

    def _history(self, path: str, now: Optional[datetime]) -> RepoHistory:
        try:
            return self.history_provider.get_repo_history(path, now=now)
        except Exception as e:
            self.logger.warning(f"History unavailable for {path}: {e}")
            return RepoHistory.unavailable(str(e))

    def extract_dependencies(self, repo_path: str) -> dict[str, list[str]]:
        """Read the dependency manifests present at the repository root."""
        dependencies = {}
        for ecosystem, manifest in ECOSYSTEM_MANIFESTS.items():
            manifest_path = Path(repo_path) / manifest
            if not manifest_path.is_file():
                continue
            try:
                content = manifest_path.read_text(encoding="utf-8", errors="replace")
                dependencies[ecosystem] = MANIFEST_PARSERS[ecosystem](content)
            except (OSError, ValueError, tomllib.TOMLDecodeError) as e:
                self.logger.warning(f"Could not parse {manifest_path}: {e}")
                dependencies[ecosystem] = []
        return dependencies

    def detect_patterns(self, repo_path: str, dependencies: dict[str, list[str]]) -> list[str]:
        """Tag structural conventions and well-known dependencies."""
        patterns = []

        for relative, tag in PATH_PATTERNS:
            if tag not in patterns and os.path.exists(os.path.join(repo_path, relative)):
                patterns.append(tag)

        for deps in dependencies.values():
            for dep in deps:
                tag = DEPENDENCY_PATTERNS.get(dependency_base_name(dep))
                if tag and tag not in patterns:
                    patterns.append(tag)

        return patterns


def extract_repo_features(
    repo_path: str,
    history_provider: Optional[HistoryProvider] = None,
    now: Optional[datetime] = None,
) -> RepoFeatureRecord:
    """Analyze one repository into a RepoFeatureRecord."""
    return RepoExtractor(history_provider).extract(repo_path, now=now)
