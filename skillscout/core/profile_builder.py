"""
Skills Profile Builder - Aggregates repository feature records into one profile.

The builder is a pure function of its input: excluded records are skipped,
the remaining ones are tallied, and every map in the result is ordered by
(-repo_count, name) so any permutation of the same records yields the same
profile.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Iterable, Optional
import logging

from .models import (
    FrameworkSkill,
    LanguageSkill,
    Proficiency,
    ProfileSummary,
    RepoFeatureRecord,
    SkillsProfile,
    ToolUsage,
)
from .taxonomy import (
    CATEGORY_DOMAINS,
    FRAMEWORK_CATEGORIES,
    LOWEST_PROFICIENCY,
    PATTERN_DOMAINS,
    PROFICIENCY_THRESHOLDS,
    language_info,
)


TOP_ENTRIES = 5
MAX_TOOLS = 20
MIN_TOOL_REPOS = 2
DAYS_PER_YEAR = 365


def calculate_proficiency(repo_count: int, total_repos: int, weight: float = 1.0) -> Proficiency:
    """
    Map relative usage to a proficiency tier.

    Args:
        repo_count: Repositories using the skill
        total_repos: Repositories considered
        weight: Multiplier applied to the usage ratio

    Returns:
        The highest tier whose threshold the weighted ratio reaches
    """
    if total_repos <= 0:
        return Proficiency(LOWEST_PROFICIENCY)

    ratio = (repo_count / total_repos) * weight
    for threshold, tier in PROFICIENCY_THRESHOLDS:
        if ratio >= threshold:
            return Proficiency(tier)
    return Proficiency(LOWEST_PROFICIENCY)


def derive_domains(patterns: Iterable[str], frameworks: Iterable[FrameworkSkill]) -> list[str]:
    """Union of the pattern and framework-category domain tables, sorted."""
    domains = {PATTERN_DOMAINS[p] for p in patterns if p in PATTERN_DOMAINS}
    domains.update(
        CATEGORY_DOMAINS[fw.category] for fw in frameworks if fw.category in CATEGORY_DOMAINS
    )
    return sorted(domains)


def _by_repo_count(item: tuple) -> tuple:
    name, entry = item
    return (-entry.repo_count, name)


class SkillsProfileBuilder:
    """Builds a SkillsProfile from a collection of RepoFeatureRecords."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def build(self, records: Iterable[RepoFeatureRecord]) -> SkillsProfile:
        """
        Aggregate repository records into a skills profile.

        ``summary.total_repos`` counts included records only; excluded ones are
        reported in ``summary.excluded_repos`` and contribute to nothing else.
        """
        records = list(records)
        included = [r for r in records if not r.excluded]
        total = len(included)

        language_files: Counter = Counter()
        language_repos: Counter = Counter()
        pattern_counts: Counter = Counter()
        tool_repos: Counter = Counter()
        tool_ecosystems: dict[str, set[str]] = defaultdict(set)
        earliest: Optional[datetime] = None
        latest: Optional[datetime] = None
        total_commits = 0

        for record in included:
            history = record.history
            if history.first_commit and (earliest is None or _before(history.first_commit, earliest)):
                earliest = history.first_commit
            if history.last_commit and (latest is None or _before(latest, history.last_commit)):
                latest = history.last_commit
            total_commits += history.commit_count or 0

            for lang in record.languages:
                language_files[lang.name] += lang.file_count
                language_repos[lang.name] += 1

            for pattern in set(record.patterns):
                pattern_counts[pattern] += 1

            seen_tools = set()
            for ecosystem, deps in record.dependencies.items():
                for dep in deps:
                    tool_ecosystems[dep].add(ecosystem)
                    if dep not in seen_tools:
                        seen_tools.add(dep)
                        tool_repos[dep] += 1

        languages = self._build_languages(language_files, language_repos, total)
        frameworks = self._build_frameworks(pattern_counts, total)
        tools = self._build_tools(tool_repos, tool_ecosystems)
        patterns = [p for p, _ in sorted(pattern_counts.items(), key=lambda kv: (-kv[1], kv[0]))]

        summary = ProfileSummary(
            total_repos=total,
            excluded_repos=len(records) - total,
            total_commits=total_commits,
            years_active=_years_between(earliest, latest),
            top_languages=[
                name for name, skill in languages.items() if skill.level == "language"
            ][:TOP_ENTRIES],
            top_frameworks=list(frameworks)[:TOP_ENTRIES],
        )

        profile = SkillsProfile(
            languages=languages,
            frameworks=frameworks,
            tools=tools,
            patterns=patterns,
            domains=derive_domains(patterns, frameworks.values()),
            summary=summary,
        )

        self.logger.info(
            f"Built profile from {total} repos ({summary.excluded_repos} excluded): "
            f"{len(languages)} languages, {len(frameworks)} frameworks, {len(tools)} tools"
        )
        return profile

    def _build_languages(self, files: Counter, repos: Counter, total: int) -> dict[str, LanguageSkill]:
        entries = {}
        for name, repo_count in repos.items():
            info = language_info(name)
            entries[name] = LanguageSkill(
                file_count=files[name],
                repo_count=repo_count,
                proficiency=calculate_proficiency(repo_count, total),
                level=info.level,
                aliases=list(info.aliases),
                parent=info.parent,
            )
        return dict(sorted(entries.items(), key=_by_repo_count))

    def _build_frameworks(self, pattern_counts: Counter, total: int) -> dict[str, FrameworkSkill]:
        entries = {}
        for pattern, repo_count in pattern_counts.items():
            info = FRAMEWORK_CATEGORIES.get(pattern)
            if info is None:
                continue
            entries[info.name] = FrameworkSkill(
                key=pattern,
                category=info.category,
                repo_count=repo_count,
                proficiency=calculate_proficiency(repo_count, total, info.weight),
            )
        return dict(sorted(entries.items(), key=_by_repo_count))

    def _build_tools(self, repos: Counter, ecosystems: dict[str, set[str]]) -> dict[str, ToolUsage]:
        significant = [
            (name, ToolUsage(ecosystem=sorted(ecosystems[name])[0], repo_count=count))
            for name, count in repos.items()
            if count >= MIN_TOOL_REPOS
        ]
        significant.sort(key=_by_repo_count)
        return dict(significant[:MAX_TOOLS])


def _before(a: datetime, b: datetime) -> bool:
    """Compare timestamps that may mix naive and aware values."""
    try:
        return a < b
    except TypeError:
        return a.replace(tzinfo=None) < b.replace(tzinfo=None)


def _years_between(earliest: Optional[datetime], latest: Optional[datetime]) -> int:
    if earliest is None or latest is None:
        return 1
    try:
        span = latest - earliest
    except TypeError:
        span = latest.replace(tzinfo=None) - earliest.replace(tzinfo=None)
    return max(1, round(span.days / DAYS_PER_YEAR))


def build_skills_profile(records: Iterable[RepoFeatureRecord]) -> SkillsProfile:
    """Build a skills profile from analyzed repositories."""
    return SkillsProfileBuilder().build(records)
