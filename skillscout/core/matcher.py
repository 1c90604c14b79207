"""
Job Matcher - Scores jobs against a skills profile and sorts them into tiers.

Scores:
- Base score: share of the job's listed skills covered by the profile
- Want bonus: +10 per matched skill the user wants to work with
- Avoid penalty: -15 per job skill the user wants to avoid
- Location: whether the job fits the preferred locations

Categories:
- want: wanted skills, score >= 50, location ok, nothing to avoid
- qualified: score >= 50, location ok, no wanted skills, nothing to avoid
- stretch: 25 <= score < 50, location ok (may also be filtered)
- filtered: wrong location or has skills to avoid
"""

from typing import Iterable, Optional
import logging

from .models import (
    JobRecord,
    MatchCategories,
    MatchedSkill,
    MatchResult,
    Preferences,
    SkillsProfile,
)
from .taxonomy import language_info


class JobMatcher:
    """Matches job postings against a skills profile and user preferences."""

    WANT_BONUS = 10
    AVOID_PENALTY = 15
    QUALIFIED_SCORE = 50
    STRETCH_SCORE = 25

    def __init__(self, profile: SkillsProfile, preferences: Optional[Preferences] = None):
        self.profile = profile
        self.preferences = preferences or Preferences()
        self.logger = logging.getLogger(self.__class__.__name__)

    def match_job(self, job: JobRecord) -> MatchResult:
        """Score a single job."""
        matched, missing, bonus = self._get_skill_details(job)

        base_score = round(100 * len(matched) / max(1, len(job.skills)))
        base_score = max(0, min(100, base_score))

        want_score = self._calculate_want_score(matched)
        avoid_penalty = self._calculate_avoid_penalty(job)
        score = max(0, min(100, base_score + want_score - avoid_penalty))

        return MatchResult(
            job=job,
            score=score,
            base_score=base_score,
            matched_skills=matched,
            missing_skills=missing,
            bonus_skills=bonus,
            location_match=self._calculate_location_match(job),
            want_match=want_score > 0,
            has_avoid=avoid_penalty > 0,
        )

    def _get_skill_details(self, job: JobRecord) -> tuple[list[MatchedSkill], list[str], list[MatchedSkill]]:
        """Split the profile into skills the job lists, mentions, or lacks."""
        job_skills = [s.lower() for s in job.skills]
        description = (job.description or "").lower()

        matched = []
        bonus = []

        for name, language in self.profile.languages.items():
            aliases = language.aliases or list(language_info(name).aliases)
            names = [name.lower()] + [a.lower() for a in aliases]

            if any(n in job_skills for n in names):
                matched.append(MatchedSkill(name, "language", language.proficiency))
            elif any(n in description for n in names):
                bonus.append(MatchedSkill(name, "language", language.proficiency))

        for name, framework in self.profile.frameworks.items():
            name_lower = name.lower()
            if name_lower in job_skills or name_lower in description:
                matched.append(MatchedSkill(name, "framework", framework.proficiency))

        matched_names = {m.name.lower() for m in matched}
        missing = [skill for skill in job_skills if skill not in matched_names]

        return matched, missing, bonus

    def _calculate_want_score(self, matched: list[MatchedSkill]) -> int:
        wants = [w.lower() for w in self.preferences.want_skills if w]
        if not wants:
            return 0
        hits = [m for m in matched if any(w in m.name.lower() for w in wants)]
        return len(hits) * self.WANT_BONUS

    def _calculate_avoid_penalty(self, job: JobRecord) -> int:
        avoids = [a.lower() for a in self.preferences.avoid_skills if a]
        if not avoids:
            return 0
        hits = [s for s in job.skills if any(a in s.lower() for a in avoids)]
        return len(hits) * self.AVOID_PENALTY

    def _calculate_location_match(self, job: JobRecord) -> bool:
        locations = [loc.lower() for loc in self.preferences.locations if loc]
        if not locations:
            return True

        job_location = (job.location or "").lower()
        is_remote = bool(job.remote) or "remote" in job_location

        for preferred in locations:
            if preferred == "remote":
                if is_remote:
                    return True
            elif preferred in job_location:
                return True
        return False

    def rank_jobs(self, jobs: Iterable[JobRecord]) -> list[MatchResult]:
        """
        Score every job and sort by score, highest first.

        Jobs with equal scores keep their input order.
        """
        results = [self.match_job(job) for job in jobs]
        results.sort(key=lambda m: m.score, reverse=True)
        self.logger.info(f"Matched {len(results)} jobs against profile")
        return results

    def categorize(self, matches: Iterable[MatchResult]) -> MatchCategories:
        """Sort match results into want / qualified / stretch / filtered."""
        return categorize_matches(matches)


def categorize_matches(matches: Iterable[MatchResult]) -> MatchCategories:
    """Partition match results into priority tiers."""
    categories = MatchCategories()
    qualified = JobMatcher.QUALIFIED_SCORE
    stretch = JobMatcher.STRETCH_SCORE

    for m in matches:
        if m.want_match and m.score >= qualified and m.location_match and not m.has_avoid:
            categories.want.append(m)
        elif m.score >= qualified and m.location_match and not m.want_match and not m.has_avoid:
            categories.qualified.append(m)
        elif stretch <= m.score < qualified and m.location_match:
            categories.stretch.append(m)

        if not m.location_match or m.has_avoid:
            categories.filtered.append(m)

    return categories


def match_jobs_to_profile(
    jobs: Iterable[JobRecord],
    profile: SkillsProfile,
    preferences: Optional[Preferences] = None,
) -> list[MatchResult]:
    """Score and rank jobs against a skills profile."""
    return JobMatcher(profile, preferences).rank_jobs(jobs)
