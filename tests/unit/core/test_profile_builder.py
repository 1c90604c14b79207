import random

import pytest

from skillscout.core.models import Proficiency, RepoFeatureRecord
from skillscout.core.profile_builder import (
    MAX_TOOLS,
    build_skills_profile,
    calculate_proficiency,
    derive_domains,
)


def test_half_of_repos_is_expert(make_record):
    records = [
        make_record(f"r{i}", languages={"JavaScript": 3} if i < 5 else {"Python": 1})
        for i in range(10)
    ]

    profile = build_skills_profile(records)

    assert profile.summary.total_repos == 10
    assert profile.languages["JavaScript"].repo_count == 5
    assert profile.languages["JavaScript"].proficiency is Proficiency.EXPERT


@pytest.mark.parametrize("count, total, weight, expected", [
    (5, 10, 1.0, Proficiency.EXPERT),
    (3, 10, 1.0, Proficiency.ADVANCED),
    (15, 100, 1.0, Proficiency.INTERMEDIATE),
    (1, 10, 1.0, Proficiency.FAMILIAR),
    (2, 10, 1.5, Proficiency.ADVANCED),
    (1, 10, 1.5, Proficiency.INTERMEDIATE),
    (0, 10, 1.0, Proficiency.FAMILIAR),
    (3, 0, 1.0, Proficiency.FAMILIAR),
])
def test_proficiency_thresholds(count, total, weight, expected):
    assert calculate_proficiency(count, total, weight) is expected


def test_proficiency_is_monotonic_in_repo_count():
    for weight in (1.0, 1.2, 1.5):
        ranks = [calculate_proficiency(n, 20, weight).rank for n in range(21)]
        assert ranks == sorted(ranks)


def test_excluded_records_contribute_nothing(make_record):
    records = [
        make_record("hidden", languages={"Python": 10}, patterns=["docker"],
                    dependencies={"python": ["flask"]}, excluded=True, commits=99),
        make_record("a", languages={"JavaScript": 2}, commits=3),
        make_record("b", languages={"JavaScript": 1}, commits=4),
    ]

    profile = build_skills_profile(records)

    assert "Python" not in profile.languages
    assert profile.frameworks == {}
    assert profile.summary.total_commits == 7
    assert profile.languages["JavaScript"].proficiency is Proficiency.EXPERT


def test_total_repos_counts_included_records_only(make_record):
    records = [make_record("a"), make_record("b"), make_record("c", excluded=True)]

    summary = build_skills_profile(records).summary

    assert summary.total_repos == 2
    assert summary.excluded_repos == 1


def test_all_records_excluded_gives_empty_profile(make_record):
    profile = build_skills_profile([make_record("a", languages={"Go": 1}, excluded=True)])

    assert profile.is_empty
    assert profile.summary.total_repos == 0
    assert profile.summary.excluded_repos == 1


def test_empty_input():
    profile = build_skills_profile([])

    assert profile.is_empty
    assert profile.tools == {}
    assert profile.domains == []
    assert profile.summary.years_active == 1
    assert profile.summary.total_commits == 0


def test_language_entries_carry_taxonomy_metadata(make_record):
    profile = build_skills_profile([
        make_record("ui", languages={"TypeScript (React)": 4, "SCSS": 2, "JavaScript": 1}),
    ])

    tsx = profile.languages["TypeScript (React)"]
    assert tsx.file_count == 4
    assert tsx.parent == "TypeScript"
    assert profile.languages["SCSS"].level == "styling"
    assert profile.languages["JavaScript"].aliases == ["js", "node", "nodejs"]
    assert "SCSS" not in profile.summary.top_languages


def test_top_languages_are_limited_to_five(make_record):
    names = ["Python", "Go", "Rust", "Java", "Ruby", "PHP", "Lua"]
    records = [
        make_record(f"r{i}", languages={name: 1 for name in names[: i + 1]})
        for i in range(len(names))
    ]

    profile = build_skills_profile(records)

    assert profile.summary.top_languages == ["Python", "Go", "Rust", "Java", "Ruby"]
    assert list(profile.languages) == names


def test_tools_need_two_repos_and_count_each_repo_once(make_record):
    records = [
        make_record("a", dependencies={"npm": ["react", "lodash"], "python": ["react"]}),
        make_record("b", dependencies={"npm": ["react"]}),
        make_record("c", dependencies={"npm": ["react"]}),
    ]

    tools = build_skills_profile(records).tools

    assert list(tools) == ["react"]
    assert tools["react"].repo_count == 3
    assert tools["react"].ecosystem == "npm"


def test_tools_are_capped(make_record):
    deps = [f"dep{i:02}" for i in range(25)]
    records = [make_record("a", dependencies={"npm": deps}), make_record("b", dependencies={"npm": deps})]

    tools = build_skills_profile(records).tools

    assert len(tools) == MAX_TOOLS
    assert list(tools) == deps[:MAX_TOOLS]


def test_frameworks_use_weighted_proficiency(make_record):
    records = [
        make_record("a", patterns=["react", "testing"]),
        make_record("b", patterns=["react"]),
        make_record("c", patterns=["custom-tag"]),
        make_record("d"),
    ]

    profile = build_skills_profile(records)

    assert list(profile.frameworks) == ["React", "Testing"]
    assert profile.frameworks["React"].key == "react"
    assert profile.frameworks["React"].proficiency is Proficiency.EXPERT
    assert profile.frameworks["Testing"].proficiency is Proficiency.ADVANCED
    assert "custom-tag" in profile.patterns
    assert profile.summary.top_frameworks == ["React", "Testing"]


def test_duplicate_patterns_in_one_repo_count_once(make_record):
    profile = build_skills_profile([make_record("a", patterns=["docker", "docker"]), make_record("b")])
    assert profile.frameworks["Docker"].repo_count == 1


def test_domains_from_patterns_and_framework_categories(make_record):
    profile = build_skills_profile([make_record("a", patterns=["react", "docker", "testing"])])
    assert profile.domains == ["DevOps", "Frontend Development", "Quality Assurance"]


def test_derive_domains_ignores_unknown_entries():
    assert derive_domains(["custom-tag"], []) == []


@pytest.mark.parametrize("first_days_ago, last_days_ago, years", [
    (400, 5, 1),
    (1000, 5, 3),
    (10, 5, 1),
])
def test_years_active(make_record, first_days_ago, last_days_ago, years):
    record = make_record("a", first_days_ago=first_days_ago, last_days_ago=last_days_ago)
    assert build_skills_profile([record]).summary.years_active == years


def test_years_active_spans_all_repos(make_record):
    records = [
        make_record("old", first_days_ago=2000, last_days_ago=1500),
        make_record("new", first_days_ago=30, last_days_ago=1),
    ]
    assert build_skills_profile(records).summary.years_active == 5


def test_records_without_history_default_to_one_year():
    profile = build_skills_profile([RepoFeatureRecord(name="x", path="/x")])
    assert profile.summary.years_active == 1
    assert profile.summary.total_repos == 1


def test_profile_is_independent_of_record_order(make_record):
    records = [
        make_record("a", languages={"Python": 3, "Go": 1}, patterns=["docker", "testing"],
                    dependencies={"python": ["flask", "pytest"]}),
        make_record("b", languages={"Go": 2}, patterns=["testing"], dependencies={"go": ["gin"]}),
        make_record("c", languages={"Rust": 1, "Python": 1}, patterns=["docker"],
                    dependencies={"python": ["flask"], "rust": ["serde"]}),
        make_record("d", languages={"Go": 5}, patterns=["kubernetes"], dependencies={"python": ["pytest"]}),
    ]
    expected = build_skills_profile(records).to_dict()

    shuffled = list(records)
    for seed in range(5):
        random.Random(seed).shuffle(shuffled)
        assert build_skills_profile(shuffled).to_dict() == expected


def test_profile_round_trips_through_dict(make_record):
    profile = build_skills_profile([
        make_record("a", languages={"Python": 2}, patterns=["docker"], dependencies={"python": ["x"]}),
        make_record("b", languages={"Python": 1}, dependencies={"python": ["x"]}),
    ])
    restored = type(profile).from_dict(profile.to_dict())
    assert restored.to_dict() == profile.to_dict()
