"""
skillscout CLI - Command line interface for repository analysis and job matching.

Usage:
    python -m skillscout [command] [options]

Commands:
    analyze     Analyze the repositories under a directory
    skills      Show the saved skills profile
    jobs        Ingest, list or summarize job postings
    match       Match saved jobs against the skills profile
    config      Manage configuration

Examples:
    python -m skillscout analyze --path ~/Code --save
    python -m skillscout jobs --ingest jobs.json
    python -m skillscout match --want react --location Remote --json
    python -m skillscout config --set preferences.locations '["Remote"]'
"""

import argparse
import json
import logging
import sys
from typing import Optional

from skillscout import __version__
from skillscout.core import (
    JobIngestor,
    JobMatcher,
    Preferences,
    SkillScoutError,
    SkillsProfile,
    build_skills_profile,
    job_stats,
)
from skillscout.repos import GitHistoryProvider, RepoScanner
from skillscout.storage import JsonStore
from skillscout.utils import Config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillscout",
        description="skillscout - Build a skills profile from your repositories and match it to jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", "-c", help="Path to config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze repositories")
    analyze_parser.add_argument("--path", "-p", help="Directory containing repositories")
    analyze_parser.add_argument("--workers", "-w", type=int, help="Repositories analyzed in parallel")
    analyze_parser.add_argument("--exclude", "-x", action="append", default=[], metavar="NAME",
                                help="Exclude a repository from the profile (repeatable)")
    analyze_parser.add_argument("--include", action="append", default=[], metavar="NAME",
                                help="Re-include a previously excluded repository (repeatable)")
    analyze_parser.add_argument("--save", action="store_true", help="Save records and profile")
    analyze_parser.add_argument("--json", action="store_true", help="Output JSON")

    # Skills command
    skills_parser = subparsers.add_parser("skills", help="Show skills profile")
    skills_parser.add_argument("--json", action="store_true", help="Output JSON")

    # Jobs command
    jobs_parser = subparsers.add_parser("jobs", help="Manage job postings")
    jobs_parser.add_argument("--ingest", "-i", metavar="FILE", help="Import jobs from a JSON file")
    jobs_parser.add_argument("--list", "-l", action="store_true", help="List all jobs")
    jobs_parser.add_argument("--json", action="store_true", help="Output JSON")

    # Match command
    match_parser = subparsers.add_parser("match", help="Match jobs to your skills")
    match_parser.add_argument("--want", help="Comma-separated skills you want to use")
    match_parser.add_argument("--avoid", help="Comma-separated skills you want to avoid")
    match_parser.add_argument("--location", help="Comma-separated preferred locations")
    match_parser.add_argument("--top", "-t", type=int, default=10, help="Show top N per category (counts cover all jobs)")
    match_parser.add_argument("--json", action="store_true", help="Output JSON")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set a config value")
    config_parser.add_argument("--init", action="store_true", help="Initialize default config")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = Config(args.config)

    commands = {
        "analyze": cmd_analyze,
        "skills": cmd_skills,
        "jobs": cmd_jobs,
        "match": cmd_match,
        "config": cmd_config,
    }

    try:
        return commands[args.command](args, config)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled.", file=sys.stderr)
        return 1
    except SkillScoutError as e:
        return _report_error(e, getattr(args, "json", False))


def _emit(data: dict) -> None:
    print(json.dumps(data, indent=2, default=str))


def _report_error(error: SkillScoutError, as_json: bool) -> int:
    if as_json:
        _emit(error.to_dict())
    else:
        print(f"Error: {error.message}", file=sys.stderr)
    return 1


def _fail(message: str, as_json: bool, details=None) -> int:
    return _report_error(SkillScoutError(message, details), as_json)


def _split(value: Optional[str]) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []


def cmd_analyze(args, config: Config) -> int:
    """Execute analyze command."""
    root = args.path or config.get_scan_root()
    workers = args.workers or config.get_workers()
    store = JsonStore(config.get_data_dir())

    if not args.json:
        print(f"🔍 Analyzing repositories in {root}...")

    scanner = RepoScanner(GitHistoryProvider(timeout=config.get_git_timeout()), workers=workers)
    records = scanner.scan(root)

    if not records:
        return _fail("No git repositories found", args.json, {"path": root})

    # Carry over earlier curation, then apply this run's choices
    previously_excluded = {r.path for r in store.load_repos() if r.excluded}
    exclude = set(args.exclude)
    include = set(args.include)
    records = [
        r.with_excluded(
            r.name not in include and (r.name in exclude or r.path in previously_excluded)
        )
        for r in records
    ]

    profile = build_skills_profile(records)

    if args.save:
        store.save_repos(records)
        store.save_skills_profile(profile)

    if args.json:
        _emit({
            "success": True,
            "path": root,
            "repos_analyzed": len(records),
            "saved": args.save,
            "profile": profile.to_dict(),
            "repos": [
                {
                    "name": r.name,
                    "path": r.path,
                    "languages": [lang.to_dict() for lang in r.languages[:5]],
                    "patterns": r.patterns,
                    "commits": r.history.commit_count,
                    "freshness": r.history.freshness.value,
                    "excluded": r.excluded,
                }
                for r in records
            ],
        })
        return 0

    print(f"\n✅ Analyzed {len(records)} repositories\n")
    for r in records:
        langs = ", ".join(f"{lang.name} {lang.percentage}%" for lang in r.languages[:3])
        marker = " (excluded)" if r.excluded else ""
        print(f"  {r.name}{marker}")
        print(f"    {r.history.freshness.value} | {r.history.commit_count} commits | {langs or 'no code'}")
    print()
    _print_profile(profile)
    if args.save:
        print(f"\n💾 Saved profile to {store.skills_path}")
    return 0


def cmd_skills(args, config: Config) -> int:
    """Execute skills command."""
    profile = JsonStore(config.get_data_dir()).load_skills_profile()

    if profile is None:
        return _fail("No skills profile found. Run: skillscout analyze --save", args.json)

    if args.json:
        _emit({"success": True, "profile": profile.to_dict()})
    else:
        _print_profile(profile)
    return 0


def _print_profile(profile: SkillsProfile) -> None:
    summary = profile.summary
    print("📋 Skills Profile\n")
    print(f"Experience: {summary.years_active} years across {summary.total_repos} projects")
    print(f"Total commits: {summary.total_commits}")

    languages = [
        f"{name} ({skill.proficiency.value})"
        for name, skill in profile.languages.items()
        if skill.level == "language"
    ]
    if languages:
        print(f"\nLanguages: {', '.join(languages)}")

    if profile.frameworks:
        frameworks = [f"{name} ({fw.proficiency.value})" for name, fw in profile.frameworks.items()]
        print(f"Frameworks & Libraries: {', '.join(frameworks)}")

    if profile.tools:
        print(f"Tools: {', '.join(profile.tools)}")

    if profile.domains:
        print(f"Domain Expertise: {', '.join(profile.domains)}")


def cmd_jobs(args, config: Config) -> int:
    """Execute jobs command."""
    store = JsonStore(config.get_data_dir())

    if args.ingest:
        ingestor = JobIngestor(infer_skills=config.infer_skills())
        result = ingestor.ingest_file(args.ingest, store)

        if args.json:
            _emit({"success": True, "action": "ingest", "file": args.ingest, **result.to_dict()})
        else:
            print(f"✅ Added {result.added} jobs, skipped {result.skipped} duplicates")
            for error in result.errors:
                print(f"   ❌ {'; '.join(error.errors)}")
            print(f"   Total jobs: {len(result.jobs)}")
        return 0

    jobs = store.load_jobs()

    if args.list:
        if args.json:
            _emit({"success": True, "count": len(jobs), "jobs": [job.to_dict() for job in jobs]})
        else:
            for i, job in enumerate(jobs, 1):
                remote = " (remote)" if job.remote else ""
                print(f"{i:3}. {job.title} @ {job.company}")
                print(f"     {job.location}{remote} | {', '.join(job.skills) or 'no skills listed'}")
                print(f"     ID: {job.id}")
        return 0

    stats = job_stats(jobs)
    if args.json:
        _emit({"success": True, **stats})
    else:
        print(f"📊 {stats['total']} jobs from {stats['companies']} companies")
        print(f"   Remote: {stats['remote']} | With salary: {stats['with_salary']}")
        for status, count in stats["by_status"].items():
            print(f"   {status}: {count}")
    return 0


def cmd_match(args, config: Config) -> int:
    """Execute match command."""
    store = JsonStore(config.get_data_dir())
    profile = store.load_skills_profile()
    jobs = store.load_jobs()

    if profile is None or profile.is_empty:
        return _fail("No skills profile found. Run: skillscout analyze --save", args.json)
    if not jobs:
        return _fail("No jobs to match. Run: skillscout jobs --ingest FILE", args.json)

    defaults = config.get_preferences()
    preferences = Preferences(
        want_skills=_split(args.want) or defaults.want_skills,
        avoid_skills=_split(args.avoid) or defaults.avoid_skills,
        locations=_split(args.location) or defaults.locations,
    )

    matcher = JobMatcher(profile, preferences)
    matches = matcher.rank_jobs(jobs)
    categories = matcher.categorize(matches)

    if args.json:
        _emit({
            "success": True,
            "total_jobs": len(jobs),
            "preferences": preferences.to_dict(),
            "counts": {
                "want": len(categories.want),
                "qualified": len(categories.qualified),
                "stretch": len(categories.stretch),
                "filtered": len(categories.filtered),
            },
            **{tier: results[:args.top] for tier, results in categories.to_dict().items()},
        })
        return 0

    sections = [
        ("🎯 Want", categories.want),
        ("✅ Qualified", categories.qualified),
        ("🧗 Stretch", categories.stretch),
    ]
    for title, results in sections:
        print(f"\n{title} ({len(results)})")
        print("-" * 60)
        for m in results[:args.top]:
            print(f"  {m.score:3}%  {m.job.title} @ {m.job.company}")
            if m.matched_skills:
                print(f"        Matched: {', '.join(s.name for s in m.matched_skills[:5])}")
            if m.missing_skills:
                print(f"        Missing: {', '.join(m.missing_skills[:3])}")
    print(f"\nFiltered out: {len(categories.filtered)}")
    return 0


def cmd_config(args, config: Config) -> int:
    """Execute config command."""
    if args.init:
        config = Config.create_default_config(args.config)
        print(f"✅ Created config at {config.config_path}")

    elif args.show:
        print("\n📋 Current Configuration\n")
        config.print_config()

    elif args.set:
        key, value = args.set
        # Try to parse as JSON for complex values
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config.set(key, value)
        config.save()
        print(f"✅ Set {key} = {value}")

    else:
        print("Use --show, --set, or --init")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
