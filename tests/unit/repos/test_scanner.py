from skillscout.repos.scanner import RepoScanner, scan_repositories


def _layout(make_repo, tmp_path):
    root = tmp_path / "code"
    root.mkdir()
    make_repo("zeta", {"main.go": ""}, root=root)
    make_repo("alpha", {"app.py": "", "requirements.txt": "pytest\n"}, root=root)
    make_repo("notes", {"todo.md": ""}, root=root, git=False)
    return root


def test_scan_returns_records_in_discovery_order(make_repo, fake_history, tmp_path, now):
    root = _layout(make_repo, tmp_path)

    records = RepoScanner(fake_history).scan(str(root), now=now)

    assert [r.name for r in records] == ["alpha", "zeta"]
    assert records[0].patterns == ["testing"]
    assert records[1].languages[0].name == "Go"


def test_parallel_scan_matches_sequential(make_repo, fake_history, tmp_path, now):
    root = _layout(make_repo, tmp_path)
    for i in range(6):
        make_repo(f"extra{i}", {f"m{i}.rs": ""}, root=root)

    sequential = RepoScanner(fake_history).scan(str(root), now=now)
    parallel = RepoScanner(fake_history, workers=4).scan(str(root), now=now)

    assert [r.to_dict() for r in parallel] == [r.to_dict() for r in sequential]


def test_failing_history_does_not_drop_repositories(make_repo, make_provider, tmp_path):
    root = _layout(make_repo, tmp_path)

    records = scan_repositories(str(root), history_provider=make_provider(fail=True), workers=2)

    assert len(records) == 2
    assert all(not r.history.is_available for r in records)


def test_empty_root_scans_to_nothing(tmp_path, fake_history):
    assert RepoScanner(fake_history).scan(str(tmp_path)) == []
