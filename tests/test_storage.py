"""Tests for src.retrieval.storage covering persisted mappings.

Run with:
    pytest tests/test_storage.py --maxfail=1 -v --cov=src.retrieval.storage --cov-report=term-missing
"""

import json

from src.correlation.joiner import align_repo_data
from src.retrieval import runner, storage
from src.retrieval.collectors import FetchFailure


def _batch(fake_client):
    client = fake_client({
        "acme/widgets/issues": [[{"number": 10, "title": "Broken", "score": 1.5}]],
        "acme/widgets/pulls": [[
            {"number": 5, "title": "Fix #10", "body": None, "state": "open"},
            {"number": 6, "title": "Docs", "body": "", "state": "closed"},
        ]],
        "acme/widgets/commits": [[{"sha": "abc", "commit": {"message": "closes #10"}}]],
    })
    return runner.collect_repositories(client, ["acme/widgets", "x/y"])


def test_save_json_round_trip(tmp_path):
    data = {"hello": "world"}
    out = tmp_path / "data.json"
    storage.ensure_dir(tmp_path)
    storage.save_json(out, data)
    assert json.loads(out.read_text()) == data


def test_linked_mapping_shape(fake_client):
    batch = _batch(fake_client)
    dumped = storage.dump_linked_mapping(batch.pulls)
    assert dumped["acme/widgets"][0]["references"] == ["10"]
    assert dumped["acme/widgets"][0]["record"]["number"] == 5
    assert dumped["x/y"] == []


def test_reloaded_mappings_join_identically(fake_client, tmp_path):
    batch = _batch(fake_client)
    storage.save_mappings(tmp_path, batch.issues, batch.pulls, batch.commits)
    issues, pulls, commits = storage.load_mappings(tmp_path)

    assert list(pulls) == ["acme/widgets", "x/y"]
    opener = lambda repo, base: None
    fresh = align_repo_data(["acme/widgets", "x/y"], batch.issues, batch.pulls, batch.commits, opener=opener)
    reloaded = align_repo_data(["acme/widgets", "x/y"], issues, pulls, commits, opener=opener)
    assert [a.summary() for a in fresh] == [a.summary() for a in reloaded]
    assert reloaded[0].issues == fresh[0].issues
    assert reloaded[0].prs_with_issues == fresh[0].prs_with_issues
    assert reloaded[0].commits_with_issues == fresh[0].commits_with_issues


def test_failures_are_written_when_present(tmp_path):
    failures = {"o/r": {"pulls": FetchFailure(stage="continuation", page=2, message="reset")}}
    storage.save_mappings(tmp_path, {}, {}, {}, failures)
    written = json.loads((tmp_path / storage.FAILURES_FILENAME).read_text())
    assert written == {"o/r": {"pulls": {"stage": "continuation", "page": 2, "message": "reset"}}}


def test_unfetched_mapping_keeps_saved_file(fake_client, tmp_path):
    batch = _batch(fake_client)
    storage.save_mappings(tmp_path, batch.issues, batch.pulls, batch.commits)
    saved_commits = (tmp_path / "commits_with_issues.json").read_text()

    storage.save_mappings(tmp_path, None, {"acme/widgets": []}, None)
    assert (tmp_path / "commits_with_issues.json").read_text() == saved_commits
    issues, pulls, commits = storage.load_mappings(tmp_path)
    assert pulls == {"acme/widgets": []}
    assert commits["acme/widgets"][0][1] == ["10"]
    assert [issue.number for issue in issues["acme/widgets"]] == [10]


def test_missing_files_load_as_empty(tmp_path, capsys):
    issues, pulls, commits = storage.load_mappings(tmp_path)
    assert (issues, pulls, commits) == ({}, {}, {})
    assert "[warn]" in capsys.readouterr().out
