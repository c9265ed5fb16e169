"""JSON persistence for the issue, PR-reference, and commit-reference mappings."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import ijson

from .config import COMMITS_FILENAME, ISSUES_FILENAME, PRS_FILENAME
from .models import CommitRecord, IssueRecord, LinkedCommit, LinkedPullRequest, PullRequestRecord

FAILURES_FILENAME = "fetch_failures.json"

IssueMapping = Dict[str, List[IssueRecord]]
PullMapping = Dict[str, List[LinkedPullRequest]]
CommitMapping = Dict[str, List[LinkedCommit]]


def ensure_dir(path: str | Path) -> None:
    """Create output directories as-needed without raising for existing folders."""
    os.makedirs(path, exist_ok=True)


def save_json(path: str | Path, data: Any) -> None:
    """Write JSON to disk using UTF-8 and deterministic formatting."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def dump_issue_mapping(mapping: IssueMapping) -> Dict[str, List[Dict[str, Any]]]:
    return {repo: [issue.to_dict() for issue in issues] for repo, issues in mapping.items()}


def dump_linked_mapping(mapping: Dict[str, List[Tuple[Any, List[str]]]]) -> Dict[str, List[Dict[str, Any]]]:
    """Serialize (record, references) pairs as {"record": ..., "references": [...]}."""
    return {
        repo: [{"record": record.to_dict(), "references": list(refs)} for record, refs in pairs]
        for repo, pairs in mapping.items()
    }


def iter_mapping(path: str | Path) -> Iterator[Tuple[str, Any]]:
    """Stream (repo, value) pairs from a top-level JSON object without loading it whole."""
    with open(path, "rb") as handle:
        yield from ijson.kvitems(handle, "", use_float=True)


def load_issue_mapping(path: str | Path) -> IssueMapping:
    return {
        repo: [IssueRecord.from_api(item) for item in items]
        for repo, items in iter_mapping(path)
    }


def load_pull_mapping(path: str | Path) -> PullMapping:
    return {
        repo: [(PullRequestRecord.from_api(pair["record"]), list(pair["references"])) for pair in pairs]
        for repo, pairs in iter_mapping(path)
    }


def load_commit_mapping(path: str | Path) -> CommitMapping:
    return {
        repo: [(CommitRecord.from_api(pair["record"]), list(pair["references"])) for pair in pairs]
        for repo, pairs in iter_mapping(path)
    }


def save_mappings(out_dir: str | Path,
                  issues: Optional[IssueMapping],
                  pulls: Optional[PullMapping],
                  commits: Optional[CommitMapping],
                  failures: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
    """Write the mappings (and any fetch failures) under `out_dir`.

    A mapping passed as None was not fetched; its file is left untouched.
    """
    ensure_dir(out_dir)
    if issues is not None:
        save_json(os.path.join(out_dir, ISSUES_FILENAME), dump_issue_mapping(issues))
    if pulls is not None:
        save_json(os.path.join(out_dir, PRS_FILENAME), dump_linked_mapping(pulls))
    if commits is not None:
        save_json(os.path.join(out_dir, COMMITS_FILENAME), dump_linked_mapping(commits))
    if failures:
        save_json(
            os.path.join(out_dir, FAILURES_FILENAME),
            {
                repo: {kind: failure.to_dict() for kind, failure in kinds.items()}
                for repo, kinds in failures.items()
            },
        )


def load_mappings(out_dir: str | Path) -> Tuple[IssueMapping, PullMapping, CommitMapping]:
    """Reload mappings written by `save_mappings`; a missing file yields an empty mapping."""
    paths = [os.path.join(out_dir, name) for name in (ISSUES_FILENAME, PRS_FILENAME, COMMITS_FILENAME)]
    loaders = (load_issue_mapping, load_pull_mapping, load_commit_mapping)
    loaded = []
    for path, loader in zip(paths, loaders):
        if not os.path.exists(path):
            print(f"[warn] {path} not found; treating as empty")
            loaded.append({})
            continue
        loaded.append(loader(path))
    issues, pulls, commits = loaded
    return issues, pulls, commits


__all__ = [
    "FAILURES_FILENAME",
    "ensure_dir",
    "save_json",
    "dump_issue_mapping",
    "dump_linked_mapping",
    "iter_mapping",
    "load_issue_mapping",
    "load_pull_mapping",
    "load_commit_mapping",
    "save_mappings",
    "load_mappings",
]
