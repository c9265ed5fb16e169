"""Align fetched mappings with the canonical repository list and local mirrors."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from git import Repo

from src.retrieval.config import REPOS_DIR
from src.retrieval.models import IssueRecord, LinkedCommit, LinkedPullRequest, RepositoryIdentifier

from .mirrors import mirror_path, open_local_mirror

LOCAL_REPO_AVAILABLE = "Available"
LOCAL_REPO_NOT_FOUND = "Not found"

MirrorOpener = Callable[[RepositoryIdentifier, Path], Optional[Repo]]


@dataclass
class RepoAnalysis:
    """Everything known about one repository. The local handle belongs to this object alone."""

    repo_name: str
    issues: List[IssueRecord] = field(default_factory=list)
    prs_with_issues: List[LinkedPullRequest] = field(default_factory=list)
    commits_with_issues: List[LinkedCommit] = field(default_factory=list)
    local_repo: Optional[Repo] = None
    local_repo_path: Optional[Path] = None

    @property
    def local_repo_status(self) -> str:
        return LOCAL_REPO_AVAILABLE if self.local_repo is not None else LOCAL_REPO_NOT_FOUND

    def load_local_repo(self,
                        base_dir: str | Path = REPOS_DIR,
                        opener: MirrorOpener = open_local_mirror) -> None:
        repo = RepositoryIdentifier.parse(self.repo_name)
        self.local_repo_path = mirror_path(repo, base_dir)
        self.local_repo = opener(repo, Path(base_dir))

    def close(self) -> None:
        if self.local_repo is not None:
            self.local_repo.close()
            self.local_repo = None

    def linked_pull_requests(self) -> List[LinkedPullRequest]:
        return [(pr, refs) for pr, refs in self.prs_with_issues if refs]

    def summary(self) -> Dict[str, Any]:
        return {
            "repo_name": self.repo_name,
            "total_issues": len(self.issues),
            "total_prs": len(self.prs_with_issues),
            "prs_with_linked_issues": len(self.linked_pull_requests()),
            "commits_with_linked_issues": len(self.commits_with_issues),
            "local_repo": self.local_repo_status,
            "pr_links": [
                {"pr_number": pr.number, "issues": list(refs)}
                for pr, refs in self.linked_pull_requests()
            ],
            "commit_links": [
                {"sha": commit.sha, "issues": list(refs)}
                for commit, refs in self.commits_with_issues
            ],
        }


def align_repo_data(repos: Sequence[str],
                    repo_issues: Mapping[str, List[IssueRecord]],
                    repo_prs: Mapping[str, List[LinkedPullRequest]],
                    repo_commits: Mapping[str, List[LinkedCommit]],
                    repos_dir: str | Path = REPOS_DIR,
                    opener: MirrorOpener = open_local_mirror) -> List[RepoAnalysis]:
    """Build one RepoAnalysis per canonical repository, in canonical order.

    Repositories absent from a mapping get an empty list for that kind, and a
    missing or unreadable mirror leaves `local_repo` as None. Nothing here
    raises for absent data; a malformed name in `repos` is still fatal.
    """
    identifiers = [RepositoryIdentifier.parse(name) for name in repos]
    analyses: List[RepoAnalysis] = []
    for repo in identifiers:
        key = repo.full_name
        analysis = RepoAnalysis(
            repo_name=key,
            issues=list(repo_issues.get(key) or []),
            prs_with_issues=list(repo_prs.get(key) or []),
            commits_with_issues=list(repo_commits.get(key) or []),
        )
        analysis.load_local_repo(repos_dir, opener)
        analyses.append(analysis)
    return analyses


def print_analysis_summary(analyses: Sequence[RepoAnalysis]) -> None:
    for analysis in analyses:
        print(f"\nRepository: {analysis.repo_name}")
        print(f"Total issues: {len(analysis.issues)}")
        print(f"Total PRs: {len(analysis.prs_with_issues)}")
        print(f"PRs with linked issues: {len(analysis.linked_pull_requests())}")
        print(f"Commits with linked issues: {len(analysis.commits_with_issues)}")
        print(f"Local repository: {analysis.local_repo_status}")

        for pr, linked_issues in analysis.linked_pull_requests():
            print(f"PR #{pr.number} links to issues: {linked_issues}")


__all__ = [
    "LOCAL_REPO_AVAILABLE",
    "LOCAL_REPO_NOT_FOUND",
    "RepoAnalysis",
    "align_repo_data",
    "print_analysis_summary",
]
