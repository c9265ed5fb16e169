"""Per-repository processing and the batch loop over the repository list."""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .collectors import (
    COMMITS,
    ISSUES,
    PULLS,
    RECORD_KINDS,
    FetchFailure,
    FetchResult,
    get_commits,
    get_issues,
    get_pull_requests,
)
from .config import MAX_WORKERS, OUTPUT_DIR, REPOS
from .http_client import GitHubClient
from .linkers import commit_references, pull_request_references
from .models import (
    CommitRecord,
    IssueRecord,
    LinkedCommit,
    LinkedPullRequest,
    PullRequestRecord,
    RepositoryIdentifier,
)
from .progress import ProgressReporter, TqdmProgress
from .storage import save_mappings


@dataclass
class RepoResult:
    """Issues, linked PRs, and linked commits gathered for one repository."""

    repo: RepositoryIdentifier
    issues: List[IssueRecord] = field(default_factory=list)
    pulls: List[LinkedPullRequest] = field(default_factory=list)
    commits: List[LinkedCommit] = field(default_factory=list)
    fetches: Dict[str, FetchResult] = field(default_factory=dict)

    def failures(self) -> Dict[str, FetchFailure]:
        return {kind: fetch.failure for kind, fetch in self.fetches.items() if fetch.failure}


@dataclass
class BatchResult:
    """Mappings keyed by `owner/name`, in the order the repositories were given."""

    issues: Dict[str, List[IssueRecord]] = field(default_factory=dict)
    pulls: Dict[str, List[LinkedPullRequest]] = field(default_factory=dict)
    commits: Dict[str, List[LinkedCommit]] = field(default_factory=dict)
    failures: Dict[str, Dict[str, FetchFailure]] = field(default_factory=dict)
    kinds: Tuple[str, ...] = RECORD_KINDS

    def record(self, result: RepoResult) -> None:
        key = result.repo.full_name
        # Only requested kinds are recorded. Repos with no issues are left out
        # of the issues mapping; PRs and commits are recorded even when empty.
        if ISSUES in self.kinds and result.issues:
            self.issues[key] = result.issues
        if PULLS in self.kinds:
            self.pulls[key] = result.pulls
        if COMMITS in self.kinds:
            self.commits[key] = result.commits
        failures = result.failures()
        if failures:
            self.failures[key] = failures

    def fetched_mappings(self) -> Tuple[Optional[dict], Optional[dict], Optional[dict]]:
        """Issues, PRs, and commits mappings, with None for kinds that were not requested."""
        return (
            self.issues if ISSUES in self.kinds else None,
            self.pulls if PULLS in self.kinds else None,
            self.commits if COMMITS in self.kinds else None,
        )


def link_pull_requests(items: Iterable[dict]) -> List[LinkedPullRequest]:
    """Pair every PR with references from its title then body; PRs without any are kept."""
    linked: List[LinkedPullRequest] = []
    for payload in items:
        pull = PullRequestRecord.from_api(payload)
        linked.append((pull, pull_request_references(pull.title, pull.body)))
    return linked


def link_commits(items: Iterable[dict]) -> List[LinkedCommit]:
    """Pair commits with references from the message; commits without any are dropped."""
    linked: List[LinkedCommit] = []
    for payload in items:
        commit = CommitRecord.from_api(payload)
        refs = commit_references(commit.message)
        if refs:
            linked.append((commit, refs))
    return linked


def process_repo(client: GitHubClient,
                 repo: RepositoryIdentifier,
                 kinds: Sequence[str] = RECORD_KINDS) -> RepoResult:
    """Fetch each requested record kind for `repo` and attach issue references."""
    result = RepoResult(repo=repo)
    print(f"\n=== {repo.full_name} ===")

    if ISSUES in kinds:
        print("  fetching issues...")
        fetch = get_issues(client, repo)
        result.fetches[ISSUES] = fetch
        result.issues = [IssueRecord.from_api(item) for item in fetch.items]

    if PULLS in kinds:
        print("  fetching pull requests...")
        fetch = get_pull_requests(client, repo)
        result.fetches[PULLS] = fetch
        result.pulls = link_pull_requests(fetch.items)

    if COMMITS in kinds:
        print("  fetching commits...")
        fetch = get_commits(client, repo)
        result.fetches[COMMITS] = fetch
        result.commits = link_commits(fetch.items)

    print(
        f"  {repo.full_name}: {len(result.issues)} issues, {len(result.pulls)} PRs, "
        f"{len(result.commits)} commits with issue references"
    )
    return result


def parse_repositories(repos: Sequence[str]) -> List[RepositoryIdentifier]:
    """Parse every identifier up front so a malformed one aborts before any request."""
    parsed: List[RepositoryIdentifier] = []
    seen = set()
    for value in repos:
        repo = RepositoryIdentifier.parse(value)
        if repo in seen:
            continue
        seen.add(repo)
        parsed.append(repo)
    return parsed


def _safe_process(client: GitHubClient,
                  repo: RepositoryIdentifier,
                  kinds: Sequence[str]) -> RepoResult:
    try:
        return process_repo(client, repo, kinds)
    except Exception as exc:
        print(f"[error] {repo.full_name}: {exc}")
        return RepoResult(repo=repo)


def collect_repositories(client: GitHubClient,
                         repos: Sequence[str],
                         kinds: Sequence[str] = RECORD_KINDS,
                         progress: Optional[ProgressReporter] = None,
                         max_workers: int = MAX_WORKERS) -> BatchResult:
    """Run `process_repo` for every repository and merge the results by name."""
    identifiers = parse_repositories(repos)
    progress = progress or ProgressReporter()
    results: Dict[RepositoryIdentifier, RepoResult] = {}

    progress.start(len(identifiers), "Processing repositories")
    if max_workers <= 1 or len(identifiers) <= 1:
        for repo in identifiers:
            results[repo] = _safe_process(client, repo, kinds)
            progress.advance(repo.full_name)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            future_map = {
                pool.submit(_safe_process, client, repo, kinds): repo
                for repo in identifiers
            }
            for fut in as_completed(future_map):
                repo = future_map[fut]
                results[repo] = fut.result()
                progress.advance(repo.full_name)
    progress.finish("Completed fetching repositories")

    batch = BatchResult(kinds=tuple(kinds))
    for repo in identifiers:
        batch.record(results[repo])
    return batch


def main(custom_repos: Optional[List[str]] = None,
         output_dir: str = OUTPUT_DIR,
         max_workers: int = MAX_WORKERS) -> BatchResult:
    """Fetch every repository and persist the three mappings as JSON."""
    repos = custom_repos or REPOS
    if not repos:
        print("No repositories specified. Provide CLI args or edit REPOS in config.py.")
        sys.exit(1)

    print(f"Processing {len(repos)} repos...")
    batch = collect_repositories(
        GitHubClient(),
        repos,
        progress=TqdmProgress(),
        max_workers=max_workers,
    )
    save_mappings(output_dir, *batch.fetched_mappings(), batch.failures)
    if batch.failures:
        print(f"[warn] {len(batch.failures)} repositories had fetch failures; results may be partial.")
    print(f"\nAll repositories processed -> {output_dir}")
    return batch


__all__ = [
    "RepoResult",
    "BatchResult",
    "link_pull_requests",
    "link_commits",
    "process_repo",
    "parse_repositories",
    "collect_repositories",
    "main",
]
