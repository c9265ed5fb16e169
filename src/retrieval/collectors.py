"""Paginated collection of pull requests, commits, and issues for one repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import MAX_PER_PAGE, PER_PAGE
from .http_client import GitHubAPIError, GitHubClient
from .models import RepositoryIdentifier

PULLS = "pulls"
COMMITS = "commits"
ISSUES = "issues"
RECORD_KINDS: Tuple[str, ...] = (ISSUES, PULLS, COMMITS)

# kind -> (endpoint under /repos/{owner}/{repo}, fixed query params)
KIND_ENDPOINTS: Dict[str, Tuple[str, Dict[str, str]]] = {
    PULLS: ("pulls", {"state": "all"}),
    COMMITS: ("commits", {}),
    ISSUES: ("issues", {"state": "all"}),
}

INITIAL = "initial"
CONTINUATION = "continuation"

FETCH_ERRORS = (requests.RequestException, GitHubAPIError, ValueError)


@dataclass(frozen=True)
class FetchFailure:
    """Why a fetch stopped early: the stage, the 1-based page, and the error text."""

    stage: str
    page: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"stage": self.stage, "page": self.page, "message": self.message}


@dataclass
class FetchResult:
    """Records gathered for one (repository, kind), with the failure that halted it."""

    repo_name: str
    kind: str
    items: List[Dict[str, Any]] = field(default_factory=list)
    pages: int = 0
    failure: Optional[FetchFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def partial(self) -> bool:
        """True when some pages arrived before a later page failed."""
        return self.failure is not None and self.pages > 0


def fetch_all_records(client: GitHubClient,
                      repo: RepositoryIdentifier,
                      kind: str,
                      per_page: int = PER_PAGE) -> FetchResult:
    """Follow continuation links until exhausted; keep what arrived if a page fails."""
    if kind not in KIND_ENDPOINTS:
        raise ValueError(f"Unknown record kind {kind!r}; expected one of {sorted(KIND_ENDPOINTS)}")

    endpoint, fixed_params = KIND_ENDPOINTS[kind]
    params = dict(fixed_params, per_page=min(per_page, MAX_PER_PAGE))
    result = FetchResult(repo_name=repo.full_name, kind=kind)

    try:
        page = client.get_page(client.repo_url(repo, endpoint), params=params)
    except FETCH_ERRORS as exc:
        print(f"[error] fetching {kind} for {repo.full_name}: {exc}")
        result.failure = FetchFailure(stage=INITIAL, page=1, message=str(exc))
        return result

    while True:
        result.items.extend(page.items)
        result.pages += 1
        if not page.next_url:
            break
        try:
            page = client.get_page(page.next_url)
        except FETCH_ERRORS as exc:
            print(f"[warn] fetching {kind} page {result.pages + 1} for {repo.full_name}: {exc}")
            result.failure = FetchFailure(
                stage=CONTINUATION, page=result.pages + 1, message=str(exc)
            )
            break
    return result


def get_pull_requests(client: GitHubClient, repo: RepositoryIdentifier) -> FetchResult:
    """Return all pull requests (state=all) for a repository."""
    return fetch_all_records(client, repo, PULLS)


def get_commits(client: GitHubClient, repo: RepositoryIdentifier) -> FetchResult:
    return fetch_all_records(client, repo, COMMITS)


def get_issues(client: GitHubClient, repo: RepositoryIdentifier) -> FetchResult:
    """Return all issues (state=all) as listed by the issues endpoint."""
    return fetch_all_records(client, repo, ISSUES)


__all__ = [
    "PULLS",
    "COMMITS",
    "ISSUES",
    "RECORD_KINDS",
    "KIND_ENDPOINTS",
    "INITIAL",
    "CONTINUATION",
    "FETCH_ERRORS",
    "FetchFailure",
    "FetchResult",
    "fetch_all_records",
    "get_pull_requests",
    "get_commits",
    "get_issues",
]
