"""Read-only GitHub REST client used by the paginated fetchers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .config import BASE_URL, GITHUB_TOKEN, REQUEST_TIMEOUT, USER_AGENT
from .models import RepositoryIdentifier


class GitHubAPIError(RuntimeError):
    """A non-2xx or malformed response from the GitHub API."""

    def __init__(self, status_code: int, url: str, message: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.message = message
        super().__init__(f"HTTP {status_code} for {url} -> {message}")


@dataclass
class Page:
    """One page of list results plus the continuation URL, if any."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    next_url: Optional[str] = None


def error_message(resp: requests.Response) -> str:
    """Return a short, human-readable message from a GitHub error response."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        return str(body)[:300]
    return body.get("message") or body.get("error") or body.get("text") or ""


def next_page_url(resp: requests.Response) -> Optional[str]:
    """Pull the rel="next" target from the Link header, which GitHub uses as its page token."""
    links = getattr(resp, "links", None) or {}
    return (links.get("next") or {}).get("url") or None


class GitHubClient:
    """Thin wrapper around a requests session; shared read-only across workers."""

    def __init__(
        self,
        token: Optional[str] = GITHUB_TOKEN,
        base_url: str = BASE_URL,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": USER_AGENT,
            }
        )
        if token:
            self.session.headers["Authorization"] = f"token {token}"

    def _url(self, path: str) -> str:
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path}"

    def repo_url(self, repo: RepositoryIdentifier, endpoint: str) -> str:
        return self._url(f"repos/{repo.owner}/{repo.name}/{endpoint}")

    def get_page(self, url: str, params: Optional[Dict[str, Any]] = None) -> Page:
        """GET one page of a list endpoint; raise on transport or HTTP failure."""
        resp = self.session.get(url, params=params, timeout=self.timeout)
        if not 200 <= resp.status_code < 300:
            raise GitHubAPIError(resp.status_code, url, error_message(resp))
        payload = resp.json()
        if not isinstance(payload, list):
            raise GitHubAPIError(resp.status_code, url, "expected a JSON list")
        return Page(items=payload, next_url=next_page_url(resp))


__all__ = [
    "GitHubAPIError",
    "Page",
    "error_message",
    "next_page_url",
    "GitHubClient",
]
