"""Shared fixtures: an in-memory stand-in for the GitHub list endpoints."""

import threading

import pytest

from src.retrieval.http_client import Page


class FakeGitHubClient:
    """Serves pages from `{"owner/name/endpoint": [page, page, ...]}`.

    A page is a list of payload dicts or an exception instance to raise.
    Continuation URLs carry the next page index after `#page=`.
    """

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []
        self._lock = threading.Lock()

    def repo_url(self, repo, endpoint):
        return f"fake://{repo.full_name}/{endpoint}"

    def get_page(self, url, params=None):
        with self._lock:
            self.calls.append((url, params))
        base, _, index = url.partition("#page=")
        index = int(index) if index else 0
        pages = self.pages.get(base[len("fake://"):], [[]])
        entry = pages[index]
        if isinstance(entry, Exception):
            raise entry
        next_url = f"{base}#page={index + 1}" if index + 1 < len(pages) else None
        return Page(items=list(entry), next_url=next_url)


def make_prs(count, start=1):
    return [{"number": n, "title": f"PR {n}", "body": None, "state": "open"} for n in range(start, start + count)]


@pytest.fixture
def fake_client():
    return FakeGitHubClient


@pytest.fixture
def pr_factory():
    return make_prs
