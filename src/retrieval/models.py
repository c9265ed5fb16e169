"""Record types passed between the fetch, link, and join stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import LOCAL_DIR_JOINER


class InvalidRepositoryIdentifier(ValueError):
    """Raised for repository names that are not exactly `owner/name`."""


@dataclass(frozen=True)
class RepositoryIdentifier:
    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "RepositoryIdentifier":
        """Split `owner/name`; anything without exactly one separator is fatal."""
        text = (value or "").strip()
        if text.count("/") != 1:
            raise InvalidRepositoryIdentifier(
                f"Repository must be in format owner/repo. Got {value!r}"
            )
        owner, name = (part.strip() for part in text.split("/"))
        if not owner or not name:
            raise InvalidRepositoryIdentifier(
                f"Repository must be in format owner/repo. Got {value!r}"
            )
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def local_dirname(self, joiner: str = LOCAL_DIR_JOINER) -> str:
        return f"{self.owner}{joiner}{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class PullRequestRecord:
    number: int
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[str] = None
    created_at: Optional[str] = None
    merged_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "PullRequestRecord":
        return cls(
            number=payload.get("number"),
            title=payload.get("title"),
            body=payload.get("body"),
            state=payload.get("state"),
            created_at=payload.get("created_at"),
            merged_at=payload.get("merged_at"),
            raw=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "state": self.state,
            "created_at": self.created_at,
            "merged_at": self.merged_at,
        }


@dataclass
class CommitRecord:
    sha: str
    message: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CommitRecord":
        message = ((payload.get("commit") or {}).get("message")) or ""
        return cls(sha=payload.get("sha"), message=message, raw=dict(payload))

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {"sha": self.sha, "commit": {"message": self.message}}


@dataclass
class IssueRecord:
    number: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "IssueRecord":
        return cls(number=payload.get("number"), raw=dict(payload))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw) if self.raw else {"number": self.number}


LinkedPullRequest = Tuple[PullRequestRecord, List[str]]
LinkedCommit = Tuple[CommitRecord, List[str]]

__all__ = [
    "InvalidRepositoryIdentifier",
    "RepositoryIdentifier",
    "PullRequestRecord",
    "CommitRecord",
    "IssueRecord",
    "LinkedPullRequest",
    "LinkedCommit",
]
