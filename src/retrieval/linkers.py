"""Issue-reference extraction for pull request and commit text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

# A number matched by both rules, or repeated in title and body, is emitted
# once per match. Callers that need unique issue numbers must dedup themselves.
REFERENCES_ARE_NOT_DEDUPLICATED = True


@dataclass(frozen=True)
class ExtractionRule:
    """A named pattern whose first group captures an issue number."""

    name: str
    pattern: Pattern[str]

    def findall(self, text: str) -> List[str]:
        return [match.group(1) for match in self.pattern.finditer(text)]


KEYWORD_ISSUE_RE = re.compile(r"(?:close[sd]?|fix(?:e[sd])?|resolve[sd]?|#)(\d+)", re.IGNORECASE)
ISSUE_URL_RE = re.compile(r"https?://github\.com/[^/]+/[^/]+/issues/(\d+)")

EXTRACTION_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule("keyword", KEYWORD_ISSUE_RE),
    ExtractionRule("issue_url", ISSUE_URL_RE),
)


def extract_references(text: Optional[str],
                       rules: Tuple[ExtractionRule, ...] = EXTRACTION_RULES) -> List[str]:
    """Return issue numbers referenced in `text`, rule by rule, without dedup."""
    refs: List[str] = []
    if not text:
        return refs
    for rule in rules:
        refs.extend(rule.findall(text))
    return refs


def extract_references_from_fields(*fields: Optional[str]) -> List[str]:
    """Concatenate references from each field in order; absent fields add nothing."""
    refs: List[str] = []
    for text in fields:
        refs.extend(extract_references(text))
    return refs


def pull_request_references(title: Optional[str], body: Optional[str]) -> List[str]:
    return extract_references_from_fields(title, body)


def commit_references(message: Optional[str]) -> List[str]:
    return extract_references(message)


__all__ = [
    "REFERENCES_ARE_NOT_DEDUPLICATED",
    "ExtractionRule",
    "KEYWORD_ISSUE_RE",
    "ISSUE_URL_RE",
    "EXTRACTION_RULES",
    "extract_references",
    "extract_references_from_fields",
    "pull_request_references",
    "commit_references",
]
