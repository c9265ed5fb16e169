"""Tests for src.retrieval.linkers covering issue-reference extraction.

Run with:
    pytest tests/test_linkers.py --maxfail=1 -v --cov=src.retrieval.linkers --cov-report=term-missing
"""

import pytest

from src.retrieval import linkers


@pytest.mark.parametrize("text", [
    "fixes #42",
    "This PR fixes #42 for good",
    "FIXES #42",
    "see #42",
])
def test_fixes_reference_is_found(text):
    assert "42" in linkers.extract_references(text)


def test_keyword_and_url_for_same_issue_are_both_emitted():
    text = "closes #7, see https://github.com/o/r/issues/7"
    assert linkers.extract_references(text) == ["7", "7"]
    assert linkers.REFERENCES_ARE_NOT_DEDUPLICATED


def test_keyword_directly_followed_by_digits_matches():
    assert linkers.extract_references("resolved12 and Closes3") == ["12", "3"]


def test_url_rule_runs_after_keyword_rule():
    text = "https://github.com/o/r/issues/9 then #4"
    assert linkers.extract_references(text) == ["4", "9"]


def test_pull_request_urls_are_not_issue_urls():
    assert linkers.extract_references("https://github.com/o/r/pull/5") == []


@pytest.mark.parametrize("text", [None, "", "nothing to see"])
def test_no_matches_returns_empty(text):
    assert linkers.extract_references(text) == []


def test_fields_are_concatenated_in_order_and_absent_fields_skipped():
    refs = linkers.extract_references_from_fields("Fix #10", None, "closes #11 and #10")
    assert refs == ["10", "11", "10"]


def test_pull_request_references_use_title_then_body():
    assert linkers.pull_request_references("Fix #1", "Resolves #2") == ["1", "2"]
    assert linkers.pull_request_references(None, None) == []


def test_commit_references_use_message():
    assert linkers.commit_references("Merge pull request #3 from x/y") == ["3"]


def test_rules_have_fixed_order():
    assert [rule.name for rule in linkers.EXTRACTION_RULES] == ["keyword", "issue_url"]


def test_custom_rule_set():
    only_urls = linkers.EXTRACTION_RULES[1:]
    text = "fixes #1 https://github.com/a/b/issues/2"
    assert linkers.extract_references(text, only_urls) == ["2"]
