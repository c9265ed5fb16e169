"""Central configuration constants for the GitHub reference retrieval workflow."""

from __future__ import annotations

import os
from typing import List

from src.secrets import resolve_github_token

GITHUB_TOKEN = resolve_github_token()
USER_AGENT = "github-reference-correlator/1.0"
BASE_URL = "https://api.github.com"
MAX_PER_PAGE = 100
PER_PAGE = min(MAX_PER_PAGE, int(os.getenv("PER_PAGE", str(MAX_PER_PAGE))))
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "90"))
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "./output")
REPOS_DIR = os.getenv("REPOS_DIR", "./repos")
LOCAL_DIR_JOINER = "__"
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "1"))  # 1 = sequential

ISSUES_FILENAME = "issues.json"
PRS_FILENAME = "prs_with_issues.json"
COMMITS_FILENAME = "commits_with_issues.json"
SUMMARY_FILENAME = "analysis_summary.json"

REPOS = [
    # "sqlfluff/sqlfluff",
    # "pandas-dev/pandas",
    "micromatch/micromatch",
    "axios/axios",
]

__all__ = [
    "GITHUB_TOKEN",
    "USER_AGENT",
    "BASE_URL",
    "MAX_PER_PAGE",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "OUTPUT_DIR",
    "REPOS_DIR",
    "LOCAL_DIR_JOINER",
    "MAX_WORKERS",
    "ISSUES_FILENAME",
    "PRS_FILENAME",
    "COMMITS_FILENAME",
    "SUMMARY_FILENAME",
    "REPOS",
]
