"""Utilities for loading local (gitignored) credentials."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load secrets from a JSON file; return {} when unavailable."""

    candidate = path or os.getenv("LOCAL_SECRETS_FILE") or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.exists():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"[warn] ignoring unreadable secrets file {secrets_path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def resolve_github_token(path: Optional[str | Path] = None) -> Optional[str]:
    """Return the API token from the environment, else the first configured secret."""

    token = os.getenv(TOKEN_ENV_VAR)
    if token:
        return token.strip()
    tokens = load_local_secrets(path).get("github_tokens") or []
    for candidate in tokens:
        if candidate:
            return str(candidate).strip()
    return None


__all__ = [
    "load_local_secrets",
    "resolve_github_token",
    "DEFAULT_SECRETS_FILENAME",
    "TOKEN_ENV_VAR",
]
