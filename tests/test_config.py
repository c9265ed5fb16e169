"""Tests for configuration modules ensuring env overrides, secrets, and CLI settings work.

Run with coverage to validate configuration handling:
    pytest tests/test_config.py --maxfail=1 -v --cov=src.retrieval.config --cov=src.pipeline.config --cov-report=term-missing
"""

from importlib import reload
import json
from pathlib import Path

import src.retrieval.config as config
from src import secrets
from src.pipeline import config as pipeline_config


def test_config_defaults_are_present():
    assert isinstance(config.REPOS, list) and config.REPOS
    assert 0 < config.PER_PAGE <= 100
    assert config.LOCAL_DIR_JOINER == "__"
    assert config.USER_AGENT.startswith("github-reference-correlator")


def test_env_override_for_page_size_is_capped(monkeypatch):
    monkeypatch.setenv("PER_PAGE", "500")
    reloaded = reload(config)
    try:
        assert reloaded.PER_PAGE == 100
    finally:
        monkeypatch.delenv("PER_PAGE", raising=False)
        reload(config)


def test_token_prefers_environment(monkeypatch, tmp_path):
    secrets_file = tmp_path / "local_secrets.json"
    secrets_file.write_text(json.dumps({"github_tokens": ["from-file"]}))
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    assert secrets.resolve_github_token(secrets_file) == "from-env"


def test_token_falls_back_to_secrets_file(monkeypatch, tmp_path):
    secrets_file = tmp_path / "local_secrets.json"
    secrets_file.write_text(json.dumps({"github_tokens": ["", "from-file"]}))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    assert secrets.resolve_github_token(secrets_file) == "from-file"


def test_missing_or_broken_secrets_file(tmp_path, capsys):
    assert secrets.load_local_secrets(tmp_path / "absent.json") == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert secrets.load_local_secrets(broken) == {}
    assert "[warn]" in capsys.readouterr().out


def test_pipeline_settings_from_args():
    args = pipeline_config.parse_args([
        "acme/widgets",
        "x/y",
        "--kinds", "pulls", "commits",
        "--max-workers", "4",
        "--from-saved",
        "--clone",
        "--no-progress",
        "--output-dir", "out",
    ])
    settings = pipeline_config.resolve_settings(args)
    assert settings.repos == ("acme/widgets", "x/y")
    assert settings.kinds == ("pulls", "commits")
    assert settings.max_workers == 4
    assert settings.from_saved and settings.clone
    assert settings.show_progress is False
    assert settings.output_dir == Path("out")


def test_pipeline_settings_default_to_configured_repos():
    settings = pipeline_config.resolve_settings()
    assert settings.repos == tuple(config.REPOS)
    assert settings.kinds == ("issues", "pulls", "commits")
    assert settings.max_workers >= 1
    assert settings.show_progress is True
