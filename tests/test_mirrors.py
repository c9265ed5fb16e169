"""Tests for src.correlation.mirrors covering open, clone, and removal of local clones."""

import threading
from unittest.mock import patch

from git import exc as git_exc

from src.correlation import mirrors
from src.retrieval.models import RepositoryIdentifier

REPO = RepositoryIdentifier("acme", "widgets")


def test_mirror_path_joins_owner_and_name(tmp_path):
    assert mirrors.mirror_path(REPO, tmp_path) == tmp_path / "acme__widgets"


def test_open_missing_mirror_returns_none(tmp_path):
    assert mirrors.open_local_mirror(REPO, tmp_path) is None


def test_open_non_git_directory_returns_none(tmp_path):
    (tmp_path / "acme__widgets").mkdir()
    assert mirrors.open_local_mirror(REPO, tmp_path) is None


def test_path_lock_is_shared_per_path(tmp_path):
    first = mirrors.path_lock(tmp_path / "a")
    assert mirrors.path_lock(tmp_path / "a") is first
    assert mirrors.path_lock(tmp_path / "b") is not first
    assert isinstance(first, type(threading.Lock()))


@patch("src.correlation.mirrors.Repo")
def test_clone_skips_existing_path(mock_repo, tmp_path):
    (tmp_path / "acme__widgets").mkdir()
    assert mirrors.clone_mirror(REPO, tmp_path) is True
    mock_repo.clone_from.assert_not_called()


@patch("src.correlation.mirrors.Repo")
def test_clone_uses_github_url(mock_repo, tmp_path):
    assert mirrors.clone_mirror(REPO, tmp_path) is True
    mock_repo.clone_from.assert_called_once_with(
        "https://github.com/acme/widgets.git", str(tmp_path / "acme__widgets")
    )


@patch("src.correlation.mirrors.Repo")
def test_clone_failure_is_logged(mock_repo, tmp_path, capsys):
    mock_repo.clone_from.side_effect = git_exc.GitCommandError("clone", 128)
    assert mirrors.clone_mirror(REPO, tmp_path) is False
    assert "Failed to clone acme/widgets" in capsys.readouterr().out


@patch("src.correlation.mirrors.clone_mirror", return_value=True)
def test_clone_mirrors_creates_base_dir(mock_clone, tmp_path):
    base = tmp_path / "repos"
    outcome = mirrors.clone_mirrors([REPO, RepositoryIdentifier("x", "y")], base)
    assert base.is_dir()
    assert outcome == {"acme/widgets": True, "x/y": True}
    assert mock_clone.call_count == 2


def test_remove_mirror(tmp_path):
    path = tmp_path / "acme__widgets"
    (path / "sub").mkdir(parents=True)
    assert mirrors.remove_mirror(REPO, tmp_path) is True
    assert not path.exists()
    assert mirrors.remove_mirror(REPO, tmp_path) is False
