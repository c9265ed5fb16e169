"""Local clones ("mirrors") of analysed repositories, one directory per owner/name."""

from __future__ import annotations

import os
import shutil
import threading
from pathlib import Path
from typing import Dict, Optional, Sequence

from git import Repo, exc as git_exc

from src.retrieval.config import REPOS_DIR
from src.retrieval.models import RepositoryIdentifier
from src.retrieval.progress import ProgressReporter

CLONE_URL = "https://github.com/{owner}/{name}.git"

_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def mirror_path(repo: RepositoryIdentifier, base_dir: str | Path = REPOS_DIR) -> Path:
    """Return `<base_dir>/<owner>__<name>`."""
    return Path(base_dir) / repo.local_dirname()


def path_lock(path: str | Path) -> threading.Lock:
    """One lock per resolved path so clone/remove never overlap on the same directory."""
    key = os.path.abspath(str(path))
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _PATH_LOCKS[key] = lock
        return lock


def open_local_mirror(repo: RepositoryIdentifier, base_dir: str | Path = REPOS_DIR) -> Optional[Repo]:
    """Open an existing mirror read-only; None when it is missing or not a git repository."""
    path = mirror_path(repo, base_dir)
    try:
        return Repo(str(path))
    except (git_exc.NoSuchPathError, git_exc.InvalidGitRepositoryError):
        return None


def clone_mirror(repo: RepositoryIdentifier, base_dir: str | Path = REPOS_DIR) -> bool:
    """Clone `repo` unless its mirror path already exists. Returns False on clone failure."""
    path = mirror_path(repo, base_dir)
    with path_lock(path):
        if path.exists():
            return True
        url = CLONE_URL.format(owner=repo.owner, name=repo.name)
        try:
            Repo.clone_from(url, str(path)).close()
        except git_exc.GitCommandError as exc:
            print(f"[error] Failed to clone {repo.full_name}: {exc}")
            return False
    return True


def clone_mirrors(repos: Sequence[RepositoryIdentifier],
                  base_dir: str | Path = REPOS_DIR,
                  progress: Optional[ProgressReporter] = None) -> Dict[str, bool]:
    """Clone every repository into `base_dir`, creating it if needed."""
    os.makedirs(base_dir, exist_ok=True)
    progress = progress or ProgressReporter()
    outcome: Dict[str, bool] = {}
    progress.start(len(repos), "Cloning repositories")
    for repo in repos:
        outcome[repo.full_name] = clone_mirror(repo, base_dir)
        progress.advance(repo.full_name)
    progress.finish("Completed cloning repositories")
    return outcome


def remove_mirror(repo: RepositoryIdentifier, base_dir: str | Path = REPOS_DIR) -> bool:
    """Delete a mirror directory; returns False when there was nothing to remove."""
    path = mirror_path(repo, base_dir)
    with path_lock(path):
        if not path.exists():
            return False
        shutil.rmtree(path)
    return True


__all__ = [
    "CLONE_URL",
    "mirror_path",
    "path_lock",
    "open_local_mirror",
    "clone_mirror",
    "clone_mirrors",
    "remove_mirror",
]
