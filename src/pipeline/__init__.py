"""End-to-end issue-reference correlation pipeline."""

from .runner import main, run

__all__ = ["main", "run"]
