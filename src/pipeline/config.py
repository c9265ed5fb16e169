"""Command-line settings for the end-to-end correlation pipeline."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from src.retrieval.collectors import RECORD_KINDS
from src.retrieval.config import MAX_WORKERS, OUTPUT_DIR, REPOS, REPOS_DIR


@dataclass(frozen=True)
class PipelineSettings:
    """Resolved runtime settings for the correlation pipeline."""

    repos: Tuple[str, ...]
    output_dir: Path
    repos_dir: Path
    kinds: Tuple[str, ...]
    max_workers: int
    from_saved: bool
    clone: bool
    show_progress: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the pipeline entry point."""

    parser = argparse.ArgumentParser(
        description="Fetch PRs, commits, and issues, extract issue references, and join them per repository.",
    )
    parser.add_argument("repos", nargs="*", help="Repositories as owner/name (defaults to REPOS).")
    parser.add_argument("--output-dir", default=OUTPUT_DIR)
    parser.add_argument("--repos-dir", default=REPOS_DIR)
    parser.add_argument(
        "--kinds",
        nargs="+",
        choices=RECORD_KINDS,
        default=list(RECORD_KINDS),
        help="Record kinds to fetch.",
    )
    parser.add_argument("--max-workers", type=int, default=MAX_WORKERS)
    parser.add_argument(
        "--from-saved",
        action="store_true",
        help="Skip fetching and join the mappings already saved in --output-dir.",
    )
    parser.add_argument("--clone", action="store_true", help="Clone missing local mirrors before joining.")
    parser.add_argument("--no-progress", action="store_true")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_settings(args: Optional[argparse.Namespace] = None) -> PipelineSettings:
    """Return immutable settings, falling back to the configured REPOS list."""

    args = args or parse_args([])
    repos = tuple(repo.strip() for repo in (args.repos or REPOS))
    return PipelineSettings(
        repos=repos,
        output_dir=Path(args.output_dir),
        repos_dir=Path(args.repos_dir),
        kinds=tuple(args.kinds),
        max_workers=max(1, int(args.max_workers)),
        from_saved=bool(args.from_saved),
        clone=bool(args.clone),
        show_progress=not args.no_progress,
    )


__all__ = [
    "PipelineSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
]
