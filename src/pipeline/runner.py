"""Entry points for running the end-to-end correlation pipeline."""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from src.correlation.joiner import RepoAnalysis, align_repo_data, print_analysis_summary
from src.correlation.mirrors import clone_mirrors
from src.retrieval.config import SUMMARY_FILENAME
from src.retrieval.http_client import GitHubClient
from src.retrieval.runner import collect_repositories, parse_repositories
from src.retrieval.progress import ProgressReporter, TqdmProgress
from src.retrieval.storage import ensure_dir, load_mappings, save_json, save_mappings

from .config import PipelineSettings, parse_args, resolve_settings


def _progress(settings: PipelineSettings) -> ProgressReporter:
    return TqdmProgress() if settings.show_progress else ProgressReporter()


def run(settings: PipelineSettings, client: Optional[GitHubClient] = None) -> List[RepoAnalysis]:
    """Fetch (or reload) the mappings, optionally clone mirrors, then join and report."""
    if not settings.repos:
        print("No repositories specified. Provide CLI args or edit REPOS in config.py.")
        sys.exit(1)

    identifiers = parse_repositories(settings.repos)
    ensure_dir(settings.output_dir)

    if settings.from_saved:
        print(f"Loading saved mappings from {settings.output_dir}...")
        issues, pulls, commits = load_mappings(settings.output_dir)
    else:
        print(f"Processing {len(identifiers)} repos...")
        batch = collect_repositories(
            client or GitHubClient(),
            settings.repos,
            kinds=settings.kinds,
            progress=_progress(settings),
            max_workers=settings.max_workers,
        )
        fetched = batch.fetched_mappings()
        save_mappings(settings.output_dir, *fetched, batch.failures)
        if None in fetched:
            # Kinds left out of this run are joined from what an earlier run saved.
            saved = load_mappings(settings.output_dir)
            fetched = tuple(saved_mapping if mapping is None else mapping
                            for mapping, saved_mapping in zip(fetched, saved))
        issues, pulls, commits = fetched

    if settings.clone:
        clone_mirrors(identifiers, settings.repos_dir, progress=_progress(settings))

    analyses = align_repo_data(
        [repo.full_name for repo in identifiers],
        issues,
        pulls,
        commits,
        repos_dir=settings.repos_dir,
    )
    print_analysis_summary(analyses)
    save_json(
        os.path.join(settings.output_dir, SUMMARY_FILENAME),
        [analysis.summary() for analysis in analyses],
    )
    print(f"\n    DONE CORRELATING DATA -> {settings.output_dir}")
    return analyses


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point; accepts argv overrides for testing."""
    settings = resolve_settings(parse_args(argv))
    for analysis in run(settings):
        analysis.close()


if __name__ == "__main__":
    main()
