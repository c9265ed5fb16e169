"""Join stage combining fetched mappings with local repository mirrors."""

from .joiner import RepoAnalysis, align_repo_data, print_analysis_summary

__all__ = ["RepoAnalysis", "align_repo_data", "print_analysis_summary"]
