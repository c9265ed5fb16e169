"""Convenience shim to run fetch, join, and report in one go."""

from __future__ import annotations

import sys

from src.pipeline.runner import main as run_pipeline


if __name__ == "__main__":
    run_pipeline(sys.argv[1:])
