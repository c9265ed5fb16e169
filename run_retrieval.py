"""Fetch and persist the mappings without joining them."""

from __future__ import annotations

import sys
from typing import List, Optional

from src.retrieval.runner import main as retrieval_main


def main(argv: Optional[List[str]] = None) -> None:
    """Hand every argument to the retrieval runner; a malformed identifier aborts the run."""
    args = sys.argv[1:] if argv is None else list(argv)
    retrieval_main(args or None)


if __name__ == "__main__":
    main()
