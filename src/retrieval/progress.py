"""Progress reporting injected into the batch coordinator."""

from __future__ import annotations

import threading
from typing import Optional

from tqdm import tqdm

BAR_FORMAT = "[{elapsed}] {bar:40} {n_fmt}/{total_fmt} {desc}"


class ProgressReporter:
    """Receives one `advance` per completed repository. The base class is a no-op."""

    def start(self, total: int, description: str = "") -> None:
        pass

    def advance(self, repo_name: str) -> None:
        pass

    def finish(self, message: str = "") -> None:
        pass


class TqdmProgress(ProgressReporter):
    """tqdm bar whose counter is guarded so concurrent advances are never lost."""

    def __init__(self, disable: bool = False) -> None:
        self.disable = disable
        self._bar: Optional[tqdm] = None
        self._lock = threading.Lock()
        self.completed = 0

    def start(self, total: int, description: str = "") -> None:
        with self._lock:
            self.completed = 0
            self._bar = tqdm(
                total=total,
                desc=description,
                bar_format=BAR_FORMAT,
                ascii=True,
                disable=self.disable,
            )

    def advance(self, repo_name: str) -> None:
        with self._lock:
            self.completed += 1
            if self._bar is not None:
                self._bar.set_description_str(f"Processed {repo_name}")
                self._bar.update(1)

    def finish(self, message: str = "") -> None:
        with self._lock:
            if self._bar is None:
                return
            if message:
                self._bar.set_description_str(message)
            self._bar.close()
            self._bar = None


__all__ = ["ProgressReporter", "TqdmProgress", "BAR_FORMAT"]
