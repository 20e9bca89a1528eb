"""Progress tracking utilities."""

from __future__ import annotations

import threading
from typing import Optional

from tqdm import tqdm


class ProgressTracker:
    """Byte progress bar for a running transfer."""

    def __init__(self, description: str = "Uploading") -> None:
        self.description = description
        self.total = 0
        self.transferred = 0
        self._bar: Optional[tqdm] = None
        self._lock = threading.Lock()

    def start(self, total: int) -> None:
        with self._lock:
            self.total = total
            # bytes may arrive from worker threads before the bar exists
            self._bar = tqdm(
                total=total,
                initial=self.transferred,
                desc=self.description,
                unit="B",
                unit_scale=True,
                unit_divisor=1024,
            )

    def add_bytes(self, amount: int) -> None:
        with self._lock:
            self.transferred += amount
            if self._bar is not None:
                self._bar.update(amount)

    def finish(self) -> None:
        with self._lock:
            if self._bar is not None:
                self._bar.close()
                self._bar = None
