"""Options for log cores and a limiter for how often they flush."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class CoreOptions:
    """Minimum seconds between flushes and the longest message kept."""

    sync_interval: float = 0.0
    max_message_size: int = 0


class SyncLimiter:
    """Allows a sync at most once per interval; a non-positive interval allows all."""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval = interval
        self._clock = clock
        self._last: float | None = None
        self._lock = threading.Lock()

    def can_sync(self) -> bool:
        if self.interval <= 0:
            return True
        with self._lock:
            now = self._clock()
            allowed = self._last is None or now - self._last >= self.interval
            if allowed:
                self._last = now
            return allowed