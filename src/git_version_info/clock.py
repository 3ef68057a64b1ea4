"""Injectable clock for report timestamps and run durations."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable

DEFAULT_TZ: tzinfo = timezone.utc


@dataclass(frozen=True)
class Clock:
    time_fn: Callable[[], float]
    monotonic_fn: Callable[[], float]
    timezone: tzinfo = DEFAULT_TZ

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.time_fn(), tz=self.timezone)

    def timestamp(self) -> str:
        """ISO-8601 wall-clock time for ``generated_at``."""
        return self.now().isoformat()

    def monotonic_ms(self) -> int:
        return int(self.monotonic_fn() * 1000)

    def elapsed_ms(self, start_ms: int) -> int:
        """Milliseconds since ``start_ms``, never negative."""
        return max(0, self.monotonic_ms() - start_ms)


def default_clock() -> Clock:
    return Clock(time_fn=time.time, monotonic_fn=time.perf_counter)
