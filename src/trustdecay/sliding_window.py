"""Sliding window of recent access outcomes for a single object.

Keeps the last W accesses with running totals so rates and burst checks
never rescan more than the window itself.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from trustdecay.config.defaults import (
    ACCESS_WINDOW_SIZE,
    BURST_MIN_EVENTS,
    BURST_SPAN,
)


@dataclass(frozen=True)
class AccessEntry:
    """One recorded access."""

    time: int
    legit: bool
    suspicious: bool


class AccessStats:
    """Bounded FIFO of access outcomes with running counts.

    Rates are divided by the window size, not by the number of entries
    currently held, so a window that is still filling reports lower rates.
    """

    def __init__(
        self,
        window_size: int = ACCESS_WINDOW_SIZE,
        burst_span: int = BURST_SPAN,
        burst_min_events: int = BURST_MIN_EVENTS,
    ):
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.burst_span = burst_span
        self.burst_min_events = burst_min_events

        self._window: deque[AccessEntry] = deque()
        self._total = 0
        self._legit = 0
        self._suspicious = 0

    def record(self, time: int, legit: bool, suspicious: bool) -> None:
        """Append an access and evict the oldest entries beyond the window."""
        self._window.append(AccessEntry(time=time, legit=legit, suspicious=suspicious))
        self._total += 1
        if legit:
            self._legit += 1
        if suspicious:
            self._suspicious += 1

        while len(self._window) > self.window_size:
            old = self._window.popleft()
            self._total -= 1
            if old.legit:
                self._legit -= 1
            if old.suspicious:
                self._suspicious -= 1

    @property
    def total_count(self) -> int:
        return self._total

    @property
    def legit_count(self) -> int:
        return self._legit

    @property
    def suspicious_count(self) -> int:
        return self._suspicious

    def access_rate(self) -> float:
        return self._total / self.window_size

    def legit_rate(self) -> float:
        return self._legit / self.window_size

    def suspicious_rate(self) -> float:
        return self._suspicious / self.window_size

    def burst_detected(self, now: int) -> bool:
        """True if enough suspicious accesses fall within the trailing span."""
        recent = sum(
            1 for e in self._window
            if e.suspicious and now - e.time <= self.burst_span
        )
        return recent >= self.burst_min_events

    def entries(self) -> list[AccessEntry]:
        """Snapshot of the window, oldest first."""
        return list(self._window)

    def __len__(self) -> int:
        return len(self._window)

    def get_status(self) -> dict:
        """Get current window status."""
        return {
            "window_size": self.window_size,
            "entries": len(self._window),
            "access_rate": self.access_rate(),
            "legit_rate": self.legit_rate(),
            "suspicious_rate": self.suspicious_rate(),
        }
