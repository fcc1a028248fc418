"""Scan a time range for windows where a predicate holds.

The predicate is evaluated once per step at the step's midpoint. Passing steps
that touch the previous window and share its quality extend it; a new
``Window`` is constructed for the extension rather than mutating the old one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from .timebase import Interval, ensure_utc

DEFAULT_STEP = timedelta(minutes=30)


class Verdict(NamedTuple):
    passed: bool
    quality: str = ""
    factors: Tuple[str, ...] = ()


REJECT = Verdict(False)

Predicate = Callable[[datetime], Verdict]


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime
    quality: str
    factors: Tuple[str, ...] = ()

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def extended(self, end: datetime, factors: Sequence[str] = ()) -> "Window":
        merged = tuple(dict.fromkeys(self.factors + tuple(factors)))
        return Window(self.start, end, self.quality, merged)

    def to_dict(self, tz: Optional[ZoneInfo] = None) -> Dict[str, Any]:
        start = self.start.astimezone(tz) if tz else self.start
        end = self.end.astimezone(tz) if tz else self.end
        return {
            "start_ts": start.isoformat(),
            "end_ts": end.isoformat(),
            "quality": self.quality,
            "factors": list(self.factors),
        }


def scan(
    start: datetime,
    end: datetime,
    step: Optional[timedelta],
    predicate: Predicate,
) -> Tuple[Window, ...]:
    """Return time-ordered, non-overlapping, maximal windows in ``[start, end)``."""

    step = step or DEFAULT_STEP
    if step <= timedelta(0):
        raise ValueError("step must be positive")
    start = ensure_utc(start)
    end = ensure_utc(end)

    windows: List[Window] = []
    cursor = start
    while cursor < end:
        step_end = min(cursor + step, end)
        verdict = predicate(cursor + (step_end - cursor) / 2)
        if verdict.passed:
            last = windows[-1] if windows else None
            if last is not None and last.end == cursor and last.quality == verdict.quality:
                windows[-1] = last.extended(step_end, verdict.factors)
            else:
                windows.append(Window(cursor, step_end, verdict.quality, tuple(verdict.factors)))
        cursor = step_end
    return tuple(windows)


__all__ = ["Verdict", "Window", "REJECT", "scan", "DEFAULT_STEP"]
