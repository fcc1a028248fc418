"""Locate the moment a discretised quantity changes value.

The search probes forward in fixed steps until the classification differs
from ``current_index`` and then bisects the bracket a fixed number of times.
It assumes the sampled quantity advances monotonically (mod its cycle) across
one probe step; quantities that can stall or reverse (retrograde bodies,
stationary points) are not guarded against.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from .errors import BoundaryNotFound

logger = logging.getLogger(__name__)

DEFAULT_STEP = timedelta(hours=1)
# 1h / 2**10 ~= 3.5s, well inside the one-minute tolerance
DEFAULT_ITERATIONS = 10

Sampler = Callable[[datetime], int]


def _check_start(start: datetime, current_index: int, sample_fn: Sampler) -> None:
    observed = sample_fn(start)
    if observed != current_index:
        raise ValueError(f"sample at {start.isoformat()} is {observed}, expected {current_index}")


def find_boundary(
    start: datetime,
    current_index: int,
    sample_fn: Sampler,
    search_horizon: timedelta,
    step: timedelta = DEFAULT_STEP,
    iterations: int = DEFAULT_ITERATIONS,
) -> datetime:
    """Return the first sampled moment after ``start`` whose index differs.

    Raises ``BoundaryNotFound`` when no change is seen within ``search_horizon``.
    """

    if step <= timedelta(0):
        raise ValueError("step must be positive")
    _check_start(start, current_index, sample_fn)

    limit = start + search_horizon
    low = start
    high = None
    probe = start
    while probe < limit:
        probe = min(probe + step, limit)
        if sample_fn(probe) != current_index:
            high = probe
            break
        low = probe

    if high is None:
        logger.warning(
            "boundary_not_found",
            extra={"start": start.isoformat(), "index": current_index, "horizon_s": search_horizon.total_seconds()},
        )
        raise BoundaryNotFound(
            f"index {current_index} did not change within {search_horizon} of {start.isoformat()}",
            start=start,
            horizon=search_horizon,
        )

    for _ in range(iterations):
        midpoint = low + (high - low) / 2
        if sample_fn(midpoint) == current_index:
            low = midpoint
        else:
            high = midpoint

    return high


def find_previous_boundary(
    start: datetime,
    current_index: int,
    sample_fn: Sampler,
    search_horizon: timedelta,
    step: timedelta = DEFAULT_STEP,
    iterations: int = DEFAULT_ITERATIONS,
) -> datetime:
    """Return the earliest sampled moment at or before ``start`` that still has ``current_index``."""

    if step <= timedelta(0):
        raise ValueError("step must be positive")
    _check_start(start, current_index, sample_fn)

    limit = start - search_horizon
    near = start
    far = None
    probe = start
    while probe > limit:
        probe = max(probe - step, limit)
        if sample_fn(probe) != current_index:
            far = probe
            break
        near = probe

    if far is None:
        logger.warning(
            "boundary_not_found",
            extra={"start": start.isoformat(), "index": current_index, "horizon_s": -search_horizon.total_seconds()},
        )
        raise BoundaryNotFound(
            f"index {current_index} did not begin within {search_horizon} before {start.isoformat()}",
            start=start,
            horizon=search_horizon,
        )

    for _ in range(iterations):
        midpoint = far + (near - far) / 2
        if sample_fn(midpoint) == current_index:
            near = midpoint
        else:
            far = midpoint

    return near


__all__ = ["find_boundary", "find_previous_boundary", "DEFAULT_STEP", "DEFAULT_ITERATIONS"]
