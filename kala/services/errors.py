"""Failure types raised by the period engines."""

from __future__ import annotations


class KalaError(RuntimeError):
    """Base class for engine failures that callers are expected to handle."""


class BoundaryNotFound(KalaError):
    """Raised when a boundary search exhausts its horizon without a transition."""

    def __init__(self, message: str, *, start=None, horizon=None):
        super().__init__(message)
        self.start = start
        self.horizon = horizon


class OracleUnavailable(KalaError):
    """Raised when the ephemeris oracle cannot produce a sample."""


class DegenerateDay(KalaError):
    """Raised when sunrise or sunset cannot be resolved for a local day."""

    def __init__(self, message: str, *, day=None):
        super().__init__(message)
        self.day = day


class MalformedWeights(KalaError, ValueError):
    """Raised when a ruler sequence does not add up to its declared total."""


__all__ = [
    "KalaError",
    "BoundaryNotFound",
    "OracleUnavailable",
    "DegenerateDay",
    "MalformedWeights",
]
