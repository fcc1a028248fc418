"""Proportional, cyclically ordered subdivision of a time span.

A node ruled by ``r`` is split into one child per ruler, in sequence order
starting at ``r``, each lasting ``parent_nominal * weight / total``. The
children of a node are laid out from the node's *theoretical* start
(``end - nominal``); children that end before the node's actual start are
dropped and the first survivor is clipped. This is how a period already in
progress at birth is represented, and it repeats at every level.

Children are built on first access and cached on the node, so deep trees only
cost what is actually read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import cached_property
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import MalformedWeights
from .timebase import Interval


@dataclass(frozen=True)
class Ruler:
    name: str
    weight: int


@dataclass(frozen=True)
class RulerSequence:
    """Cyclic list of weighted rulers whose weights add up to ``total``."""

    rulers: Tuple[Ruler, ...]
    total: int

    def __post_init__(self) -> None:
        if not self.rulers:
            raise MalformedWeights("ruler sequence is empty")
        names = [r.name for r in self.rulers]
        if len(set(names)) != len(names):
            raise MalformedWeights(f"duplicate ruler names in {names}")
        if any(r.weight <= 0 for r in self.rulers):
            raise MalformedWeights("ruler weights must be positive")
        weight_sum = sum(r.weight for r in self.rulers)
        if weight_sum != self.total:
            raise MalformedWeights(f"ruler weights sum to {weight_sum}, expected {self.total}")

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, int]], total: Optional[int] = None) -> "RulerSequence":
        rulers = tuple(Ruler(name, int(weight)) for name, weight in pairs)
        expected = total if total is not None else sum(r.weight for r in rulers)
        return cls(rulers, expected)

    def __len__(self) -> int:
        return len(self.rulers)

    def __iter__(self) -> Iterator[Ruler]:
        return iter(self.rulers)

    @property
    def names(self) -> List[str]:
        return [r.name for r in self.rulers]

    def index_of(self, name: str) -> int:
        for idx, ruler in enumerate(self.rulers):
            if ruler.name == name:
                return idx
        raise KeyError(name)

    def weight_of(self, name: str) -> int:
        return self.rulers[self.index_of(name)].weight

    def rotated(self, name: str) -> Tuple[Ruler, ...]:
        """Rulers in cyclic order starting at ``name``."""

        idx = self.index_of(name)
        return self.rulers[idx:] + self.rulers[:idx]


@dataclass(frozen=True)
class PeriodNode:
    ruler: str
    start: datetime
    end: datetime
    level: int
    nominal: timedelta
    sequence: RulerSequence = field(repr=False, compare=False)
    depth: int = field(repr=False, compare=False)
    laps: int = field(default=1, repr=False, compare=False)

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def theoretical_start(self) -> datetime:
        return self.end - self.nominal

    @property
    def is_partial(self) -> bool:
        return self.duration < self.nominal

    @cached_property
    def children(self) -> Tuple["PeriodNode", ...]:
        if self.level >= self.depth:
            return ()

        total = self.sequence.total
        lap = self.nominal / self.laps
        built: List[PeriodNode] = []
        for lap_index in range(self.laps):
            origin = self.theoretical_start + lap * lap_index
            closing = lap_index == self.laps - 1
            cumulative = 0
            for ruler in self.sequence.rotated(self.ruler):
                child_start = origin + lap * cumulative / total
                cumulative += ruler.weight
                # last child closes exactly on the parent end
                if closing and cumulative == total:
                    child_end = self.end
                else:
                    child_end = origin + lap * cumulative / total
                if child_end <= self.start:
                    continue
                built.append(
                    PeriodNode(
                        ruler=ruler.name,
                        start=max(child_start, self.start),
                        end=child_end,
                        level=self.level + 1,
                        nominal=lap * ruler.weight / total,
                        sequence=self.sequence,
                        depth=self.depth,
                    )
                )
        return tuple(built)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def active_path(self, moment: datetime) -> List["PeriodNode"]:
        """Nodes containing ``moment``, from this node down to the deepest built level."""

        if not self.contains(moment):
            return []
        path = [self]
        node = self
        while node.children:
            node = next((child for child in node.children if child.contains(moment)), None)
            if node is None:
                break
            path.append(node)
        return path

    def walk(self) -> Iterator["PeriodNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_record(self, unit: timedelta = timedelta(days=1)) -> Dict[str, Any]:
        return {
            "ruler": self.ruler,
            "level": self.level,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration / unit,
            "partial": self.is_partial,
            "children": [child.to_record(unit) for child in self.children],
        }


def build_tree(
    anchor: str,
    root_start: datetime,
    root_end: datetime,
    depth: int,
    sequence: Union[RulerSequence, Sequence[Tuple[str, int]]],
    nominal: Optional[timedelta] = None,
    laps: int = 1,
) -> PeriodNode:
    """Build the root of a period tree covering ``[root_start, root_end)``.

    ``nominal`` is the full length of the root's cycle; when it exceeds the
    root span the earliest children are clipped to ``root_start``. With
    ``laps > 1`` the root's children run through the sequence that many times,
    each pass lasting ``nominal / laps``.
    """

    if not isinstance(sequence, RulerSequence):
        sequence = RulerSequence.from_pairs(sequence)
    if root_end <= root_start:
        raise ValueError("root_end must be after root_start")
    if depth < 0:
        raise ValueError("depth must be non-negative")
    if laps < 1:
        raise ValueError("laps must be at least 1")
    if anchor not in sequence.names:
        raise ValueError(f"unknown ruler {anchor!r}")
    span = root_end - root_start
    nominal = span if nominal is None else nominal
    if nominal < span:
        raise ValueError("nominal duration cannot be shorter than the root span")
    return PeriodNode(anchor, root_start, root_end, 0, nominal, sequence, depth, laps)


__all__ = ["Ruler", "RulerSequence", "PeriodNode", "build_tree"]
