# IntervalRoots SDK - Result Types
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Result types returned by the root search.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

import mpmath

from .domain import Interval


class RootStatus(Enum):
    """Classification of a candidate interval."""
    UNIQUE = "unique"  # Exactly one root, proven by a containment test
    UNKNOWN = "unknown"  # Undecided; the interval is a best-effort enclosure
    EMPTY = "empty"  # Proven root-free; never attached to an emitted Root


@dataclass(frozen=True)
class Root:
    """
    An isolated root enclosure.

    Attributes:
        interval: Interval enclosing the root (or roots, if UNKNOWN)
        status: UNIQUE or UNKNOWN
    """
    interval: Interval
    status: RootStatus

    def __post_init__(self):
        if self.status is RootStatus.EMPTY:
            raise ValueError("A Root cannot carry EMPTY status")

    @property
    def is_unique(self) -> bool:
        return self.status is RootStatus.UNIQUE

    def midpoint_radius(self) -> tuple[mpmath.mpf, mpmath.mpf]:
        return self.interval.midpoint_radius()

    def __repr__(self) -> str:
        return f"Root({self.interval}, :{self.status.value})"


@dataclass(frozen=True)
class CandidateFailure:
    """
    A per-candidate failure absorbed by the search.

    Attributes:
        interval: The candidate (or merged region) concerned
        error: The exception describing what went wrong
    """
    interval: Interval
    error: Exception

    @property
    def kind(self) -> str:
        return type(self.error).__name__


@dataclass
class RootsResult:
    """
    Result of a root search: a read-only, sorted sequence of Root.

    Every part of the seed intervals is accounted for: each point lies in
    an emitted root or in one of the discarded (proven root-free) intervals.

    Attributes:
        roots: Emitted roots, merged and sorted by lower bound
        discarded: Intervals proven to contain no root
        failures: Candidates degraded to UNKNOWN, and overlapping unique roots
        seeds: The seed intervals of the search
        iterations: Total number of operator applications
        precision: Working precision in bits
        total_time_ms: Wall-clock time of the search
    """
    roots: list[Root] = field(default_factory=list)
    discarded: list[Interval] = field(default_factory=list)
    failures: list[CandidateFailure] = field(default_factory=list)
    seeds: list[Interval] = field(default_factory=list)
    iterations: int = 0
    precision: int = 53
    total_time_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.roots)

    def __iter__(self) -> Iterator[Root]:
        return iter(self.roots)

    def __getitem__(self, index: Union[int, slice]) -> Union[Root, list[Root]]:
        return self.roots[index]

    @property
    def unique_roots(self) -> list[Root]:
        """Roots proven to be unique in their enclosure."""
        return [r for r in self.roots if r.is_unique]

    @property
    def unknown_roots(self) -> list[Root]:
        """Roots that could not be certified."""
        return [r for r in self.roots if not r.is_unique]

    @property
    def all_unique(self) -> bool:
        """True if every emitted root is certified unique."""
        return all(r.is_unique for r in self.roots)

    def statuses(self) -> list[RootStatus]:
        return [r.status for r in self.roots]

    def find(self, x) -> Optional[Root]:
        """The first root whose interval contains x, if any."""
        for root in self.roots:
            if x in root.interval:
                return root
        return None

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            f"RootsResult: {len(self.roots)} roots",
            f"  Unique: {len(self.unique_roots)}",
            f"  Unknown: {len(self.unknown_roots)}",
            f"  Discarded intervals: {len(self.discarded)}",
            f"  Iterations: {self.iterations}",
            f"  Precision: {self.precision} bits",
            f"  Time: {self.total_time_ms:.1f}ms",
        ]
        for root in self.roots:
            lines.append(f"    {root.interval} {root.status.value}")
        if self.failures:
            lines.append(f"  Failures: {len(self.failures)}")
            for failure in self.failures:
                lines.append(f"    {failure.interval} {failure.kind}: {failure.error}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RootsResult({len(self.unique_roots)} unique, "
            f"{len(self.unknown_roots)} unknown, {self.iterations} iterations)"
        )
