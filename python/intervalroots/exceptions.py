# IntervalRoots SDK - Exceptions
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Exception hierarchy for IntervalRoots.

Only malformed caller input is raised out of the public API. Failures that
concern a single candidate interval are absorbed by the search driver and
reported on the result object instead.
"""

from __future__ import annotations
from typing import Any, Optional


class IntervalRootsError(Exception):
    """Base class for all IntervalRoots errors."""


class InvalidInterval(IntervalRootsError, ValueError):
    """
    Raised when a caller supplies a malformed interval.

    Covers lo > hi, NaN or infinite bounds, non-numeric bounds and empty
    seeds. Always raised at the entry point, before any search starts.
    """

    def __init__(self, message: str, lo: Any = None, hi: Any = None):
        super().__init__(message)
        self.lo = lo
        self.hi = hi


class NonFiniteDerivative(IntervalRootsError, ArithmeticError):
    """
    The derivative enclosure of a candidate has no finite information.

    The driver catches this per candidate and reports the candidate as an
    UNKNOWN root.
    """

    def __init__(self, message: str, interval: Optional[Any] = None):
        super().__init__(message)
        self.interval = interval


class OverlappingUniqueRoots(IntervalRootsError):
    """
    Two roots certified as unique have overlapping enclosures.

    Recorded on the result during postprocessing, never raised: the two
    roots are kept apart instead of being merged.
    """

    def __init__(self, first: Any, second: Any):
        super().__init__(
            f"Unique roots {first.interval} and {second.interval} overlap"
        )
        self.first = first
        self.second = second


class ConfigError(IntervalRootsError, ValueError):
    """Raised for an invalid search configuration."""
