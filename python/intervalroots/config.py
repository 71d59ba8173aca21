# IntervalRoots SDK - Configuration
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Search configuration for interval root finding.

A Config is immutable; use dataclasses.replace() or one of the presets
to derive variants.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Callable, Optional

from .exceptions import ConfigError


# (processed_candidates, pending_candidates, emitted_roots) -> None
ProgressCallback = Callable[[int, int, int], None]


class Operator(Enum):
    """Contraction operator applied to each candidate interval."""
    NEWTON = "newton"  # Interval Newton with extended division
    KRAWCZYK = "krawczyk"  # Krawczyk operator, no split on 0 in F'(X)
    BISECTION = "bisection"  # Range exclusion only, never certifies


class SearchOrder(Enum):
    """Order in which the worklist is drained."""
    DEPTH_FIRST = "depth_first"  # LIFO
    BREADTH_FIRST = "breadth_first"  # FIFO


@dataclass(frozen=True)
class Config:
    """
    Configuration for a root search.

    Attributes:
        tolerance: Width below which an UNKNOWN candidate is reported
            instead of being subdivided, and below which UNIQUE roots stop
            being polished
        max_iterations: Operator applications allowed along the lineage
            of a single candidate
        operator: Contraction operator to apply
        precision: Working precision in bits of the interval context
        search_order: Depth-first or breadth-first worklist
        bisection_ratio: Relative position of the cut when bisecting
        merge_tolerance: Largest gap between two UNKNOWN roots that are
            merged during postprocessing; the search never merges less
            than tolerance
        parallel: Drain the worklist with a thread pool
        max_workers: Pool size (None = auto)
        progress_callback: Optional callback for progress updates
        progress_interval_ms: Minimum interval between progress callbacks
    """
    tolerance: float = 1e-10
    max_iterations: int = 50
    operator: Operator = Operator.NEWTON
    precision: int = 53
    search_order: SearchOrder = SearchOrder.DEPTH_FIRST
    bisection_ratio: Fraction = Fraction(127, 256)
    merge_tolerance: float = 0.0
    parallel: bool = False
    max_workers: Optional[int] = None
    progress_callback: Optional[ProgressCallback] = None
    progress_interval_ms: int = 100

    def __post_init__(self):
        if not self.tolerance >= 0:
            raise ConfigError(f"tolerance must be non-negative, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if self.precision < 2:
            raise ConfigError(f"precision must be at least 2 bits, got {self.precision}")
        if not 0 < self.bisection_ratio < 1:
            raise ConfigError(f"bisection_ratio must lie in (0, 1), got {self.bisection_ratio}")
        if not self.merge_tolerance >= 0:
            raise ConfigError(f"merge_tolerance must be non-negative, got {self.merge_tolerance}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers}")
        if not isinstance(self.operator, Operator):
            raise ConfigError(f"Unknown operator: {self.operator!r}")
        if not isinstance(self.search_order, SearchOrder):
            raise ConfigError(f"Unknown search order: {self.search_order!r}")

    @classmethod
    def quick(cls) -> 'Config':
        """Coarse enclosures with a small budget."""
        return cls(tolerance=1e-6, max_iterations=30)

    @classmethod
    def thorough(cls) -> 'Config':
        """Tight enclosures with a generous budget."""
        return cls(tolerance=1e-14, max_iterations=200)

    @classmethod
    def high_precision(cls, bits: int = 256, **kwargs) -> 'Config':
        """
        Arbitrary-precision search.

        The tolerance defaults to roughly 2**(-bits/1.25) so that certified
        roots are polished close to the working precision.
        """
        kwargs.setdefault('tolerance', 2.0 ** (-int(bits / 1.25)))
        kwargs.setdefault('max_iterations', 200)
        return cls(precision=bits, **kwargs)

    @classmethod
    def with_progress(cls, callback: ProgressCallback, **kwargs) -> 'Config':
        """Create config with a progress callback."""
        return cls(progress_callback=callback, **kwargs)
