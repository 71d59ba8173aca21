# IntervalRoots SDK - Solver
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
High-level root finding API.

This module provides the main user-facing interface. Every function builds
a fresh RootSearch, so calls share no state.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any, Callable, Optional

import numpy as np

from .config import Config, Operator
from .domain import Number, midpoint_radius as _midpoint_radius
from .postprocess import midpoint_radius_arrays
from .result import RootsResult, RootStatus
from .search import RootSearch


TargetFunction = Callable[[Any], Any]


def _resolve_config(
    config: Optional[Config],
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    operator: Optional[Operator] = None,
    precision: Optional[int] = None,
) -> Config:
    """Apply explicit keyword overrides on top of a Config."""
    if config is None:
        config = Config()
    overrides = {}
    if tolerance is not None:
        overrides['tolerance'] = tolerance
    if max_iterations is not None:
        overrides['max_iterations'] = max_iterations
    if operator is not None:
        overrides['operator'] = operator
    if precision is not None:
        overrides['precision'] = precision
    if overrides:
        return replace(config, **overrides)
    return config


def roots(
    f: TargetFunction,
    domain: Any,
    derivative: Optional[TargetFunction] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Find all roots of f in a domain with the operator chosen by config.

    Args:
        f: Target function. Write it with ordinary arithmetic and the
           functions in intervalroots.functions.
        domain: Interval, (lo, hi) pair, Root, or sequence of Roots.
        derivative: Optional interval extension of f'. Computed by
           automatic differentiation when omitted.
        tolerance: Overrides config.tolerance.
        max_iterations: Overrides config.max_iterations.
        config: Search configuration.

    Returns:
        RootsResult, a sorted sequence of Root.

    Raises:
        InvalidInterval: If the domain is malformed.

    Example:
        >>> result = roots(lambda x: x**2 - 2, (-5, 5))
        >>> [r.status.value for r in result]
        ['unique', 'unique']
    """
    cfg = _resolve_config(config, tolerance, max_iterations)
    return RootSearch(f, derivative, cfg).run(domain)


def newton(
    f: TargetFunction,
    domain: Any,
    derivative: Optional[TargetFunction] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Find roots with the interval Newton operator.

    When domain is a sequence of Roots (for instance the result of an
    earlier search) each root's interval is refined as a fresh seed, at the
    precision given by config.

    Returns:
        RootsResult. UNIQUE roots are proven to hold exactly one root.
    """
    cfg = _resolve_config(config, tolerance, max_iterations, Operator.NEWTON)
    return RootSearch(f, derivative, cfg).run(domain)


def krawczyk(
    f: TargetFunction,
    domain: Any,
    derivative: Optional[TargetFunction] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Find roots with the Krawczyk operator.

    Same contract as newton(). Krawczyk needs no case split when F'(X)
    contains zero, at the price of looser enclosures near simple roots.
    """
    cfg = _resolve_config(config, tolerance, max_iterations, Operator.KRAWCZYK)
    return RootSearch(f, derivative, cfg).run(domain)


def bisection(
    f: TargetFunction,
    domain: Any,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Enclose roots by bisection and range exclusion only.

    No derivative is used and no root is ever certified UNIQUE.
    """
    cfg = _resolve_config(config, tolerance, max_iterations, Operator.BISECTION)
    return RootSearch(f, None, cfg).run(domain)


def refine(
    f: TargetFunction,
    found: Any,
    derivative: Optional[TargetFunction] = None,
    precision: Optional[int] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Refine previously found roots, typically at a higher precision.

    Args:
        f: Target function.
        found: A Root, a sequence of Roots or a RootsResult.
        derivative: Optional interval extension of f'.
        precision: Working precision in bits. When given without a
           tolerance, the tolerance follows Config.high_precision().
        tolerance: Overrides the width tolerance.
        max_iterations: Overrides the iteration budget.
        config: Search configuration; its operator is used.

    Example:
        >>> coarse = find_roots(lambda x: x**2 - 2, -5, 5)
        >>> fine = refine(lambda x: x**2 - 2, coarse, precision=256)
    """
    if config is None and precision is not None:
        config = Config.high_precision(precision)
    cfg = _resolve_config(config, tolerance, max_iterations, precision=precision)
    return RootSearch(f, derivative, cfg).run(found)


def find_roots(
    f: TargetFunction,
    lo: Number,
    hi: Number,
    derivative: Optional[TargetFunction] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> RootsResult:
    """
    Find roots of f in [lo, hi].

    Convenience wrapper around roots() taking scalar bounds. Bounds are
    rounded outward, so find_roots(f, '0.1', 1) searches an interval that
    contains 0.1.

    Raises:
        InvalidInterval: If lo > hi or a bound is not a finite number.
    """
    return roots(f, (lo, hi), derivative, tolerance, max_iterations, config)


def find_roots_midpoint(
    f: TargetFunction,
    lo: Number,
    hi: Number,
    derivative: Optional[TargetFunction] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[Config] = None,
) -> tuple[np.ndarray, np.ndarray, list[RootStatus]]:
    """
    Find roots of f in [lo, hi] and return them as plain numbers.

    Returns:
        Tuple of (midpoints, radii, statuses). Midpoints and radii are
        float64 arrays in ascending order.

    Example:
        >>> mids, rads, statuses = find_roots_midpoint(lambda x: x**2 - 2, -5, 5)
        >>> mids
        array([-1.41421356,  1.41421356])
    """
    result = find_roots(f, lo, hi, derivative, tolerance, max_iterations, config)
    return midpoint_radius_arrays(result)


def midpoint_radius(interval: Any):
    """
    (midpoint, radius) view of an Interval, a Root or a (lo, hi) pair.

    Example:
        >>> mid, rad = midpoint_radius((0.1, 0.2))  # ~ (0.15, 0.05)
    """
    return _midpoint_radius(interval)
