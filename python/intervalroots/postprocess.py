# IntervalRoots SDK - Result Postprocessing
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Postprocessing of emitted roots: merging, sorting and the
midpoint/radius projection.

Merge rules for two roots whose intervals meet:
- UNKNOWN + UNKNOWN within the merge tolerance of each other: UNKNOWN hull
- UNKNOWN contained in any UNIQUE: the UNIQUE root (it holds at most that root)
- UNKNOWN and UNIQUE overlapping otherwise: UNKNOWN hull
- UNIQUE + UNIQUE: never merged. Overlapping unique roots are reported
  as OverlappingUniqueRoots and both are kept.
"""

from __future__ import annotations
from typing import Iterable, Optional

import numpy as np

from .exceptions import OverlappingUniqueRoots
from .result import Root, RootStatus


def sort_roots(roots: Iterable[Root]) -> list[Root]:
    """Sort roots ascending by lower bound, then upper bound."""
    return sorted(roots, key=lambda r: (r.interval.lo, r.interval.hi))


def _overlap_has_length(a: Root, b: Root) -> bool:
    common = a.interval & b.interval
    return not common.is_empty() and not common.is_point()


def merge_pair(a: Root, b: Root, tolerance: float = 0.0) -> Optional[Root]:
    """
    Merge two roots, or return None if they stay separate.

    Args:
        a: First root
        b: Second root
        tolerance: Largest gap between two UNKNOWN roots that still merge

    Returns:
        The merged root, or None.
    """
    if not a.is_unique and not b.is_unique:
        if a.interval.gap(b.interval) <= tolerance:
            return Root(a.interval | b.interval, RootStatus.UNKNOWN)
        return None

    if a.is_unique and b.is_unique:
        return None

    unique, unknown = (a, b) if a.is_unique else (b, a)
    if unknown.interval.issubset(unique.interval):
        return unique
    if _overlap_has_length(a, b):
        return Root(a.interval | b.interval, RootStatus.UNKNOWN)
    return None


def clean_roots(
    roots: Iterable[Root],
    tolerance: float = 0.0,
) -> tuple[list[Root], list[OverlappingUniqueRoots]]:
    """
    Merge and sort emitted roots.

    Args:
        roots: Roots in emission order
        tolerance: Merge tolerance for UNKNOWN roots

    Returns:
        Tuple of (sorted merged roots, overlapping unique root reports).
    """
    merged: list[Root] = []
    overlaps: list[OverlappingUniqueRoots] = []

    for root in sort_roots(roots):
        # Overlapping seeds can leave a wide UNIQUE root behind the last one
        earlier = [m for m in merged if m.is_unique and m.interval.overlaps(root.interval)]
        if not root.is_unique and any(root.interval.issubset(m.interval) for m in earlier):
            continue
        if merged:
            combined = merge_pair(merged[-1], root, tolerance)
            if combined is not None:
                merged[-1] = combined
                continue
        if root.is_unique:
            overlaps.extend(OverlappingUniqueRoots(m, root) for m in earlier)
        merged.append(root)

    return merged, overlaps


def midpoint_radius_arrays(
    roots: Iterable[Root],
) -> tuple[np.ndarray, np.ndarray, list[RootStatus]]:
    """
    Project roots to plain numbers.

    Returns:
        Tuple of (midpoints, radii, statuses); midpoints and radii are
        float64 arrays, so precision beyond double is lost.
    """
    mids = []
    rads = []
    statuses = []
    for root in roots:
        mid, rad = root.midpoint_radius()
        mids.append(float(mid))
        rads.append(float(rad))
        statuses.append(root.status)
    return np.array(mids, dtype=np.float64), np.array(rads, dtype=np.float64), statuses
