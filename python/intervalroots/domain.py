# IntervalRoots SDK - Domain Types
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Interval domain types.

Interval is an immutable value type with exact mpmath endpoints. All
rounding happens inside an mpmath interval context (one per search), which
provides directed-rounding arithmetic and interval extensions of the
elementary functions. Interval itself only does exact work: comparisons,
intersection, hull and containment tests on its endpoints.

Example:
    >>> ctx = make_context(53)
    >>> X = Interval.from_bounds('0.1', 2, ctx)
    >>> X.lo <= mpmath.mpf('0.1')
    True
"""

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Optional, Union
import numbers

import mpmath
from mpmath.ctx_iv import MPIntervalContext

from .exceptions import InvalidInterval


Number = Union[int, float, str, Fraction, mpmath.mpf]

DEFAULT_PRECISION = 53


def make_context(precision: int = DEFAULT_PRECISION) -> MPIntervalContext:
    """Create a private mpmath interval context with the given precision in bits."""
    ctx = MPIntervalContext()
    ctx.prec = precision
    return ctx


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, str)) or hasattr(value, '_mpf_')


def _plain(value: Any) -> Any:
    """Unwrap numpy scalars and other Real types mpmath cannot convert."""
    if isinstance(value, (int, float, str, Fraction)) or hasattr(value, '_mpf_'):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, numbers.Real):
        return float(value)
    return value


def to_iv(ctx: MPIntervalContext, value: Any):
    """
    Enclose a scalar in the interval context.

    Values that are not representable at the context precision (strings
    such as '0.1', Fractions, wide integers) are rounded outward.
    """
    if hasattr(value, '_mpi_'):
        return ctx.convert(value)
    value = _plain(value)
    if isinstance(value, Fraction):
        return ctx.mpf(value.numerator) / value.denominator
    return ctx.convert(value)


def _coerce_endpoint(value: Any) -> mpmath.mpf:
    if isinstance(value, mpmath.mpf):
        return value
    if not _is_number(value):
        raise InvalidInterval(f"Interval bound must be numeric, got {value!r}")
    value = _plain(value)
    if isinstance(value, Fraction):
        return mpmath.mpf(value.numerator) / value.denominator
    return mpmath.mpf(value)


@dataclass(frozen=True)
class Interval:
    """
    A closed real interval [lo, hi] with exact endpoints.

    The empty interval has NaN endpoints and is produced only by
    intersect(). Infinite endpoints are allowed for the transient
    results of extended division.

    Attributes:
        lo: Lower endpoint
        hi: Upper endpoint
    """
    lo: mpmath.mpf
    hi: mpmath.mpf

    def __post_init__(self):
        lo = _coerce_endpoint(self.lo)
        hi = _coerce_endpoint(self.hi)
        object.__setattr__(self, 'lo', lo)
        object.__setattr__(self, 'hi', hi)
        if mpmath.isnan(lo) and mpmath.isnan(hi):
            return
        if mpmath.isnan(lo) or mpmath.isnan(hi):
            raise InvalidInterval(f"Interval bound is NaN: [{lo}, {hi}]", lo, hi)
        if lo > hi:
            raise InvalidInterval(f"Interval has lo > hi: [{lo}, {hi}]", lo, hi)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls) -> 'Interval':
        """The empty interval."""
        return cls(mpmath.nan, mpmath.nan)

    @classmethod
    def from_bounds(
        cls,
        lo: Number,
        hi: Number,
        ctx: Optional[MPIntervalContext] = None,
    ) -> 'Interval':
        """
        Build a finite interval enclosing [lo, hi].

        Endpoints are rounded outward to the precision of ctx.

        Raises:
            InvalidInterval: If a bound is not numeric, not finite, or lo > hi.
        """
        if ctx is None:
            ctx = make_context()
        for bound in (lo, hi):
            if not _is_number(bound):
                raise InvalidInterval(f"Interval bound must be numeric, got {bound!r}", lo, hi)
        try:
            lo_enc = cls.from_iv(to_iv(ctx, lo))
            hi_enc = cls.from_iv(to_iv(ctx, hi))
        except (ValueError, TypeError, ZeroDivisionError) as e:
            raise InvalidInterval(f"Cannot convert interval bounds ({lo!r}, {hi!r}): {e}", lo, hi) from e
        if not (lo_enc.is_finite() and hi_enc.is_finite()):
            raise InvalidInterval(f"Interval bounds must be finite, got ({lo!r}, {hi!r})", lo, hi)
        if lo_enc.lo > hi_enc.hi:
            raise InvalidInterval(f"Interval has lo > hi: ({lo!r}, {hi!r})", lo, hi)
        return cls(lo_enc.lo, hi_enc.hi)

    @classmethod
    def from_iv(cls, value) -> 'Interval':
        """
        Convert an mpmath interval to an Interval without rounding.

        NaN endpoints are widened to the corresponding infinity.
        """
        a, b = value._mpi_
        lo = mpmath.mp.make_mpf(a)
        hi = mpmath.mp.make_mpf(b)
        if mpmath.isnan(lo):
            lo = -mpmath.inf
        if mpmath.isnan(hi):
            hi = mpmath.inf
        return cls(lo, hi)

    def to_iv(self, ctx: MPIntervalContext):
        """Convert to an mpmath interval of ctx, rounding outward if needed."""
        if self.is_empty():
            raise InvalidInterval("Cannot convert the empty interval")
        return ctx.mpf([self.lo, self.hi])

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def is_empty(self) -> bool:
        return mpmath.isnan(self.lo)

    def is_finite(self) -> bool:
        return not self.is_empty() and mpmath.isfinite(self.lo) and mpmath.isfinite(self.hi)

    def is_point(self) -> bool:
        return not self.is_empty() and self.lo == self.hi

    def is_entire(self) -> bool:
        return not self.is_empty() and mpmath.isinf(self.lo) and mpmath.isinf(self.hi)

    def contains(self, x: Union[Number, 'Interval']) -> bool:
        """Test whether a number or an interval lies inside this interval."""
        if isinstance(x, Interval):
            return x.issubset(self)
        if self.is_empty():
            return False
        x = _coerce_endpoint(x)
        return self.lo <= x <= self.hi

    def __contains__(self, x) -> bool:
        return self.contains(x)

    def issubset(self, other: 'Interval') -> bool:
        if self.is_empty():
            return True
        if other.is_empty():
            return False
        return other.lo <= self.lo and self.hi <= other.hi

    def isinterior(self, other: 'Interval') -> bool:
        """Strict inclusion: self lies in the interior of other."""
        if self.is_empty():
            return True
        if other.is_empty():
            return False
        return other.lo < self.lo and self.hi < other.hi

    def overlaps(self, other: 'Interval') -> bool:
        """True if the two intervals share at least one point."""
        return not self.intersect(other).is_empty()

    # -------------------------------------------------------------------------
    # Set operations (exact)
    # -------------------------------------------------------------------------

    def intersect(self, other: 'Interval') -> 'Interval':
        if self.is_empty() or other.is_empty():
            return Interval.empty()
        lo = max(self.lo, other.lo)
        hi = min(self.hi, other.hi)
        if lo > hi:
            return Interval.empty()
        return Interval(lo, hi)

    def hull(self, other: 'Interval') -> 'Interval':
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        return Interval(min(self.lo, other.lo), max(self.hi, other.hi))

    __and__ = intersect
    __or__ = hull

    def gap(self, other: 'Interval') -> mpmath.mpf:
        """Distance between two disjoint intervals, 0 if they touch or overlap."""
        if self.overlaps(other):
            return mpmath.mpf(0)
        if self.hi < other.lo:
            return mpmath.fsub(other.lo, self.hi, exact=True)
        return mpmath.fsub(self.lo, other.hi, exact=True)

    # -------------------------------------------------------------------------
    # Measures (exact, independent of any context precision)
    # -------------------------------------------------------------------------

    def width(self) -> mpmath.mpf:
        if self.is_empty():
            return mpmath.mpf(0)
        return mpmath.fsub(self.hi, self.lo, exact=True)

    def radius(self) -> mpmath.mpf:
        return self.midpoint_radius()[1]

    def midpoint(self) -> mpmath.mpf:
        if self.is_empty():
            return mpmath.nan
        if self.lo == self.hi:
            return self.lo
        if mpmath.isinf(self.lo) and mpmath.isinf(self.hi):
            return mpmath.mpf(0)
        if mpmath.isinf(self.lo) or mpmath.isinf(self.hi):
            return self.lo if mpmath.isfinite(self.lo) else self.hi
        return mpmath.ldexp(mpmath.fadd(self.lo, self.hi, exact=True), -1)

    def midpoint_radius(self) -> tuple[mpmath.mpf, mpmath.mpf]:
        """
        Project to a (midpoint, radius) pair.

        Both parts are exact, whatever precision the endpoints carry, so
        [mid - rad, mid + rad] is the interval itself.
        """
        mid = self.midpoint()
        if self.is_empty():
            return mid, mpmath.nan
        rad = max(
            mpmath.fsub(mid, self.lo, exact=True),
            mpmath.fsub(self.hi, mid, exact=True),
        )
        return mid, rad

    def __repr__(self) -> str:
        if self.is_empty():
            return "Interval(empty)"
        return f"Interval({mpmath.nstr(self.lo, 17)}, {mpmath.nstr(self.hi, 17)})"

    def __str__(self) -> str:
        if self.is_empty():
            return "[]"
        return f"[{mpmath.nstr(self.lo, 17)}, {mpmath.nstr(self.hi, 17)}]"


# =============================================================================
# Context-dependent points
# =============================================================================

def split_point(
    interval: Interval,
    ctx: MPIntervalContext,
    ratio: Fraction = Fraction(1, 2),
) -> mpmath.mpf:
    """
    A representable point of interval near lo + ratio * (hi - lo).

    The point is the lower end of the enclosure computed in ctx, so it
    always lies inside the interval.
    """
    if interval.is_point():
        return interval.lo
    lo = ctx.mpf(interval.lo)
    hi = ctx.mpf(interval.hi)
    c = lo + (ctx.mpf(ratio.numerator) / ratio.denominator) * (hi - lo)
    point = Interval.from_iv(c).lo
    return max(interval.lo, min(interval.hi, point))


def bisect(
    interval: Interval,
    ctx: MPIntervalContext,
    ratio: Fraction = Fraction(1, 2),
) -> Optional[tuple[Interval, Interval]]:
    """
    Split an interval at split_point().

    Returns:
        (left, right) sharing the cut point, or None when no representable
        point lies strictly inside the interval.
    """
    c = split_point(interval, ctx, ratio)
    if not (interval.lo < c < interval.hi):
        c = split_point(interval, ctx, Fraction(1, 2))
        if not (interval.lo < c < interval.hi):
            return None
    return Interval(interval.lo, c), Interval(c, interval.hi)


def midpoint_radius(interval: Union[Interval, Any]) -> tuple[mpmath.mpf, mpmath.mpf]:
    """
    (midpoint, radius) view of an interval, a root, or a (lo, hi) pair.

    Example:
        >>> mid, rad = midpoint_radius((0.1, 0.2))
        >>> float(mid), float(rad)  # approximately (0.15, 0.05)
    """
    return _as_interval(interval).midpoint_radius()


def _as_interval(value: Any) -> Interval:
    if isinstance(value, Interval):
        return value
    if hasattr(value, 'interval') and isinstance(value.interval, Interval):
        return value.interval
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Interval(*value)
    raise InvalidInterval(f"Cannot interpret {value!r} as an interval")


def normalize_domain(domain: Any, ctx: MPIntervalContext) -> list[Interval]:
    """
    Normalize a search domain to a list of seed intervals.

    Accepts an Interval, a (lo, hi) pair, a Root, or a sequence of Roots
    (whose intervals are refined as fresh seeds). Seeds are re-rounded
    outward to the precision of ctx.

    Raises:
        InvalidInterval: If the domain is malformed.
    """
    if isinstance(domain, Interval):
        return [_seed(domain, ctx)]

    if hasattr(domain, 'interval') and isinstance(domain.interval, Interval):
        return [_seed(domain.interval, ctx)]

    if isinstance(domain, (list, tuple)) and len(domain) == 2 and all(_is_number(b) for b in domain):
        return [Interval.from_bounds(domain[0], domain[1], ctx)]

    try:
        items = list(domain)
    except TypeError:
        raise InvalidInterval(f"Cannot interpret {domain!r} as a search domain")

    seeds = []
    for item in items:
        if isinstance(item, Interval):
            seeds.append(_seed(item, ctx))
        elif hasattr(item, 'interval') and isinstance(item.interval, Interval):
            seeds.append(_seed(item.interval, ctx))
        else:
            raise InvalidInterval(f"Cannot interpret {item!r} as a seed interval")
    return seeds


def _seed(interval: Interval, ctx: MPIntervalContext) -> Interval:
    if interval.is_empty():
        raise InvalidInterval("Cannot search an empty interval")
    if not interval.is_finite():
        raise InvalidInterval(f"Search interval must be finite, got {interval}")
    return Interval.from_iv(interval.to_iv(ctx))
