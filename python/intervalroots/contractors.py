# IntervalRoots SDK - Contraction Operators
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Interval contraction operators.

An operator takes a candidate interval X and returns a Contraction: a
classification (EMPTY, UNIQUE, UNKNOWN) together with zero, one or two
narrower intervals that still contain every root of f in X.

Operators:
- NewtonOperator: N(X) = m - F(m) / F'(X). When F'(X) contains zero,
  extended division splits the candidate into up to two pieces.
- KrawczykOperator: K(X) = m - Y F(m) + (1 - Y F'(X)) (X - m) with a point
  preconditioner Y ~ 1 / f'(m). Needs no split when F'(X) contains zero.
- BisectionOperator: range exclusion only; never certifies a root.

Every operator first applies the range exclusion test: 0 not in F(X)
proves that X holds no root.
"""

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

import mpmath
from mpmath.ctx_iv import MPIntervalContext

from .config import Operator
from .derivative import DerivativeProvider
from .domain import Interval, split_point
from .exceptions import NonFiniteDerivative
from .result import RootStatus


@dataclass(frozen=True)
class Contraction:
    """
    Outcome of one operator application.

    Attributes:
        status: Classification of the candidate
        pieces: Zero (EMPTY), one, or two sub-intervals holding all roots
        split: True when the pieces come from extended division
    """
    status: RootStatus
    pieces: tuple[Interval, ...] = ()
    split: bool = False


EMPTY = Contraction(RootStatus.EMPTY)


class Contractor:
    """Base class for the contraction operators."""

    operator: Operator

    def __init__(self, provider: DerivativeProvider, ctx: MPIntervalContext):
        self.provider = provider
        self.ctx = ctx

    def contract(self, X: Interval) -> Contraction:
        raise NotImplementedError

    def excludes(self, X: Interval) -> bool:
        """Range exclusion alone: True if X provably holds no root."""
        return self._exclude(X, self.provider.value(X.to_iv(self.ctx)))

    def _midpoint(self, X: Interval) -> Any:
        """Midpoint of X as a point interval of the context."""
        return self.ctx.mpf(split_point(X, self.ctx, Fraction(1, 2)))

    def _derivative(self, X: Interval, dx) -> Interval:
        D = Interval.from_iv(dx)
        if D.is_entire():
            raise NonFiniteDerivative(f"Derivative enclosure over {X} is unbounded: {D}", X)
        return D

    def _exclude(self, X: Interval, fx) -> bool:
        """Range exclusion test: True if 0 is not in F(X)."""
        return 0 not in Interval.from_iv(fx)


class NewtonOperator(Contractor):
    """
    Interval Newton operator.

    With m the midpoint of X and D = F'(X):
    - 0 not in D: N = m - F(m) / D. N and X disjoint proves no root;
      N inside X proves exactly one root, enclosed by N & X.
    - 0 in D: extended division gives N as a union of up to two
      half-unbounded intervals; each is intersected with X.
    """

    operator = Operator.NEWTON

    def contract(self, X: Interval) -> Contraction:
        ctx = self.ctx
        x = X.to_iv(ctx)
        fx, dx = self.provider.evaluate(x)
        if self._exclude(X, fx):
            return EMPTY
        D = self._derivative(X, dx)
        if not D.is_finite():
            # One-sided unbounded slopes: no contraction, let the driver subdivide
            return Contraction(RootStatus.UNKNOWN, (X,))

        m = self._midpoint(X)
        fm = self.provider.value(m)
        y = Interval.from_iv(fm)

        if 0 not in D:
            N = Interval.from_iv(m - fm / dx)
            return self._classify(X, N)
        return self._extended(X, m, y, D)

    def _classify(self, X: Interval, N: Interval) -> Contraction:
        Y = N & X
        if Y.is_empty():
            return EMPTY
        if N.issubset(X):
            return Contraction(RootStatus.UNIQUE, (Y,))
        return Contraction(RootStatus.UNKNOWN, (Y,))

    def _extended(self, X: Interval, m, y: Interval, D: Interval) -> Contraction:
        """
        Newton step for 0 in F'(X).

        For y = F(m) > 0, y / D = (-inf, y.lo / D.lo] | [y.lo / D.hi, +inf),
        so N = m - y / D = (-inf, m - y.lo / D.hi] | [m - y.lo / D.lo, +inf).
        The y < 0 case mirrors it with y.hi.
        """
        ctx = self.ctx
        if 0 in y:
            # m may be a root; the quotient is the whole line
            return Contraction(RootStatus.UNKNOWN, (X,))
        a, b = D.lo, D.hi
        if a == 0 and b == 0:
            # f is constant on X and nonzero at m
            return EMPTY

        if y.lo > 0:
            p = ctx.mpf(y.lo)
            left_divisor, right_divisor = b, a
        else:
            p = ctx.mpf(y.hi)
            left_divisor, right_divisor = a, b

        pieces = []
        if left_divisor != 0:
            hi = Interval.from_iv(m - p / ctx.mpf(left_divisor)).hi
            left = Interval(-mpmath.inf, hi) & X
            if not left.is_empty():
                pieces.append(left)
        if right_divisor != 0:
            lo = Interval.from_iv(m - p / ctx.mpf(right_divisor)).lo
            right = Interval(lo, mpmath.inf) & X
            if not right.is_empty():
                pieces.append(right)

        if not pieces:
            return EMPTY
        return Contraction(RootStatus.UNKNOWN, tuple(pieces), split=len(pieces) == 2)


class KrawczykOperator(Contractor):
    """
    Krawczyk operator.

    K = m - Y F(m) + (1 - Y F'(X)) (X - m). K and X disjoint proves no root;
    K in the interior of X proves exactly one root, enclosed by K & X.
    """

    operator = Operator.KRAWCZYK

    def contract(self, X: Interval) -> Contraction:
        ctx = self.ctx
        x = X.to_iv(ctx)
        fx, dx = self.provider.evaluate(x)
        if self._exclude(X, fx):
            return EMPTY
        D = self._derivative(X, dx)

        m = self._midpoint(X)
        fm, dm = self.provider.evaluate(m)
        Y = self._preconditioner(dm, D)
        K = Interval.from_iv(m - Y * fm + (1 - Y * dx) * (x - m))

        Z = K & X
        if Z.is_empty():
            return EMPTY
        if K.isinterior(X):
            return Contraction(RootStatus.UNIQUE, (Z,))
        return Contraction(RootStatus.UNKNOWN, (Z,))

    def _preconditioner(self, dm, D: Interval):
        """Point approximation of 1 / f'(m); 0 when no usable slope exists."""
        ctx = self.ctx
        slope = Interval.from_iv(dm).midpoint()
        if not mpmath.isfinite(slope) or slope == 0:
            slope = D.midpoint()
        if not mpmath.isfinite(slope) or slope == 0:
            # Y = 0 makes K = X: no information, the driver subdivides
            return ctx.mpf(0)
        return ctx.mpf(Interval.from_iv(ctx.mpf(1) / ctx.mpf(slope)).lo)


class BisectionOperator(Contractor):
    """Range exclusion without contraction."""

    operator = Operator.BISECTION

    def contract(self, X: Interval) -> Contraction:
        if self.excludes(X):
            return EMPTY
        return Contraction(RootStatus.UNKNOWN, (X,))


_CONTRACTORS = {
    Operator.NEWTON: NewtonOperator,
    Operator.KRAWCZYK: KrawczykOperator,
    Operator.BISECTION: BisectionOperator,
}


def make_contractor(
    operator: Operator,
    provider: DerivativeProvider,
    ctx: MPIntervalContext,
) -> Contractor:
    """Instantiate the contractor for an Operator."""
    return _CONTRACTORS[operator](provider, ctx)
