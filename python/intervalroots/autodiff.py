# IntervalRoots SDK - Automatic Differentiation
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Forward-mode automatic differentiation over intervals.

A Dual carries an interval value together with an interval enclosure of its
derivative. Evaluating a function on Dual.variable(X) yields F(X) and F'(X)
in one pass. Both parts live in the same mpmath interval context, so every
operation is rounded outward.

The algebra is closed: +, -, *, /, unary minus, powers, and the elementary
functions in intervalroots.functions. Comparisons are deliberately absent;
a function that branches on its argument cannot be differentiated this way.

Example:
    >>> ctx = make_context()
    >>> x = Dual.variable(ctx.mpf([1, 2]))
    >>> y = x**2 - 2
    >>> y.deriv  # contains [2, 4]
"""

from __future__ import annotations
from fractions import Fraction
from typing import Any, Optional
import numbers

import mpmath

from .domain import Interval, to_iv


def _integral(exponent: Any) -> Optional[int]:
    """The exponent as an int if it is a whole number, else None."""
    if isinstance(exponent, bool):
        return None
    if isinstance(exponent, numbers.Integral):
        return int(exponent)
    if isinstance(exponent, Fraction):
        return exponent.numerator if exponent.denominator == 1 else None
    if hasattr(exponent, '_mpf_'):
        return int(exponent) if mpmath.isint(exponent) else None
    if isinstance(exponent, numbers.Real):
        exponent = float(exponent)
        return int(exponent) if exponent.is_integer() else None
    return None


class Dual:
    """
    A (value, derivative) pair of mpmath intervals.

    Attributes:
        value: Interval enclosure of the function value
        deriv: Interval enclosure of the derivative
    """

    __slots__ = ('value', 'deriv')

    def __init__(self, value, deriv):
        self.value = value
        self.deriv = deriv

    @classmethod
    def variable(cls, x) -> 'Dual':
        """The independent variable over interval x (derivative 1)."""
        return cls(x, x.ctx.mpf(1))

    @classmethod
    def constant(cls, ctx, c: Any) -> 'Dual':
        """A constant (derivative 0) in context ctx."""
        return cls(to_iv(ctx, c), ctx.mpf(0))

    @property
    def ctx(self):
        return self.value.ctx

    def _lift(self, other: Any) -> 'Dual':
        if isinstance(other, Dual):
            return other
        return Dual.constant(self.ctx, other)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __pos__(self) -> 'Dual':
        return self

    def __neg__(self) -> 'Dual':
        return Dual(-self.value, -self.deriv)

    def __add__(self, other: Any) -> 'Dual':
        other = self._lift(other)
        return Dual(self.value + other.value, self.deriv + other.deriv)

    __radd__ = __add__

    def __sub__(self, other: Any) -> 'Dual':
        other = self._lift(other)
        return Dual(self.value - other.value, self.deriv - other.deriv)

    def __rsub__(self, other: Any) -> 'Dual':
        return self._lift(other) - self

    def __mul__(self, other: Any) -> 'Dual':
        other = self._lift(other)
        return Dual(
            self.value * other.value,
            self.deriv * other.value + self.value * other.deriv,
        )

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> 'Dual':
        other = self._lift(other)
        quotient = self.value / other.value
        # (u/v)' = (u' - (u/v) v') / v
        return Dual(quotient, (self.deriv - quotient * other.deriv) / other.value)

    def __rtruediv__(self, other: Any) -> 'Dual':
        return self._lift(other) / self

    def __pow__(self, exponent: Any) -> 'Dual':
        if isinstance(exponent, Dual):
            # x**g(x) = exp(g log x)
            from .functions import exp, log
            return exp(exponent * log(self))
        n = _integral(exponent)
        if n is not None:
            if n == 0:
                return Dual.constant(self.ctx, 1)
            if n == 1:
                return self
            return Dual(self.value ** n, n * self.value ** (n - 1) * self.deriv)
        # Real exponent: defined for non-negative bases only
        p = to_iv(self.ctx, exponent)
        return Dual(self.value ** p, p * self.value ** (p - 1) * self.deriv)

    def __rpow__(self, base: Any) -> 'Dual':
        ctx = self.ctx
        log_base = ctx.log(to_iv(ctx, base))
        value = ctx.exp(self.value * log_base)
        return Dual(value, value * log_base * self.deriv)

    def __abs__(self) -> 'Dual':
        value = abs(self.value)
        sign = Interval.from_iv(self.value)
        if sign.lo > 0:
            deriv = self.deriv
        elif sign.hi < 0:
            deriv = -self.deriv
        else:
            # Subgradients of |x| at 0 span [-1, 1]
            deriv = self.ctx.mpf([-1, 1]) * self.deriv
        return Dual(value, deriv)

    def __repr__(self) -> str:
        return f"Dual({self.value}, {self.deriv})"
