# IntervalRoots SDK - Derivative Providers
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Derivative providers.

A provider turns a target function into the pair (F(X), F'(X)) for an
mpmath interval X. AutoDerivative differentiates f with dual numbers;
SuppliedDerivative trusts a caller-provided interval derivative. Providers
hold no mutable state and may be shared between worker threads.
"""

from __future__ import annotations
from typing import Any, Callable, Optional

from .autodiff import Dual
from .domain import to_iv


TargetFunction = Callable[[Any], Any]


class DerivativeProvider:
    """
    Evaluates a target function and an enclosure of its derivative.

    Subclasses implement evaluate(); value() defaults to a plain interval
    evaluation of f.
    """

    def __init__(self, f: TargetFunction):
        self.f = f

    def value(self, x):
        """Interval extension F(x)."""
        return _as_interval(x.ctx, self.f(x))

    def evaluate(self, x) -> tuple[Any, Any]:
        """Return (F(x), F'(x)) as mpmath intervals."""
        raise NotImplementedError


class AutoDerivative(DerivativeProvider):
    """Derivative by forward-mode automatic differentiation."""

    def evaluate(self, x) -> tuple[Any, Any]:
        result = self.f(Dual.variable(x))
        if isinstance(result, Dual):
            return result.value, result.deriv
        # f ignores its argument
        return _as_interval(x.ctx, result), x.ctx.mpf(0)


class SuppliedDerivative(DerivativeProvider):
    """
    Derivative supplied by the caller.

    The derivative must return an enclosure of f' over its interval
    argument; its soundness is the caller's responsibility.
    """

    def __init__(self, f: TargetFunction, derivative: TargetFunction):
        super().__init__(f)
        self.derivative = derivative

    def evaluate(self, x) -> tuple[Any, Any]:
        ctx = x.ctx
        return _as_interval(ctx, self.f(x)), _as_interval(ctx, self.derivative(x))


def derivative_provider(
    f: TargetFunction,
    derivative: Optional[TargetFunction] = None,
) -> DerivativeProvider:
    """Pick the provider for f: the supplied derivative if any, else AD."""
    if derivative is None:
        return AutoDerivative(f)
    return SuppliedDerivative(f, derivative)


def _as_interval(ctx, value: Any):
    if isinstance(value, Dual):
        return value.value
    return to_iv(ctx, value)
