# IntervalRoots SDK - Elementary Functions
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Elementary functions usable inside target functions.

Each function accepts a Dual (automatic differentiation), an mpmath
interval (plain interval extension) or an ordinary number (point
evaluation with mpmath), so one definition of f serves every purpose:

    >>> from intervalroots import functions as fn
    >>> f = lambda x: fn.sin(x) - x / 2

The set is closed on purpose; every function here has a derivative rule.
"""

from __future__ import annotations
from typing import Any

import mpmath

from .autodiff import Dual

__all__ = ["sqrt", "exp", "log", "sin", "cos", "tan", "atan", "abs"]


def _is_interval(x: Any) -> bool:
    return hasattr(x, '_mpi_')


def sqrt(x: Any) -> Any:
    if isinstance(x, Dual):
        root = x.ctx.sqrt(x.value)
        return Dual(root, x.deriv / (2 * root))
    if _is_interval(x):
        return x.ctx.sqrt(x)
    return mpmath.sqrt(x)


def exp(x: Any) -> Any:
    if isinstance(x, Dual):
        value = x.ctx.exp(x.value)
        return Dual(value, value * x.deriv)
    if _is_interval(x):
        return x.ctx.exp(x)
    return mpmath.exp(x)


def log(x: Any) -> Any:
    if isinstance(x, Dual):
        return Dual(x.ctx.log(x.value), x.deriv / x.value)
    if _is_interval(x):
        return x.ctx.log(x)
    return mpmath.log(x)


def sin(x: Any) -> Any:
    if isinstance(x, Dual):
        ctx = x.ctx
        return Dual(ctx.sin(x.value), ctx.cos(x.value) * x.deriv)
    if _is_interval(x):
        return x.ctx.sin(x)
    return mpmath.sin(x)


def cos(x: Any) -> Any:
    if isinstance(x, Dual):
        ctx = x.ctx
        return Dual(ctx.cos(x.value), -ctx.sin(x.value) * x.deriv)
    if _is_interval(x):
        return x.ctx.cos(x)
    return mpmath.cos(x)


def tan(x: Any) -> Any:
    if isinstance(x, Dual):
        ctx = x.ctx
        value = ctx.sin(x.value) / ctx.cos(x.value)
        return Dual(value, (1 + value ** 2) * x.deriv)
    if _is_interval(x):
        return x.ctx.sin(x) / x.ctx.cos(x)
    return mpmath.tan(x)


def atan(x: Any) -> Any:
    if isinstance(x, Dual):
        ctx = x.ctx
        return Dual(ctx.atan(x.value), x.deriv / (1 + x.value ** 2))
    if _is_interval(x):
        return x.ctx.atan(x)
    return mpmath.atan(x)


def abs(x: Any) -> Any:
    if isinstance(x, Dual) or _is_interval(x):
        return x.__abs__()
    return mpmath.fabs(x)
