# IntervalRoots SDK
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
IntervalRoots - Certified Root Isolation with Interval Arithmetic.

Finds every real root of a differentiable function in a bounded interval
and classifies each enclosure: a UNIQUE root is mathematically proven to be
the only root in its interval, an UNKNOWN root could not be decided (for
instance a double root), and every discarded region is proven root-free.

Example:
    >>> import intervalroots as ir
    >>> result = ir.find_roots(lambda x: x**2 - 2, -5, 5)
    >>> for root in result:
    ...     print(root.interval, root.status.value)
    [-1.4142135623730951, -1.4142135623730949] unique
    [1.4142135623730949, 1.4142135623730951] unique

Key Features:
    - Interval Newton and Krawczyk operators
    - Automatic differentiation when no derivative is supplied
    - Arbitrary precision through mpmath interval contexts
    - Refinement of earlier results at higher precision
"""

__version__ = "0.1.0"

# Domain types
from .domain import (
    Interval,
    make_context,
    normalize_domain,
)

# Configuration
from .config import Config, Operator, SearchOrder

# Result types
from .result import (
    RootStatus,
    Root,
    RootsResult,
    CandidateFailure,
)

# Automatic differentiation
from .autodiff import Dual
from .derivative import AutoDerivative, SuppliedDerivative, derivative_provider
from . import functions

# Operators and search driver
from .contractors import (
    Contraction,
    NewtonOperator,
    KrawczykOperator,
    BisectionOperator,
)
from .search import RootSearch

# Postprocessing
from .postprocess import clean_roots, sort_roots

# Solver
from .solver import (
    roots,
    newton,
    krawczyk,
    bisection,
    refine,
    find_roots,
    find_roots_midpoint,
    midpoint_radius,
)

# Exceptions
from .exceptions import (
    IntervalRootsError,
    InvalidInterval,
    NonFiniteDerivative,
    OverlappingUniqueRoots,
    ConfigError,
)

__all__ = [
    "__version__",
    # Domain
    "Interval",
    "make_context",
    "normalize_domain",
    # Config
    "Config",
    "Operator",
    "SearchOrder",
    # Results
    "RootStatus",
    "Root",
    "RootsResult",
    "CandidateFailure",
    # Differentiation
    "Dual",
    "AutoDerivative",
    "SuppliedDerivative",
    "derivative_provider",
    "functions",
    # Operators and driver
    "Contraction",
    "NewtonOperator",
    "KrawczykOperator",
    "BisectionOperator",
    "RootSearch",
    # Postprocessing
    "clean_roots",
    "sort_roots",
    # Solver
    "roots",
    "newton",
    "krawczyk",
    "bisection",
    "refine",
    "find_roots",
    "find_roots_midpoint",
    "midpoint_radius",
    # Exceptions
    "IntervalRootsError",
    "InvalidInterval",
    "NonFiniteDerivative",
    "OverlappingUniqueRoots",
    "ConfigError",
]
