# IntervalRoots SDK - Root Search Driver
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Worklist-driven root search.

The driver repeatedly pulls a candidate interval from its worklist, applies
a contraction operator and acts on the classification:

1. EMPTY: the candidate is recorded as discarded (proven root-free)
2. UNIQUE: the enclosure is polished while the operator keeps contracting,
   then emitted as a UNIQUE root
3. UNKNOWN after an extended-division split: both pieces go back on the
   worklist with the parent's iteration count
4. UNKNOWN otherwise: the refined interval is pushed back (if it halved)
   or bisected, until the width tolerance or iteration budget is reached,
   at which point it is emitted as an UNKNOWN root

Whatever an operator shaves off a candidate is recorded as discarded, so
the discarded intervals and the emitted roots always cover the seeds.

Key Features:
- Newton, Krawczyk and bisection operators
- Depth-first or breadth-first worklists
- Parallel draining with a thread pool
- Per-candidate failure isolation
- Progress callbacks for long-running searches
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
import concurrent.futures
import logging
import threading
import time

from .config import Config, SearchOrder
from .contractors import Contraction, make_contractor
from .derivative import derivative_provider
from .domain import Interval, bisect, make_context, normalize_domain
from .postprocess import clean_roots
from .result import CandidateFailure, Root, RootsResult, RootStatus

logger = logging.getLogger(__name__)


@dataclass
class Candidate:
    """
    A worklist entry.

    Attributes:
        interval: Interval still to be classified
        iterations: Operator applications spent along this lineage
    """
    interval: Interval
    iterations: int = 0


@dataclass
class SearchState:
    """
    Mutable state of a single search call.

    Created when a search starts and dropped when it returns. All mutation
    goes through the methods below, which hold the lock so that worker
    threads can share the state.
    """
    order: SearchOrder = SearchOrder.DEPTH_FIRST
    worklist: deque = field(default_factory=deque)
    roots: list[Root] = field(default_factory=list)
    discarded: list[Interval] = field(default_factory=list)
    failures: list[CandidateFailure] = field(default_factory=list)
    processed: int = 0
    iterations: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def push(self, candidates: list[Candidate]) -> None:
        with self._lock:
            if self.order is SearchOrder.DEPTH_FIRST:
                # Leftmost candidate is popped first
                self.worklist.extend(reversed(candidates))
            else:
                self.worklist.extend(candidates)

    def pop(self) -> Optional[Candidate]:
        with self._lock:
            if not self.worklist:
                return None
            if self.order is SearchOrder.DEPTH_FIRST:
                return self.worklist.pop()
            return self.worklist.popleft()

    def pending(self) -> int:
        with self._lock:
            return len(self.worklist)

    def emit(self, interval: Interval, status: RootStatus) -> None:
        with self._lock:
            self.roots.append(Root(interval, status))

    def discard(self, interval: Interval) -> None:
        with self._lock:
            self.discarded.append(interval)

    def discard_complement(self, X: Interval, pieces: tuple[Interval, ...]) -> None:
        """Record X minus the (sorted, disjoint) pieces as root-free."""
        gaps = []
        cursor = X.lo
        for piece in pieces:
            if piece.lo > cursor:
                gaps.append(Interval(cursor, piece.lo))
            cursor = max(cursor, piece.hi)
        if X.hi > cursor:
            gaps.append(Interval(cursor, X.hi))
        if gaps:
            with self._lock:
                self.discarded.extend(gaps)

    def fail(self, interval: Interval, error: Exception) -> None:
        with self._lock:
            self.failures.append(CandidateFailure(interval, error))
            self.roots.append(Root(interval, RootStatus.UNKNOWN))

    def count(self, processed: int = 0, iterations: int = 0) -> None:
        with self._lock:
            self.processed += processed
            self.iterations += iterations


class RootSearch:
    """
    Root search over one or more seed intervals.

    Holds the immutable parts of a search (target function, derivative
    provider, contractor, interval context). Each call to run() creates
    its own SearchState, so one RootSearch may be reused.

    Example:
        >>> search = RootSearch(lambda x: x**2 - 2, config=Config())
        >>> result = search.run((-5, 5))
        >>> [r.status for r in result]
        [<RootStatus.UNIQUE: 'unique'>, <RootStatus.UNIQUE: 'unique'>]
    """

    def __init__(
        self,
        f: Callable[[Any], Any],
        derivative: Optional[Callable[[Any], Any]] = None,
        config: Config = Config(),
    ):
        """
        Initialize the search.

        Args:
            f: Target function. Must accept mpmath intervals and Dual
               numbers; use intervalroots.functions for elementary functions.
            derivative: Optional interval extension of f'. When None the
               derivative is computed by automatic differentiation.
            config: Search configuration.
        """
        self.f = f
        self.config = config
        self.ctx = make_context(config.precision)
        self.provider = derivative_provider(f, derivative)
        self.contractor = make_contractor(config.operator, self.provider, self.ctx)
        self._last_progress_time = 0.0

    def run(self, domain: Any) -> RootsResult:
        """
        Search a domain for roots.

        Args:
            domain: Interval, (lo, hi) pair, Root, or sequence of Roots.

        Returns:
            RootsResult with merged roots sorted by lower bound.

        Raises:
            InvalidInterval: If the domain is malformed.
        """
        seeds = normalize_domain(domain, self.ctx)

        start_time = time.time()
        self._last_progress_time = 0.0
        state = SearchState(order=self.config.search_order)
        state.push([Candidate(seed, 0) for seed in seeds])

        if self.config.parallel:
            self._run_parallel(state)
        else:
            self._run_sequential(state)

        # Fragments of one cluster closer than the width tolerance merge
        merge_gap = max(self.config.tolerance, self.config.merge_tolerance)
        roots, overlaps = clean_roots(state.roots, merge_gap)
        failures = list(state.failures)
        for overlap in overlaps:
            logger.warning("%s; keeping both roots", overlap)
            failures.append(CandidateFailure(
                overlap.first.interval.hull(overlap.second.interval), overlap
            ))

        total_time = (time.time() - start_time) * 1000
        result = RootsResult(
            roots=roots,
            discarded=state.discarded,
            failures=failures,
            seeds=seeds,
            iterations=state.iterations,
            precision=self.config.precision,
            total_time_ms=total_time,
        )
        logger.info(
            "%s search: %d unique, %d unknown, %d candidates, %d iterations in %.1fms",
            self.config.operator.value, len(result.unique_roots), len(result.unknown_roots),
            state.processed, state.iterations, total_time,
        )
        return result

    def _run_sequential(self, state: SearchState) -> None:
        """Sequential worklist loop."""
        while True:
            candidate = state.pop()
            if candidate is None:
                break
            state.push(self._process(state, candidate))
            self._report_progress(state)

    def _run_parallel(self, state: SearchState) -> None:
        """Worklist loop fanned out to a thread pool."""
        max_workers = self.config.max_workers
        if max_workers is None:
            max_workers = 8
        futures: dict[concurrent.futures.Future, Candidate] = {}

        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            while True:
                # Submit new work
                while len(futures) < max_workers:
                    candidate = state.pop()
                    if candidate is None:
                        break
                    futures[executor.submit(self._process, state, candidate)] = candidate

                if not futures:
                    break

                done, _ = concurrent.futures.wait(
                    futures.keys(),
                    return_when=concurrent.futures.FIRST_COMPLETED,
                )
                for future in done:
                    futures.pop(future)
                    state.push(future.result())
                self._report_progress(state)

    def _process(self, state: SearchState, candidate: Candidate) -> list[Candidate]:
        """Classify one candidate; return the candidates to push back."""
        X, k = candidate.interval, candidate.iterations
        state.count(processed=1, iterations=1)
        try:
            outcome = self.contractor.contract(X)
        except (ArithmeticError, ValueError) as e:
            logger.warning("Candidate %s degraded to unknown: %s: %s", X, type(e).__name__, e)
            state.fail(X, e)
            return []

        if outcome.status is RootStatus.EMPTY:
            logger.debug("%s: empty", X)
            state.discard(X)
            return []

        state.discard_complement(X, outcome.pieces)

        if outcome.status is RootStatus.UNIQUE:
            Y = self._polish(state, X, outcome.pieces[0], k + 1)
            logger.debug("%s: unique root in %s", X, Y)
            state.emit(Y, RootStatus.UNIQUE)
            return []

        if outcome.split:
            logger.debug("%s: split into %s", X, outcome.pieces)
            children = []
            for piece in outcome.pieces:
                if piece.width() > self.config.tolerance:
                    children.append(Candidate(piece, k))
                else:
                    self._settle(state, piece)
            return children

        return self._refine_unknown(state, X, outcome, k + 1)

    def _settle(self, state: SearchState, piece: Interval) -> None:
        """Emit a split piece below the width tolerance unless it is root-free."""
        try:
            excluded = self.contractor.excludes(piece)
        except (ArithmeticError, ValueError) as e:
            logger.warning("Candidate %s degraded to unknown: %s: %s", piece, type(e).__name__, e)
            state.fail(piece, e)
            return
        if excluded:
            state.discard(piece)
        else:
            state.emit(piece, RootStatus.UNKNOWN)

    def _refine_unknown(
        self,
        state: SearchState,
        X: Interval,
        outcome: Contraction,
        k: int,
    ) -> list[Candidate]:
        Y = outcome.pieces[0]
        if Y.width() <= self.config.tolerance or k >= self.config.max_iterations:
            logger.debug("%s: unknown, budget reached at %s", X, Y)
            state.emit(Y, RootStatus.UNKNOWN)
            return []
        if Y.width() <= X.width() / 2:
            return [Candidate(Y, k)]
        halves = bisect(Y, self.ctx, self.config.bisection_ratio)
        if halves is None:
            # No representable point strictly inside: precision limit
            logger.debug("%s: unknown at precision limit", Y)
            state.emit(Y, RootStatus.UNKNOWN)
            return []
        return [Candidate(half, k) for half in halves]

    def _polish(self, state: SearchState, X: Interval, Y: Interval, k: int) -> Interval:
        """
        Narrow a certified enclosure while the operator keeps certifying it.

        X is the candidate the operator certified and Y its contraction.
        The returned enclosure is one the operator certifies again when
        applied to it, so refining an emitted root at the same precision
        keeps it UNIQUE. When Y itself fails that test, X is returned.
        """
        certified = X
        while True:
            state.count(iterations=1)
            try:
                outcome = self.contractor.contract(Y)
            except (ArithmeticError, ValueError):
                break
            if outcome.status is not RootStatus.UNIQUE:
                break
            certified = Y
            Z = outcome.pieces[0]
            if Z == Y or k >= self.config.max_iterations or Y.width() <= self.config.tolerance:
                break
            state.discard_complement(Y, outcome.pieces)
            Y = Z
            k += 1
        return certified

    def _report_progress(self, state: SearchState) -> None:
        """Report progress if callback is set and enough time has passed."""
        callback = self.config.progress_callback
        if callback is None:
            return

        current_time = time.time() * 1000
        if current_time - self._last_progress_time < self.config.progress_interval_ms:
            return
        self._last_progress_time = current_time

        try:
            callback(state.processed, state.pending(), len(state.roots))
        except Exception as e:
            logger.warning("Progress callback raised %s: %s", type(e).__name__, e)
