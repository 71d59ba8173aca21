# IntervalRoots SDK - Search Driver Tests
# Copyright (c) 2024 IntervalRoots Contributors. All rights reserved.

"""
Tests for the worklist-driven root search and its configuration.

Test Categories:
1. Config validation and presets
2. SearchState worklist discipline
3. Candidate outcomes (empty, unique, unknown, failures)
4. Coverage of the seed intervals
5. Search order and parallel draining
6. Progress reporting and logging
"""

import logging
import pytest
from fractions import Fraction

import mpmath

from intervalroots.config import Config, ConfigError, Operator, SearchOrder
from intervalroots.domain import Interval
from intervalroots.exceptions import InvalidInterval, NonFiniteDerivative
from intervalroots.result import Root, RootStatus
from intervalroots.search import Candidate, RootSearch, SearchState


SQRT2 = mpmath.sqrt(2)


def square_minus_two(x):
    return x**2 - 2


def assert_covers(result, seed: Interval):
    """Discarded intervals and emitted roots together cover the seed."""
    pieces = sorted(
        list(result.discarded) + [r.interval for r in result.roots],
        key=lambda X: (X.lo, X.hi),
    )
    assert pieces[0].lo <= seed.lo
    reach = pieces[0].hi
    for piece in pieces[1:]:
        assert piece.lo <= reach, f"gap between {reach} and {piece.lo}"
        reach = max(reach, piece.hi)
    assert reach >= seed.hi


# =============================================================================
# 1. Config Validation and Presets
# =============================================================================

class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        config = Config()
        assert config.tolerance == 1e-10
        assert config.max_iterations == 50
        assert config.operator is Operator.NEWTON
        assert config.precision == 53
        assert config.search_order is SearchOrder.DEPTH_FIRST
        assert config.bisection_ratio == Fraction(127, 256)
        assert config.merge_tolerance == 0.0
        assert not config.parallel

    def test_quick(self):
        config = Config.quick()
        assert config.tolerance == 1e-6
        assert config.max_iterations == 30

    def test_thorough(self):
        config = Config.thorough()
        assert config.tolerance < Config().tolerance
        assert config.max_iterations > Config().max_iterations

    def test_high_precision(self):
        config = Config.high_precision(200)
        assert config.precision == 200
        assert config.tolerance == 2.0 ** -160
        assert Config.high_precision(200, tolerance=1e-50).tolerance == 1e-50

    def test_with_progress(self):
        callback = lambda done, pending, found: None
        config = Config.with_progress(callback, tolerance=1e-6)
        assert config.progress_callback is callback
        assert config.tolerance == 1e-6

    @pytest.mark.parametrize("kwargs", [
        {'tolerance': -1.0},
        {'tolerance': float('nan')},
        {'max_iterations': 0},
        {'precision': 1},
        {'bisection_ratio': Fraction(0)},
        {'bisection_ratio': Fraction(1)},
        {'merge_tolerance': -0.5},
        {'max_workers': 0},
        {'operator': 'newton'},
        {'search_order': 'dfs'},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigError):
            Config(**kwargs)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            Config(max_iterations=-3)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Config().tolerance = 1.0


# =============================================================================
# 2. SearchState Worklist Discipline
# =============================================================================

class TestSearchState:
    """Tests for the worklist of a single search."""

    def candidates(self):
        return [Candidate(Interval(0, 1)), Candidate(Interval(1, 2)), Candidate(Interval(2, 3))]

    def test_depth_first_pops_leftmost_first(self):
        state = SearchState(order=SearchOrder.DEPTH_FIRST)
        state.push(self.candidates())
        assert state.pop().interval == Interval(0, 1)
        state.push([Candidate(Interval(0.5, 0.75))])
        assert state.pop().interval == Interval(0.5, 0.75)
        assert state.pop().interval == Interval(1, 2)

    def test_breadth_first_is_fifo(self):
        state = SearchState(order=SearchOrder.BREADTH_FIRST)
        state.push(self.candidates())
        state.push([Candidate(Interval(0.5, 0.75))])
        popped = [state.pop().interval for _ in range(4)]
        assert popped == [Interval(0, 1), Interval(1, 2), Interval(2, 3), Interval(0.5, 0.75)]

    def test_pop_empty(self):
        assert SearchState().pop() is None
        assert SearchState().pending() == 0

    def test_discard_complement(self):
        state = SearchState()
        state.discard_complement(Interval(0, 10), (Interval(1, 2), Interval(5, 10)))
        assert state.discarded == [Interval(0, 1), Interval(2, 5)]

    def test_discard_complement_of_full_piece(self):
        state = SearchState()
        state.discard_complement(Interval(0, 1), (Interval(0, 1),))
        assert state.discarded == []

    def test_fail_emits_unknown(self):
        state = SearchState()
        state.fail(Interval(0, 1), ZeroDivisionError("boom"))
        assert state.roots == [Root(Interval(0, 1), RootStatus.UNKNOWN)]
        assert state.failures[0].kind == "ZeroDivisionError"


# =============================================================================
# 3. Candidate Outcomes
# =============================================================================

class TestCandidateOutcomes:
    """Tests for how the driver acts on each classification."""

    def test_two_unique_roots(self):
        result = RootSearch(square_minus_two).run((-5, 5))
        assert result.statuses() == [RootStatus.UNIQUE, RootStatus.UNIQUE]
        assert -SQRT2 in result[0].interval
        assert SQRT2 in result[1].interval
        assert all(r.interval.width() <= 1e-10 for r in result)

    def test_root_free_domain(self):
        result = RootSearch(square_minus_two).run((2, 3))
        assert len(result) == 0
        assert result.discarded == [Interval(2, 3)]

    def test_iteration_budget_leaves_unknown(self):
        result = RootSearch(square_minus_two, config=Config(max_iterations=1)).run((-5, 5))
        assert len(result) == 2
        assert not any(r.is_unique for r in result)
        assert -SQRT2 in result[0].interval
        assert SQRT2 in result[1].interval

    def test_failure_degrades_candidate(self):
        def broken(x):
            raise ZeroDivisionError("division by zero in target")

        result = RootSearch(broken).run((1, 2))
        assert result.roots == [Root(Interval(1, 2), RootStatus.UNKNOWN)]
        assert [f.kind for f in result.failures] == ["ZeroDivisionError"]

    def test_non_finite_derivative_is_reported(self):
        search = RootSearch(
            square_minus_two,
            derivative=lambda x: x.ctx.mpf([-mpmath.inf, mpmath.inf]),
        )
        result = search.run((1, 2))
        assert result.roots == [Root(Interval(1, 2), RootStatus.UNKNOWN)]
        assert isinstance(result.failures[0].error, NonFiniteDerivative)

    def test_programming_errors_propagate(self):
        def broken(x):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            RootSearch(broken).run((1, 2))

    def test_invalid_domain(self):
        with pytest.raises(InvalidInterval):
            RootSearch(square_minus_two).run((5, -5))

    def test_overlapping_seeds_report_overlapping_uniques(self, caplog):
        seeds = [
            Root(Interval(1, 2), RootStatus.UNIQUE),
            Root(Interval(1.25, 1.5), RootStatus.UNIQUE),
        ]
        with caplog.at_level(logging.WARNING, logger="intervalroots.search"):
            result = RootSearch(square_minus_two).run(seeds)
        assert len(result.unique_roots) == 2
        assert [f.kind for f in result.failures] == ["OverlappingUniqueRoots"]
        assert "overlap" in caplog.text

    @pytest.mark.parametrize("operator", [Operator.NEWTON, Operator.KRAWCZYK])
    def test_unique_roots_certify_again(self, operator):
        search = RootSearch(square_minus_two, config=Config(operator=operator))
        result = search.run((-5, 5))
        assert len(result.unique_roots) == 2
        for root in result:
            assert search.contractor.contract(root.interval).status is RootStatus.UNIQUE

    def test_double_root_fragments_merge(self):
        f = lambda x: (x - 1)**2 * (x - 2)
        result = RootSearch(f, config=Config(tolerance=1e-6)).run((-5, 5))
        assert result.statuses() == [RootStatus.UNKNOWN, RootStatus.UNIQUE]
        assert 1 in result[0].interval
        assert_covers(result, Interval(-5, 5))

    def test_search_is_reusable(self):
        search = RootSearch(square_minus_two)
        first = search.run((0, 5))
        second = search.run((0, 5))
        assert first.roots == second.roots

    def test_iterations_are_counted(self):
        result = RootSearch(square_minus_two).run((-5, 5))
        assert result.iterations > 0
        assert result.precision == 53


# =============================================================================
# 4. Coverage of the Seed Intervals
# =============================================================================

class TestCoverage:
    """Every point of a seed is discarded or lies in an emitted root."""

    @pytest.mark.parametrize("operator", list(Operator))
    def test_square_minus_two(self, operator):
        config = Config(operator=operator, tolerance=1e-6)
        result = RootSearch(square_minus_two, config=config).run((-5, 5))
        assert_covers(result, Interval(-5, 5))

    def test_double_root(self):
        f = lambda x: (x - 1)**2 * (x - 2)
        result = RootSearch(f).run((-3, 4))
        assert_covers(result, Interval(-3, 4))

    def test_failure_still_covers(self):
        def broken(x):
            raise ValueError("outside domain")

        result = RootSearch(broken).run((0, 1))
        assert_covers(result, Interval(0, 1))


# =============================================================================
# 5. Search Order and Parallel Draining
# =============================================================================

class TestSearchOrder:
    """The worklist discipline never changes the roots found."""

    @pytest.fixture
    def cubic(self):
        # Roots -5/3, 1/3, 4/3 are never hit exactly by a split point
        return lambda x: (3 * x + 5) * (3 * x - 1) * (3 * x - 4)

    def test_breadth_first_matches_depth_first(self, cubic):
        dfs = RootSearch(cubic).run((-5, 5))
        bfs = RootSearch(cubic, config=Config(search_order=SearchOrder.BREADTH_FIRST)).run((-5, 5))
        assert dfs.roots == bfs.roots

    def test_parallel_matches_sequential(self, cubic):
        sequential = RootSearch(cubic).run((-5, 5))
        parallel = RootSearch(cubic, config=Config(parallel=True, max_workers=4)).run((-5, 5))
        assert parallel.roots == sequential.roots
        assert parallel.all_unique
        assert len(parallel) == 3

    def test_parallel_default_workers(self, cubic):
        result = RootSearch(cubic, config=Config(parallel=True)).run((-5, 5))
        assert len(result.unique_roots) == 3

    def test_parallel_failures(self):
        def broken(x):
            raise ZeroDivisionError("boom")

        result = RootSearch(broken, config=Config(parallel=True)).run((0, 1))
        assert [f.kind for f in result.failures] == ["ZeroDivisionError"]


# =============================================================================
# 6. Progress Reporting and Logging
# =============================================================================

class TestProgressAndLogging:
    """Tests for progress callbacks and log output."""

    def test_progress_callback_called(self):
        calls = []
        config = Config.with_progress(
            lambda done, pending, found: calls.append((done, pending, found)),
            progress_interval_ms=0,
        )
        RootSearch(square_minus_two, config=config).run((-5, 5))
        assert calls
        done, pending, found = calls[-1]
        assert done > 0
        assert pending == 0
        assert found == 2

    def test_failing_callback_does_not_stop_search(self, caplog):
        def callback(done, pending, found):
            raise RuntimeError("display closed")

        config = Config.with_progress(callback, progress_interval_ms=0)
        with caplog.at_level(logging.WARNING, logger="intervalroots.search"):
            result = RootSearch(square_minus_two, config=config).run((-5, 5))
        assert len(result.unique_roots) == 2
        assert "display closed" in caplog.text

    def test_failures_are_logged(self, caplog):
        def broken(x):
            raise ZeroDivisionError("boom")

        with caplog.at_level(logging.WARNING, logger="intervalroots.search"):
            RootSearch(broken).run((0, 1))
        assert "ZeroDivisionError" in caplog.text

    def test_summary_logged_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="intervalroots.search"):
            RootSearch(square_minus_two).run((-5, 5))
        assert "2 unique" in caplog.text
