"""
Tests for the closed form stall solver.

Small rows are checked exhaustively against the explicit greedy simulation.
"""
import pathlib
import sys

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

import pytest

from bathroom_stalls.models import InvalidQuery, Query, Result
from bathroom_stalls.simulate import simulate
from bathroom_stalls.solver import (
    StallSolver,
    count_large_groups,
    count_layers,
    describe_last_layer,
    solve,
    split_group,
)


class TestLayerArithmetic:
    """Test cases for the layer helpers."""

    @pytest.mark.parametrize(
        "customers, layers",
        [(1, 1), (2, 2), (3, 2), (4, 3), (7, 3), (8, 4), (1023, 10), (1024, 11)],
    )
    def test_count_layers(self, customers, layers):
        assert count_layers(customers) == layers

    def test_count_layers_matches_bit_length(self):
        for customers in range(1, 5000):
            assert count_layers(customers) == customers.bit_length()

    def test_split_group(self):
        assert split_group(1) == (0, 0)
        assert split_group(2) == (0, 1)
        assert split_group(5) == (2, 2)
        assert split_group(1000) == (499, 500)

    def test_count_large_groups(self):
        # 17 stalls over 4 groups: one of 5 and three of 4
        assert count_large_groups(5, 4, 17, 4) == 1
        # evenly divisible: every group is large
        assert count_large_groups(4, 3, 16, 4) == 4

    def test_describe_last_layer(self):
        last = describe_last_layer(Query(stalls=20, customers=6))
        assert last.layer == 3
        assert last.customers_before == 3
        assert last.free_stalls == 17
        assert last.groups == 4
        assert last.large_size == 5
        assert last.small_size == 4
        assert last.large_groups == 1
        assert last.small_groups == 3
        assert last.customers_in_layer == 3
        assert last.chosen_size == 4


class TestSolve:
    """Test cases for solve and StallSolver."""

    @pytest.mark.parametrize(
        "stalls, customers, expected",
        [
            (4, 2, (1, 0)),
            (5, 1, (2, 2)),
            (5, 2, (1, 0)),
            (6, 2, (1, 1)),
            (20, 6, (2, 1)),
            (1000, 1000, (0, 0)),
            (1000, 1, (500, 499)),
            (1_000_000_000, 1, (500_000_000, 499_999_999)),
            (1_000_000_000, 500_000_000, (1, 0)),
        ],
    )
    def test_known_cases(self, stalls, customers, expected):
        result = solve(stalls, customers)
        assert (result.max_adjacent, result.min_adjacent) == expected

    def test_single_customer_splits_whole_row(self):
        for stalls in range(1, 200):
            result = solve(stalls, 1)
            assert result == Result.from_sides((stalls - 1) // 2, stalls // 2)

    def test_full_row_leaves_no_neighbours(self):
        for stalls in range(1, 300):
            assert solve(stalls, stalls) == Result(0, 0)

    def test_matches_simulation(self):
        for stalls in range(1, 70):
            selections = simulate(stalls, stalls)
            for sel in selections:
                expected = Result.from_sides(sel.left, sel.right)
                assert solve(stalls, sel.customer) == expected, (stalls, sel.customer)

    def test_result_invariants_and_monotonic_max(self):
        for stalls in (1, 2, 17, 64, 100, 257):
            previous_max = None
            for customers in range(1, stalls + 1):
                r = solve(stalls, customers)
                assert 0 <= r.min_adjacent <= r.max_adjacent
                assert r.max_adjacent - r.min_adjacent in (0, 1)
                if previous_max is not None:
                    assert r.max_adjacent <= previous_max
                previous_max = r.max_adjacent

    def test_huge_inputs_do_not_overflow(self):
        stalls = 10**30
        result = solve(stalls, 3 * 10**29)
        assert 0 <= result.min_adjacent <= result.max_adjacent

    def test_idempotent(self):
        assert solve(123456789, 98765) == solve(123456789, 98765)

    def test_solve_all_keeps_order(self):
        solver = StallSolver()
        queries = [Query(1000, 1), Query(4, 2), Query(6, 2)]
        assert solver.solve_all(queries) == [Result(500, 499), Result(1, 0), Result(1, 1)]

    @pytest.mark.parametrize("stalls, customers", [(0, 0), (5, 0), (3, 4), (0, 1)])
    def test_rejects_invalid_queries(self, stalls, customers):
        with pytest.raises(InvalidQuery):
            solve(stalls, customers)
