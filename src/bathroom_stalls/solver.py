"""
Closed form stall solver.

Definitions:
    group: a run of consecutive free stalls. Before anyone arrives there is one
           group holding every stall.
    layer: the customers that together split every group left by the previous
           layer exactly once. Layer n holds 2^(n-1) customers, so layers
           1..n hold 2^n - 1 customers in total.

Splitting a group of size g leaves (g-1)//2 free stalls on the left and g//2 on
the right. Groups inside a layer therefore differ in size by at most one, and
every group of a layer is at least as large as any group of the next one. The
customers of the last layer take the large groups first and the small ones
after, so the group split by the last customer follows from counting, with no
need to place the earlier customers one by one.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from .models import LastLayer, Query, Result

logger = logging.getLogger(__name__)


# ----------------------------- layer arithmetic -----------------------------
def count_layers(customers: int) -> int:
    """Return the smallest layer count whose capacity covers ``customers``."""
    layers = 1
    capacity = 1
    while customers > capacity:
        layers += 1
        capacity = (capacity << 1) | 1
    return layers


def split_group(size: int) -> Tuple[int, int]:
    """Free stalls left and right of the stall chosen in a group of ``size``."""
    return (size - 1) // 2, size // 2


def count_large_groups(large_size: int, small_size: int, free_stalls: int, groups: int) -> int:
    """Solve ``free = large * n_large + small * (groups - n_large)`` for ``n_large``."""
    return (free_stalls - groups * small_size) // (large_size - small_size)


def describe_last_layer(query: Query) -> LastLayer:
    """Work out the groups present in the last layer and the one picked last."""
    layer = count_layers(query.customers)
    groups = 1 << (layer - 1)
    customers_before = groups - 1
    free_stalls = query.stalls - customers_before
    large_size = -(-free_stalls // groups)
    small_size = large_size - 1
    large_groups = count_large_groups(large_size, small_size, free_stalls, groups)
    customers_in_layer = query.customers - customers_before
    chosen_size = large_size if customers_in_layer <= large_groups else small_size
    return LastLayer(
        layer=layer,
        customers_before=customers_before,
        free_stalls=free_stalls,
        groups=groups,
        large_size=large_size,
        small_size=small_size,
        large_groups=large_groups,
        customers_in_layer=customers_in_layer,
        chosen_size=chosen_size,
    )


# ----------------------------- solver -----------------------------
class StallSolver:
    """Answers stall queries without simulating the customers."""

    def solve(self, query: Query) -> Result:
        last = describe_last_layer(query)
        logger.debug(
            "stalls=%d customers=%d layer=%d groups=%d large=%d x%d chosen=%d",
            query.stalls,
            query.customers,
            last.layer,
            last.groups,
            last.large_size,
            last.large_groups,
            last.chosen_size,
        )
        if last.large_size == 1:
            # every remaining group is a single stall
            return Result(max_adjacent=0, min_adjacent=0)
        left, right = split_group(last.chosen_size)
        return Result.from_sides(left, right)

    def solve_all(self, queries: Iterable[Query]) -> List[Result]:
        """Solve queries in order."""
        return [self.solve(q) for q in queries]


_DEFAULT_SOLVER = StallSolver()


def solve(stalls: int, customers: int) -> Result:
    """Return the result for ``customers`` entering a row of ``stalls``.

    Raises ``InvalidQuery`` when the pair is out of range.
    """
    return _DEFAULT_SOLVER.solve(Query(stalls=stalls, customers=customers))
