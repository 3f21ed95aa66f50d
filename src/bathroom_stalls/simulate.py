"""Explicit greedy simulation of customers choosing stalls.

Slow but obvious. Used to cross check the closed form and to draw split trees.
"""
from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import List

from .models import Query

MAX_SIMULATED_STALLS = 100_000


@dataclass(frozen=True)
class Selection:
    """The stall one customer picked and the group it came from."""

    customer: int
    stall: int
    group_start: int
    group_size: int
    left: int
    right: int

    @property
    def layer(self) -> int:
        return self.customer.bit_length()


def simulate(stalls: int, customers: int) -> List[Selection]:
    """Seat ``customers`` one at a time and return every selection.

    Free groups live in a heap keyed by ``(-size, start)``, so the largest group
    is split first and the leftmost wins a tie.
    """
    query = Query(stalls=stalls, customers=customers)
    if query.stalls > MAX_SIMULATED_STALLS:
        raise ValueError(
            f"simulation is limited to {MAX_SIMULATED_STALLS} stalls, got {query.stalls}"
        )

    heap = [(-query.stalls, 1)]
    selections: List[Selection] = []
    for customer in range(1, query.customers + 1):
        neg_size, start = heapq.heappop(heap)
        size = -neg_size
        left = (size - 1) // 2
        right = size // 2
        stall = start + left
        selections.append(
            Selection(
                customer=customer,
                stall=stall,
                group_start=start,
                group_size=size,
                left=left,
                right=right,
            )
        )
        if left:
            heapq.heappush(heap, (-left, start))
        if right:
            heapq.heappush(heap, (-right, stall + 1))
    return selections


def occupancy(stalls: int, customers: int) -> str:
    """Render the row after seating, ``X`` for taken and ``.`` for free."""
    selections = simulate(stalls, customers)
    row = ["."] * stalls
    for sel in selections:
        row[sel.stall - 1] = "X"
    return "".join(row)
