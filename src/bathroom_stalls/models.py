"""Data models and errors for bathroom_stalls."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class MalformedInput(ValueError):
    """A case file line could not be parsed."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class InvalidQuery(ValueError):
    """Stalls and customers do not describe a solvable query."""


class DatasetIOError(OSError):
    """Opening, reading or writing a dataset file failed."""

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause.strerror or cause}")


def _check_int(name: str, value: object) -> int:
    # bool is an int subclass but never a sensible count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuery(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class Query:
    """One test case: a row of ``stalls`` and the number of ``customers``."""

    stalls: int
    customers: int

    def __post_init__(self) -> None:
        stalls = _check_int("stalls", self.stalls)
        customers = _check_int("customers", self.customers)
        if stalls < 1:
            raise InvalidQuery(f"stalls must be at least 1, got {stalls}")
        if customers < 1:
            raise InvalidQuery(f"customers must be at least 1, got {customers}")
        if customers > stalls:
            raise InvalidQuery(
                f"customers ({customers}) cannot exceed stalls ({stalls})"
            )


@dataclass(frozen=True)
class Result:
    """Free stalls on either side of the last customer's stall."""

    max_adjacent: int
    min_adjacent: int

    def __post_init__(self) -> None:
        if not 0 <= self.min_adjacent <= self.max_adjacent:
            raise ValueError(
                f"invalid result: min {self.min_adjacent} max {self.max_adjacent}"
            )

    @classmethod
    def from_sides(cls, left: int, right: int) -> "Result":
        """Order the two side counts into a result."""
        return cls(max_adjacent=max(left, right), min_adjacent=min(left, right))


@dataclass(frozen=True)
class LastLayer:
    """Breakdown of the last layer that a query's customers reach.

    ``chosen_size`` is the size of the group the last customer splits.
    """

    layer: int
    customers_before: int
    free_stalls: int
    groups: int
    large_size: int
    small_size: int
    large_groups: int
    customers_in_layer: int
    chosen_size: int

    @property
    def small_groups(self) -> int:
        return self.groups - self.large_groups
