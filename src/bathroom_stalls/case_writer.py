"""Result formatting and writing."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd

from .models import DatasetIOError, Query, Result


def format_case(index: int, result: Result) -> str:
    """Format the 1-based ``index``-th result as ``Case #i: max min``."""
    return f"Case #{index}: {result.max_adjacent} {result.min_adjacent}"


def format_results(results: Iterable[Result]) -> str:
    """Render every result, one newline terminated line per case."""
    return "".join(f"{format_case(i, r)}\n" for i, r in enumerate(results, start=1))


def write_results(path: Path | str, results: Iterable[Result]) -> Path:
    """Write results to ``path``, creating parent directories as needed."""
    path = Path(path)
    text = format_results(results)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps "\n" on every platform so fixtures compare byte for byte
        with path.open("w", encoding="ascii", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise DatasetIOError(path, exc) from exc
    return path


def results_frame(queries: Sequence[Query], results: Sequence[Result]) -> pd.DataFrame:
    """Tabulate queries next to their results."""
    if len(queries) != len(results):
        raise ValueError(f"{len(queries)} queries but {len(results)} results")
    rows: List[dict] = []
    for i, (q, r) in enumerate(zip(queries, results), start=1):
        rows.append(
            {
                "case": i,
                "stalls": q.stalls,
                "customers": q.customers,
                "max_adjacent": r.max_adjacent,
                "min_adjacent": r.min_adjacent,
            }
        )
    return pd.DataFrame(
        rows, columns=["case", "stalls", "customers", "max_adjacent", "min_adjacent"]
    )
