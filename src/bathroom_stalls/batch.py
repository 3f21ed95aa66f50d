"""Run case files through the solver and check them against expected output."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .case_loader import load_queries
from .case_writer import write_results
from .compare import OutputMismatch, compare_files
from .models import DatasetIOError, Query, Result
from .solver import StallSolver

logger = logging.getLogger(__name__)


@dataclass
class Dataset:
    """A case file, where to write its output, and optionally what to expect."""

    name: str
    input_path: Path
    output_path: Path
    expected_path: Optional[Path] = None

    @classmethod
    def from_paths(
        cls,
        input_path: Path | str,
        output_dir: Path | str,
        expected_path: Path | str | None = None,
    ) -> "Dataset":
        input_path = Path(input_path)
        return cls(
            name=input_path.stem,
            input_path=input_path,
            output_path=Path(output_dir) / f"{input_path.stem}.out",
            expected_path=Path(expected_path) if expected_path is not None else None,
        )


@dataclass
class DatasetReport:
    """Outcome of running one dataset."""

    name: str
    queries: List[Query] = field(default_factory=list)
    results: List[Result] = field(default_factory=list)
    mismatch: Optional[OutputMismatch] = None
    error: Optional[DatasetIOError] = None
    compared: bool = False

    @property
    def cases(self) -> int:
        return len(self.results)

    @property
    def identical(self) -> bool:
        return self.compared and self.mismatch is None and self.error is None

    @property
    def ok(self) -> bool:
        return self.error is None and self.mismatch is None


def run_dataset(dataset: Dataset, solver: StallSolver | None = None) -> DatasetReport:
    """Load, solve, write and compare a single dataset.

    ``MalformedInput`` and ``InvalidQuery`` propagate. File failures raise
    ``DatasetIOError``.
    """
    solver = solver or StallSolver()
    report = DatasetReport(name=dataset.name)
    report.queries = load_queries(dataset.input_path)
    report.results = solver.solve_all(report.queries)
    write_results(dataset.output_path, report.results)

    if dataset.expected_path is not None:
        report.mismatch = compare_files(dataset.output_path, dataset.expected_path)
        report.compared = True
        if report.mismatch is None:
            logger.info("%s: %d case(s), files are identical", dataset.name, report.cases)
        else:
            logger.warning("%s: %s", dataset.name, report.mismatch.describe())
    else:
        logger.info("%s: %d case(s) written to %s", dataset.name, report.cases, dataset.output_path)
    return report


def run_batch(datasets: Iterable[Dataset], solver: StallSolver | None = None) -> List[DatasetReport]:
    """Run every dataset in order.

    A file failure only fails its own dataset and is kept on the report. Bad
    input stops the whole batch.
    """
    solver = solver or StallSolver()
    reports: List[DatasetReport] = []
    for dataset in datasets:
        try:
            reports.append(run_dataset(dataset, solver))
        except DatasetIOError as exc:
            logger.warning("%s: %s", dataset.name, exc)
            reports.append(DatasetReport(name=dataset.name, error=exc))
    return reports
