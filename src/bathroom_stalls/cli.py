"""Command line interface for bathroom_stalls."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from .batch import Dataset, DatasetReport, run_batch
from .case_writer import format_case, results_frame
from .models import InvalidQuery, MalformedInput
from .solver import StallSolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bathroom-stalls",
        description="Free stalls around the last customer, for each case in a case file",
    )
    parser.add_argument("--input", type=Path, help="Path to a case file.")
    parser.add_argument("--output", type=Path,
                        help="Where to write results for --input (default: <output-dir>/<input stem>.out).")
    parser.add_argument("--expected", type=Path,
                        help="Known correct output to compare --input's results against.")
    parser.add_argument("--dataset", nargs=2, action="append", default=[],
                        metavar=("INPUT", "EXPECTED"),
                        help="Case file and its expected output. May be repeated.")
    parser.add_argument("--output-dir", type=Path, default=Path("."),
                        help="Directory for produced output files.")
    parser.add_argument("--show-queries", action="store_true",
                        help="Print stalls and customers next to each result.")
    parser.add_argument("--out-report", type=Path,
                        help="Write a per-case CSV report.")
    parser.add_argument("--log-level", default=os.environ.get("BATHROOM_STALLS_LOG_LEVEL", "WARNING"),
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default from BATHROOM_STALLS_LOG_LEVEL).")
    return parser


def _datasets(parser: argparse.ArgumentParser, args: argparse.Namespace) -> List[Dataset]:
    datasets: List[Dataset] = []
    if args.input is not None:
        dataset = Dataset.from_paths(args.input, args.output_dir, args.expected)
        if args.output is not None:
            dataset.output_path = args.output
        datasets.append(dataset)
    for input_path, expected_path in args.dataset:
        datasets.append(Dataset.from_paths(input_path, args.output_dir, expected_path))

    # one output file per dataset
    seen = {}
    for dataset in datasets:
        key = dataset.output_path.resolve()
        if key in seen:
            parser.error(
                f"{dataset.input_path} and {seen[key]} would both write {dataset.output_path}"
            )
        seen[key] = dataset.input_path
    return datasets


def _print_report(report: DatasetReport, show_queries: bool) -> None:
    if report.error is not None:
        print(f"[{report.name}] error: {report.error}")
        return
    for i, (query, result) in enumerate(zip(report.queries, report.results), start=1):
        if show_queries:
            print(f"Case #{i}: {query.stalls},\t{query.customers},\t"
                  f"{result.max_adjacent},\t{result.min_adjacent}")
        else:
            print(format_case(i, result))
    if report.mismatch is not None:
        print(f"[{report.name}] Files are not identical: {report.mismatch.describe()}")
    elif report.identical:
        print(f"[{report.name}] Files are identical")


def _write_report(path: Path, reports: Sequence[DatasetReport]) -> None:
    frames = []
    for report in reports:
        if report.error is not None:
            continue
        frame = results_frame(report.queries, report.results)
        frame.insert(0, "dataset", report.name)
        frames.append(frame)
    if not frames:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.concat(frames, ignore_index=True).to_csv(path, index=False)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m bathroom_stalls.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.input is None and not args.dataset:
        parser.error("one of --input or --dataset is required")
    if args.input is None and (args.output is not None or args.expected is not None):
        parser.error("--output and --expected only apply to --input")

    datasets = _datasets(parser, args)
    logger.info("Running %d dataset(s)", len(datasets))
    try:
        reports = run_batch(datasets, StallSolver())
    except (MalformedInput, InvalidQuery) as exc:
        print(f"Input validation error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    for report in reports:
        _print_report(report, args.show_queries)

    if args.out_report:
        _write_report(args.out_report, reports)

    return EXIT_OK if all(r.ok for r in reports) else EXIT_MISMATCH


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
