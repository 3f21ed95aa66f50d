"""bathroom_stalls package."""
from .models import (
    DatasetIOError,
    InvalidQuery,
    LastLayer,
    MalformedInput,
    Query,
    Result,
)
from .case_loader import load_queries, parse_queries_text
from .case_writer import format_results, write_results
from .compare import OutputMismatch, compare_files
from .solver import StallSolver, describe_last_layer, solve
from .batch import Dataset, DatasetReport, run_batch, run_dataset

__all__ = [
    "Query",
    "Result",
    "LastLayer",
    "MalformedInput",
    "InvalidQuery",
    "DatasetIOError",
    "load_queries",
    "parse_queries_text",
    "format_results",
    "write_results",
    "OutputMismatch",
    "compare_files",
    "StallSolver",
    "describe_last_layer",
    "solve",
    "Dataset",
    "DatasetReport",
    "run_batch",
    "run_dataset",
]
