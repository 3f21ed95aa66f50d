"""Case file loading utilities.

A case file starts with the number of cases, followed by one ``stalls customers``
line per case::

    3
    4 2
    5 2
    1000 1
"""
from __future__ import annotations

import csv
import io
import logging
import re
from pathlib import Path
from typing import IO, Any, Iterable, List, Optional, Tuple

import pandas as pd

from .models import DatasetIOError, MalformedInput, Query

logger = logging.getLogger(__name__)

_INT_TOKEN = re.compile(r"[0-9]+")
_PARSER_LINE = re.compile(r"line (\d+)")


def _parse_int(token: str, what: str, line_no: int) -> int:
    if not _INT_TOKEN.fullmatch(token):
        raise MalformedInput(f"{what} is not a non-negative integer: {token!r}", line_no)
    return int(token)


def parse_count(line: str, line_no: int = 1) -> int:
    """Parse the case count line."""
    tokens = line.split()
    if len(tokens) != 1:
        raise MalformedInput(f"expected a single case count, got {line.strip()!r}", line_no)
    return _parse_int(tokens[0], "case count", line_no)


def parse_case_line(line: str, line_no: int) -> Query:
    """Parse ``stalls customers`` into a :class:`Query`.

    Raises ``MalformedInput`` for anything but two integers and ``InvalidQuery``
    when the integers are out of range.
    """
    tokens = line.split()
    if len(tokens) != 2:
        raise MalformedInput(
            f"expected 'stalls customers', got {len(tokens)} field(s): {line.strip()!r}",
            line_no,
        )
    stalls = _parse_int(tokens[0], "stalls", line_no)
    customers = _parse_int(tokens[1], "customers", line_no)
    return Query(stalls=stalls, customers=customers)


def _frame_line(frame_row: int, case_lines: List[Tuple[int, str]]) -> Optional[int]:
    if 0 <= frame_row < len(case_lines):
        return case_lines[frame_row][0]
    return None


def _is_missing(cell: object) -> bool:
    return not isinstance(cell, str) or not cell


def _read_case_frame(case_lines: List[Tuple[int, str]]) -> pd.DataFrame:
    """Tokenize case lines into a string frame, one row per case."""
    text = "\n".join(line.strip() for _, line in case_lines)
    try:
        return pd.read_csv(
            io.StringIO(text),
            sep=r"\s+",
            header=None,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
            skip_blank_lines=True,
        )
    except pd.errors.ParserError as exc:
        # pandas reports ragged rows as "Expected 2 fields in line 3, saw 3"
        match = _PARSER_LINE.search(str(exc))
        line_no = _frame_line(int(match.group(1)) - 1, case_lines) if match else None
        raise MalformedInput("case lines must hold exactly 'stalls customers'", line_no) from exc


def parse_queries(lines: Iterable[str]) -> List[Query]:
    """Parse a whole case document given as lines.

    Blank lines are ignored. The declared count must match the case lines.
    """
    numbered: List[Tuple[int, str]] = [
        (no, line) for no, line in enumerate(lines, start=1) if line.strip()
    ]
    if not numbered:
        raise MalformedInput("missing case count line", 1)

    count_no, count_line = numbered[0]
    count = parse_count(count_line, count_no)
    case_lines = numbered[1:]
    if len(case_lines) != count:
        raise MalformedInput(
            f"declared {count} case(s) but found {len(case_lines)}", count_no
        )
    if not case_lines:
        return []

    df = _read_case_frame(case_lines)
    queries: List[Query] = []
    for i, row in enumerate(df.itertuples(index=False)):
        line_no = case_lines[i][0]
        cells = list(row)
        if len(cells) < 2 or _is_missing(cells[1]):
            raise MalformedInput(
                f"expected 'stalls customers', got {case_lines[i][1].strip()!r}", line_no
            )
        if any(not _is_missing(extra) for extra in cells[2:]):
            raise MalformedInput(
                f"expected 'stalls customers', got extra fields: {case_lines[i][1].strip()!r}",
                line_no,
            )
        queries.append(
            Query(
                stalls=_parse_int(cells[0], "stalls", line_no),
                customers=_parse_int(cells[1], "customers", line_no),
            )
        )
    return queries


def parse_queries_text(text: str) -> List[Query]:
    """Parse a case document held in memory."""
    return parse_queries(text.splitlines())


def load_queries(path: Path | str | IO[Any]) -> List[Query]:
    """Load queries from a case file path or an open text handle."""
    if hasattr(path, "read"):
        return parse_queries(path)

    path = Path(path)
    try:
        with path.open("r", encoding="ascii") as f:
            lines = f.readlines()
    except OSError as exc:
        raise DatasetIOError(path, exc) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"{path} is not an ASCII case file: {exc.reason}") from exc

    queries = parse_queries(lines)
    logger.debug("Loaded %d case(s) from %s", len(queries), path)
    return queries
