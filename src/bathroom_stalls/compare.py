"""Byte for byte comparison of produced and expected output."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import DatasetIOError


@dataclass(frozen=True)
class OutputMismatch:
    """First difference between two outputs.

    ``produced`` and ``expected`` hold the differing byte values, or ``None``
    where that side ended first.
    """

    offset: int
    line: int
    produced: Optional[int]
    expected: Optional[int]

    def describe(self) -> str:
        """One line summary of the mismatch."""
        return (
            f"outputs differ at byte {self.offset} (line {self.line}): "
            f"produced {_show(self.produced)}, expected {_show(self.expected)}"
        )


def _show(value: Optional[int]) -> str:
    if value is None:
        return "EOF"
    return repr(chr(value))


def compare_bytes(produced: bytes, expected: bytes) -> Optional[OutputMismatch]:
    """Return the first mismatch, or ``None`` when identical."""
    if produced == expected:
        return None
    offset = 0
    shortest = min(len(produced), len(expected))
    while offset < shortest and produced[offset] == expected[offset]:
        offset += 1
    line = produced.count(b"\n", 0, offset) + 1
    return OutputMismatch(
        offset=offset,
        line=line,
        produced=produced[offset] if offset < len(produced) else None,
        expected=expected[offset] if offset < len(expected) else None,
    )


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise DatasetIOError(path, exc) from exc


def compare_files(produced: Path | str, expected: Path | str) -> Optional[OutputMismatch]:
    """Compare two files byte for byte."""
    return compare_bytes(_read(Path(produced)), _read(Path(expected)))
