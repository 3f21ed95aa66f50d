import pathlib
import sys

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

import pytest

from bathroom_stalls import batch, compare
from bathroom_stalls.models import MalformedInput

DATA_DIR = pathlib.Path(__file__).parent / "data"


def test_full_flow(tmp_path):
    dataset = batch.Dataset.from_paths(
        DATA_DIR / "sample.in", tmp_path, DATA_DIR / "sample.out"
    )
    report = batch.run_dataset(dataset)

    assert report.name == "sample"
    assert report.cases == 10
    assert report.mismatch is None
    assert report.identical
    # byte for byte round trip
    assert dataset.output_path.read_bytes() == (DATA_DIR / "sample.out").read_bytes()


def test_flow_without_expected_output(tmp_path):
    dataset = batch.Dataset.from_paths(DATA_DIR / "small.in", tmp_path)
    report = batch.run_dataset(dataset)

    assert report.ok
    assert not report.compared
    assert not report.identical
    assert dataset.output_path == tmp_path / "small.out"
    assert dataset.output_path.read_text() == "Case #1: 1 1\nCase #2: 1 0\n"


def test_mismatch_is_reported(tmp_path):
    expected = tmp_path / "expected.txt"
    expected.write_bytes(b"Case #1: 1 1\nCase #2: 0 0\n")
    dataset = batch.Dataset.from_paths(DATA_DIR / "small.in", tmp_path / "out", expected)

    report = batch.run_dataset(dataset)

    assert not report.ok
    assert report.mismatch == compare.OutputMismatch(
        offset=22, line=2, produced=ord("1"), expected=ord("0")
    )


def test_batch_continues_after_io_failure(tmp_path):
    datasets = [
        batch.Dataset.from_paths(tmp_path / "missing.in", tmp_path),
        batch.Dataset.from_paths(DATA_DIR / "small.in", tmp_path, DATA_DIR / "small.out"),
    ]
    reports = batch.run_batch(datasets)

    assert [r.name for r in reports] == ["missing", "small"]
    assert reports[0].error is not None
    assert reports[0].error.path == tmp_path / "missing.in"
    assert not reports[0].ok
    assert reports[1].identical


def test_batch_stops_on_malformed_input(tmp_path):
    bad = tmp_path / "bad.in"
    bad.write_text("2\n4 2\n")
    datasets = [
        batch.Dataset.from_paths(bad, tmp_path),
        batch.Dataset.from_paths(DATA_DIR / "small.in", tmp_path),
    ]
    with pytest.raises(MalformedInput):
        batch.run_batch(datasets)
    assert not (tmp_path / "small.out").exists()


class TestCompare:
    """Test cases for the output comparator."""

    def test_identical(self):
        assert compare.compare_bytes(b"Case #1: 1 0\n", b"Case #1: 1 0\n") is None

    def test_first_difference(self):
        mismatch = compare.compare_bytes(b"Case #1: 1 0\n", b"Case #1: 2 0\n")
        assert mismatch.offset == 9
        assert mismatch.line == 1
        assert mismatch.produced == ord("1")
        assert mismatch.expected == ord("2")
        assert "byte 9" in mismatch.describe()

    def test_shorter_output(self):
        mismatch = compare.compare_bytes(b"Case #1: 1 0\n", b"Case #1: 1 0\nCase #2: 0 0\n")
        assert mismatch.offset == 13
        assert mismatch.line == 2
        assert mismatch.produced is None
        assert "EOF" in mismatch.describe()

    def test_compare_files(self, tmp_path):
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_bytes(b"x\n")
        b.write_bytes(b"x\n")
        assert compare.compare_files(a, b) is None


def test_batch_records_missing_expected_output(tmp_path):
    missing_expected = tmp_path / "missing.out"
    datasets = [
        batch.Dataset.from_paths(DATA_DIR / "small.in", tmp_path / "out", missing_expected),
        batch.Dataset.from_paths(DATA_DIR / "sample.in", tmp_path / "out", DATA_DIR / "sample.out"),
    ]
    reports = batch.run_batch(datasets)

    assert reports[0].error is not None
    assert reports[0].error.path == missing_expected
    assert not reports[0].ok
    # produced output was still written before the comparison failed
    assert (tmp_path / "out" / "small.out").exists()
    assert reports[1].identical
