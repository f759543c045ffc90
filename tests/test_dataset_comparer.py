"""Unit tests for DatasetComparer."""

import threading
import time

import pytest

from hashsnap.comparison import DatasetComparer
from hashsnap.exceptions import ComparisonTimeoutError
from hashsnap.models import HASH_MISMATCH_TAG, Dataset

from conftest import make_dataset, make_record


@pytest.fixture
def comparer() -> DatasetComparer:
    return DatasetComparer(timeout=30)


def paths(records) -> set:
    return {r.path for r in records}


class TestHashMismatch:
    """Same filename, different content."""

    def test_changed_file_reported_from_b(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/report.pdf", "AAA")])
        b = make_dataset("after", [("/b/report.pdf", "BBB")])

        result = comparer.compare(a, b)

        assert len(result.mismatches) == 1
        record = result.mismatches[0]
        assert record.path == "/b/report.pdf"
        assert record.digest == "BBB"
        assert record.diff_tag == HASH_MISMATCH_TAG
        assert result.missing_from_a == []
        assert result.missing_from_b == []

    def test_identical_file_not_reported(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/x/report.pdf", "AAA")])
        b = make_dataset("after", [("/b/y/report.pdf", "AAA")])

        assert comparer.compare(a, b).total == 0

    def test_duplicate_names_any_match(self, comparer: DatasetComparer) -> None:
        """A same-named record anywhere in A with an equal digest is a match."""
        a = make_dataset(
            "before", [("/a/one/readme.md", "111"), ("/a/two/readme.md", "222")]
        )
        b = make_dataset(
            "after", [("/b/three/readme.md", "222"), ("/b/four/readme.md", "333")]
        )

        result = comparer.compare(a, b)

        assert paths(result.mismatches) == {"/b/four/readme.md"}

    def test_matching_is_case_sensitive(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/Photo.JPG", "AAA")])
        b = make_dataset("after", [("/b/photo.jpg", "AAA")])

        result = comparer.compare(a, b)

        assert result.mismatches == []
        assert paths(result.missing_from_a) == {"/b/photo.jpg"}
        assert paths(result.missing_from_b) == {"/a/Photo.JPG"}

    def test_failure_sentinel_compares_like_a_digest(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/locked.db", "Read access denied.")])
        b = make_dataset("after", [("/b/locked.db", "ABCDEF")])

        result = comparer.compare(a, b)

        assert paths(result.mismatches) == {"/b/locked.db"}


class TestMissing:
    """Filenames present on only one side."""

    def test_added_file_is_missing_from_a(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/keep.txt", "K")])
        b = make_dataset("after", [("/b/keep.txt", "K"), ("/b/new.txt", "N")])

        result = comparer.compare(a, b)

        assert len(result.missing_from_a) == 1
        assert result.missing_from_a[0].path == "/b/new.txt"
        assert result.missing_from_a[0].diff_tag == "missing-from-before"
        assert result.missing_from_b == []

    def test_removed_file_is_missing_from_b(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("/a/keep.txt", "K"), ("/a/old.txt", "O")])
        b = make_dataset("after", [("/b/keep.txt", "K")])

        result = comparer.compare(a, b)

        assert len(result.missing_from_b) == 1
        assert result.missing_from_b[0].path == "/a/old.txt"
        assert result.missing_from_b[0].diff_tag == "missing-from-after"
        assert result.missing_from_a == []

    def test_windows_paths_match_posix_paths(self, comparer: DatasetComparer) -> None:
        a = make_dataset("before", [("C:\\Users\\me\\notes.txt", "N")])
        b = make_dataset("after", [("/home/me/notes.txt", "N")])

        assert comparer.compare(a, b).total == 0


class TestComparisonProperties:
    """Properties that hold for any pair of datasets."""

    @pytest.fixture
    def mixed(self):
        a = make_dataset(
            "A",
            [
                ("/a/same.txt", "S"),
                ("/a/changed.txt", "C1"),
                ("/a/gone.txt", "G"),
                ("/a/dup/one.txt", "D1"),
                ("/a/dup2/one.txt", "D2"),
            ],
        )
        b = make_dataset(
            "B",
            [
                ("/b/same.txt", "S"),
                ("/b/changed.txt", "C2"),
                ("/b/fresh.txt", "F"),
                ("/b/dup/one.txt", "D2"),
            ],
        )
        return a, b

    def test_expected_differences(self, comparer: DatasetComparer, mixed) -> None:
        a, b = mixed
        result = comparer.compare(a, b)

        assert paths(result.mismatches) == {"/b/changed.txt"}
        assert paths(result.missing_from_a) == {"/b/fresh.txt"}
        assert paths(result.missing_from_b) == {"/a/gone.txt"}

    def test_each_record_has_exactly_one_tag(self, comparer: DatasetComparer, mixed) -> None:
        a, b = mixed
        differences = comparer.compare(a, b).differences

        assert all(r.diff_tag for r in differences)
        keys = [(r.path, r.digest) for r in differences]
        assert len(keys) == len(set(keys))

    def test_self_comparison_is_empty(self, comparer: DatasetComparer, mixed) -> None:
        a, _ = mixed
        same = Dataset(label="A-again", records=list(a.records))

        assert comparer.compare(a, same).total == 0

    def test_comparison_is_repeatable(self, comparer: DatasetComparer, mixed) -> None:
        a, b = mixed
        first = comparer.compare(a, b)
        second = comparer.compare(a, b)

        assert sorted(first.differences, key=lambda r: r.path) == sorted(
            second.differences, key=lambda r: r.path
        )

    def test_swapping_sides_swaps_missing_lists(self, comparer: DatasetComparer, mixed) -> None:
        a, b = mixed
        forward = comparer.compare(a, b)
        backward = comparer.compare(b, a)

        assert paths(forward.missing_from_a) == paths(backward.missing_from_b)
        assert paths(forward.missing_from_b) == paths(backward.missing_from_a)

    def test_inputs_are_not_modified(self, comparer: DatasetComparer, mixed) -> None:
        a, b = mixed
        before_a = list(a.records)
        before_b = list(b.records)

        comparer.compare(a, b)

        assert a.records == before_a
        assert b.records == before_b
        assert all(r.diff_tag == "" for r in a.records + b.records)

    def test_empty_datasets(self, comparer: DatasetComparer) -> None:
        empty = Dataset(label="empty", records=[])
        full = make_dataset("full", [("/x/a.txt", "A")])

        assert comparer.compare(empty, empty).total == 0
        result = comparer.compare(empty, full)
        assert paths(result.missing_from_a) == {"/x/a.txt"}
        assert result.missing_from_a[0].diff_tag == "missing-from-empty"

    def test_large_datasets(self, comparer: DatasetComparer) -> None:
        a = Dataset("A", [make_record(f"/a/{i}.bin", str(i)) for i in range(5000)])
        b = Dataset("B", [make_record(f"/b/{i}.bin", str(i)) for i in range(1, 5001)])

        result = comparer.compare(a, b)

        assert paths(result.missing_from_b) == {"/a/0.bin"}
        assert paths(result.missing_from_a) == {"/b/5000.bin"}
        assert result.mismatches == []


class TestComparerLimits:
    """Timeouts and errors inside a pass."""

    def test_timeout_raises_and_returns_nothing(self) -> None:
        comparer = DatasetComparer(timeout=0.05)
        stopped = threading.Event()

        def stall(records, index, cancel):
            cancel.wait(5)
            stopped.set()
            return []

        comparer._find_hash_mismatches = stall  # type: ignore[assignment]
        a = make_dataset("A", [("/a/x.txt", "1")])
        b = make_dataset("B", [("/b/x.txt", "2")])

        start = time.monotonic()
        with pytest.raises(ComparisonTimeoutError, match="timed out"):
            comparer.compare(a, b)

        assert time.monotonic() - start < 2
        # The stalled pass is told to stop
        assert stopped.wait(2)

    def test_pass_error_propagates(self) -> None:
        comparer = DatasetComparer(timeout=5)

        def explode(records, index, tag, cancel):
            raise RuntimeError("pass failed")

        comparer._find_missing = explode  # type: ignore[assignment]

        with pytest.raises(RuntimeError, match="pass failed"):
            comparer.compare(
                make_dataset("A", [("/a/x", "1")]), make_dataset("B", [("/b/x", "1")])
            )

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_invalid_timeout(self, timeout: float) -> None:
        with pytest.raises(ValueError, match="timeout"):
            DatasetComparer(timeout=timeout)
