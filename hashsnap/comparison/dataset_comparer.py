"""Dataset comparison implementation for hashsnap.

This module provides the DatasetComparer class, which finds the records that
differ between two datasets taken from different roots. Records are matched
by filename (basename) rather than full path, then by digest.

Three independent passes produce the differences:
    1. Hash mismatch: a record in B whose filename exists in A, but no record
       in A has both that filename and the same digest.
    2. Missing from A: a record in B whose filename does not occur in A.
    3. Missing from B: a record in A whose filename does not occur in B.

Same-named records in different subfolders are interchangeable: a record in B
matches if *any* same-named record in A has an equal digest.

Example:
    >>> comparer = DatasetComparer(timeout=60)
    >>> result = comparer.compare(before, after)
    >>> for record in result.differences:
    ...     print(record.diff_tag, record.path)
"""

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Callable, FrozenSet, Iterable, List, NamedTuple, Tuple

from hashsnap import config
from hashsnap.exceptions import ComparisonTimeoutError
from hashsnap.models import (
    HASH_MISMATCH_TAG,
    ComparisonResult,
    Dataset,
    FileRecord,
    missing_tag,
)

logger = logging.getLogger(__name__)

# Records scanned between checks of the cancel flag
_CANCEL_CHECK_INTERVAL = 1024


class _Cancelled(Exception):
    """Raised inside a pass when the comparison has been abandoned."""


class _DatasetIndex(NamedTuple):
    """Lookup sets for one side of a comparison."""
    names: FrozenSet[str]
    name_digests: FrozenSet[Tuple[str, str]]


class DatasetComparer:
    """Computes hash mismatches and missing files between two datasets.

    The passes are read-only over both datasets and run concurrently. Output
    records are tagged copies; the input datasets are never modified.

    The whole computation is bounded by `timeout` seconds. On expiry the
    passes are told to stop, nothing computed so far is returned, and
    ComparisonTimeoutError is raised.

    Attributes:
        timeout: Upper bound in seconds for one comparison.
    """

    def __init__(self, timeout: float = config.COMPARE_TIMEOUT_SECONDS) -> None:
        """Initialize the DatasetComparer.

        Args:
            timeout: Seconds allowed for one comparison. Must be positive.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout

    def compare(self, a: Dataset, b: Dataset) -> ComparisonResult:
        """Compare dataset A (earlier) against dataset B (later).

        Args:
            a: First dataset; its label names records missing from A.
            b: Second dataset; its label names records missing from B.

        Returns:
            ComparisonResult whose lists hold tagged copies of the differing
            records. Each record carries exactly one diff tag.

        Raises:
            ComparisonTimeoutError: If the comparison exceeds `timeout`.
        """
        deadline = time.monotonic() + self.timeout
        cancel = threading.Event()
        executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="compare")

        try:
            index_future = executor.submit(self._build_indexes, a, b, cancel)
            index_a, index_b = self._await(
                [index_future], deadline, cancel
            )[0]

            futures = [
                executor.submit(self._find_hash_mismatches, b.records, index_a, cancel),
                executor.submit(
                    self._find_missing, b.records, index_a, missing_tag(a.label), cancel
                ),
                executor.submit(
                    self._find_missing, a.records, index_b, missing_tag(b.label), cancel
                ),
            ]
            mismatches, missing_from_a, missing_from_b = self._await(
                futures, deadline, cancel
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            "Compared %s (%d) with %s (%d): %d mismatched, %d missing from %s, "
            "%d missing from %s",
            a.label, len(a), b.label, len(b), len(mismatches),
            len(missing_from_a), a.label, len(missing_from_b), b.label,
        )
        return ComparisonResult(
            mismatches=mismatches,
            missing_from_a=missing_from_a,
            missing_from_b=missing_from_b,
        )

    def _await(self, futures: List, deadline: float, cancel: threading.Event) -> List:
        """Wait for all futures until the deadline and return their results."""
        remaining = max(0.0, deadline - time.monotonic())
        done, not_done = wait(futures, timeout=remaining, return_when=FIRST_EXCEPTION)

        failed = [f for f in done if f.exception() is not None]
        if failed:
            cancel.set()
            raise failed[0].exception()

        if not_done:
            cancel.set()
            for future in not_done:
                future.cancel()
            logger.error("Comparison abandoned after %g seconds", self.timeout)
            raise ComparisonTimeoutError(self.timeout)

        return [f.result() for f in futures]

    def _build_indexes(
        self, a: Dataset, b: Dataset, cancel: threading.Event
    ) -> Tuple[_DatasetIndex, _DatasetIndex]:
        return self._index(a.records, cancel), self._index(b.records, cancel)

    def _index(
        self, records: List[FileRecord], cancel: threading.Event
    ) -> _DatasetIndex:
        names = set()
        name_digests = set()
        for record in self._checked(records, cancel):
            names.add(record.filename)
            name_digests.add((record.filename, record.digest))
        return _DatasetIndex(frozenset(names), frozenset(name_digests))

    def _find_hash_mismatches(
        self,
        records: List[FileRecord],
        other: _DatasetIndex,
        cancel: threading.Event,
    ) -> List[FileRecord]:
        """Records whose filename exists in `other` but never with their digest."""
        return self._tag_matching(
            records,
            lambda r: r.filename in other.names
            and (r.filename, r.digest) not in other.name_digests,
            HASH_MISMATCH_TAG,
            cancel,
        )

    def _find_missing(
        self,
        records: List[FileRecord],
        other: _DatasetIndex,
        tag: str,
        cancel: threading.Event,
    ) -> List[FileRecord]:
        """Records whose filename does not occur in `other` at all."""
        return self._tag_matching(
            records, lambda r: r.filename not in other.names, tag, cancel
        )

    def _tag_matching(
        self,
        records: List[FileRecord],
        predicate: Callable[[FileRecord], bool],
        tag: str,
        cancel: threading.Event,
    ) -> List[FileRecord]:
        return [
            replace(record, diff_tag=tag)
            for record in self._checked(records, cancel)
            if predicate(record)
        ]

    def _checked(
        self, records: List[FileRecord], cancel: threading.Event
    ) -> Iterable[FileRecord]:
        """Yield records, stopping with _Cancelled once `cancel` is set."""
        for position, record in enumerate(records):
            if position % _CANCEL_CHECK_INTERVAL == 0 and cancel.is_set():
                raise _Cancelled()
            yield record
