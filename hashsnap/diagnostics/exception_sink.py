"""Thread-safe collector for per-item failures.

Producers (the enumerator, hash workers and the result copier) put
ExceptionRecords without blocking; a single consumer drains them at its own
pace for display. Nothing in the core waits on the sink being drained.

Example:
    >>> sink = ExceptionSink()
    >>> sink.report(Stage.HASHING, PermissionError(13, "denied", "/a"), "/a")
    >>> [r.kind for r in sink.drain()]
    [<FailureKind.ACCESS_DENIED: 'AccessDenied'>]
"""

import logging
import queue
import threading
from collections import Counter
from typing import Dict, List, Optional

from hashsnap.models import ExceptionRecord, FailureKind, Stage

logger = logging.getLogger(__name__)


class ExceptionSink:
    """Unbounded multi-producer, single-consumer FIFO of ExceptionRecords.

    Alongside the queue the sink keeps running totals per stage and per
    failure kind, so statistics stay available after the queue is drained.
    """

    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[ExceptionRecord]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._by_stage: Counter = Counter()
        self._by_kind: Counter = Counter()

    def put(self, record: ExceptionRecord) -> None:
        """Enqueue a failure. Never blocks."""
        with self._lock:
            self._by_stage[record.stage] += 1
            self._by_kind[record.kind] += 1
        self._queue.put_nowait(record)
        logger.warning(
            "%s failed (%s): %s %s",
            record.stage.value,
            record.kind.value,
            record.path,
            f"- {record.detail}" if record.detail else "",
        )

    def report(
        self,
        stage: Stage,
        error: BaseException,
        path: Optional[str] = None,
    ) -> ExceptionRecord:
        """Build an ExceptionRecord from an exception and enqueue it.

        The path comes from the failure site: `path` if given, else the
        exception's `filename`, else the error message itself.
        """
        failing_path = path or getattr(error, "filename", None) or str(error)
        record = ExceptionRecord(
            stage=stage,
            kind=FailureKind.classify(error),
            path=str(failing_path),
            detail=str(error),
        )
        self.put(record)
        return record

    def get(self, timeout: Optional[float] = None) -> Optional[ExceptionRecord]:
        """Return the next record, or None if nothing arrives within `timeout`."""
        try:
            if timeout is None:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[ExceptionRecord]:
        """Remove and return every record queued so far, oldest first."""
        records: List[ExceptionRecord] = []
        while True:
            try:
                records.append(self._queue.get_nowait())
            except queue.Empty:
                return records

    def empty(self) -> bool:
        return self._queue.empty()

    @property
    def total(self) -> int:
        """Number of failures put so far, drained or not."""
        with self._lock:
            return sum(self._by_stage.values())

    def counts_by_stage(self) -> Dict[Stage, int]:
        with self._lock:
            return dict(self._by_stage)

    def counts_by_kind(self) -> Dict[FailureKind, int]:
        with self._lock:
            return dict(self._by_kind)
