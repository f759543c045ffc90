"""Unit tests for ExceptionSink."""

import errno
import logging
import threading

from hashsnap.diagnostics import ExceptionSink
from hashsnap.models import ExceptionRecord, FailureKind, Stage


class TestExceptionSinkQueue:
    """FIFO behaviour of the sink."""

    def test_drain_returns_records_in_order(self, sink: ExceptionSink) -> None:
        for name in ("a", "b", "c"):
            sink.put(ExceptionRecord(Stage.HASHING, FailureKind.OTHER, f"/{name}"))

        assert [r.path for r in sink.drain()] == ["/a", "/b", "/c"]
        assert sink.empty()
        assert sink.drain() == []

    def test_get_without_records_returns_none(self, sink: ExceptionSink) -> None:
        assert sink.get() is None
        assert sink.get(timeout=0.01) is None

    def test_get_returns_next_record(self, sink: ExceptionSink) -> None:
        record = ExceptionRecord(Stage.COPY, FailureKind.ACCESS_DENIED, "/x")
        sink.put(record)
        assert sink.get() is record

    def test_concurrent_producers(self, sink: ExceptionSink) -> None:
        """Records from many threads all arrive exactly once."""

        def produce(worker: int) -> None:
            for i in range(50):
                sink.put(
                    ExceptionRecord(Stage.HASHING, FailureKind.OTHER, f"/{worker}/{i}")
                )

        threads = [threading.Thread(target=produce, args=(w,)) for w in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        paths = [r.path for r in sink.drain()]
        assert len(paths) == 300
        assert len(set(paths)) == 300


class TestExceptionSinkReport:
    """Building records from exceptions."""

    def test_report_uses_explicit_path(self, sink: ExceptionSink) -> None:
        error = PermissionError(errno.EACCES, "Permission denied", "/other")
        record = sink.report(Stage.ENUMERATION, error, "/data/locked")

        assert record.path == "/data/locked"
        assert record.kind == FailureKind.ACCESS_DENIED
        assert record.stage == Stage.ENUMERATION
        assert "Permission denied" in record.detail

    def test_report_falls_back_to_error_filename(self, sink: ExceptionSink) -> None:
        error = FileNotFoundError(errno.ENOENT, "No such file", "/gone.txt")
        record = sink.report(Stage.HASHING, error)
        assert record.path == "/gone.txt"

    def test_report_falls_back_to_message(self, sink: ExceptionSink) -> None:
        """With no path available the whole message stands in for it."""
        record = sink.report(Stage.COPY, OSError("disk exploded"))
        assert record.path == "disk exploded"
        assert record.kind == FailureKind.OTHER


class TestExceptionSinkStatistics:
    """Running totals survive draining."""

    def test_counts(self, sink: ExceptionSink) -> None:
        sink.put(ExceptionRecord(Stage.HASHING, FailureKind.ACCESS_DENIED, "/a"))
        sink.put(ExceptionRecord(Stage.HASHING, FailureKind.FILE_IN_USE, "/b"))
        sink.put(ExceptionRecord(Stage.ENUMERATION, FailureKind.ACCESS_DENIED, "/c"))
        sink.drain()

        assert sink.total == 3
        assert sink.counts_by_stage() == {Stage.HASHING: 2, Stage.ENUMERATION: 1}
        assert sink.counts_by_kind() == {
            FailureKind.ACCESS_DENIED: 2,
            FailureKind.FILE_IN_USE: 1,
        }

    def test_put_logs_warning(self, sink: ExceptionSink, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="hashsnap.diagnostics.exception_sink"):
            sink.put(ExceptionRecord(Stage.HASHING, FailureKind.FILE_IN_USE, "/locked.db"))

        assert "/locked.db" in caplog.text
        assert "FileInUse" in caplog.text
