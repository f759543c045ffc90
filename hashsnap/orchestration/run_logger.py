"""RunLogger for writing analysis and comparison runs to a structured log file.

This module provides the RunLogger class that writes a sectioned, plain-text
record of one hashing or comparison run, independent of console output.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from hashsnap.models import AnalysisSummary, ComparisonSummary, ExceptionRecord


class RunLogger:
    """Logger for hashsnap runs with a structured output format.

    Usage:
        with RunLogger(log_path, mode="ANALYSIS") as run_log:
            run_log.log_header()
            run_log.log_analysis(summary)
            run_log.log_failures(failures)
            run_log.log_footer(summary.duration_seconds)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, log_file_path: Optional[Path] = None, mode: str = "ANALYSIS") -> None:
        """Initialize the RunLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.
            mode: Run mode shown in the header ("ANALYSIS" or "COMPARISON").

        Raises:
            OSError: If the log file path is not writable.
        """
        self._mode = mode
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"hashsnap_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file's parent directory exists and is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")

    def __enter__(self) -> "RunLogger":
        """Open the log file for appending.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._log_file_path, "a", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the log file, even if an exception occurred."""
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title, timestamp and run mode."""
        self._write_separator()
        self._write_line("hashsnap - Run Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line(f"Mode: {self._mode}")
        self._write_line("")

    def log_analysis(self, summary: AnalysisSummary) -> None:
        """Write the analysis section for a hashing run."""
        self._write_separator()
        self._write_line("ANALYSIS")
        self._write_separator()
        self._write_line(f"Root: {summary.root}")
        self._write_line(f"Files hashed: {summary.total_files:,}")
        self._write_line(f"Files failed: {summary.failed_files:,}")
        for kind, count in sorted(summary.failures_by_kind.items()):
            self._write_line(f"- {kind}: {count:,}", indent=2)
        self._write_line(f"Directories skipped: {summary.enumeration_errors:,}")
        self._write_line(f"Dataset: {summary.output_path}")
        self._write_line("")

    def log_comparison(self, summary: ComparisonSummary) -> None:
        """Write the comparison section, including copy results if any."""
        self._write_separator()
        self._write_line("COMPARISON")
        self._write_separator()
        self._write_line(f"Dataset A: {summary.dataset_a}")
        self._write_line(f"Dataset B: {summary.dataset_b}")
        self._write_line(f"Hash mismatches: {summary.mismatches:,}")
        self._write_line(f"Missing from A: {summary.missing_from_a:,}")
        self._write_line(f"Missing from B: {summary.missing_from_b:,}")
        self._write_line(f"Total differences: {summary.total_differences:,}")
        self._write_line(f"Differences file: {summary.output_path}")

        report = summary.copy_report
        if report is not None:
            self._write_line(f"Copied to: {report.destination}")
            self._write_line(f"Files copied: {report.files_copied:,}", indent=2)
            self._write_line(f"Files failed: {report.files_failed:,}", indent=2)
        self._write_line("")

    def log_failures(self, failures: List[ExceptionRecord]) -> None:
        """Write every reported per-item failure."""
        if not failures:
            return

        self._write_separator()
        self._write_line(f"FAILURES ({len(failures)})")
        self._write_separator()
        for failure in failures:
            self._write_line(
                f"[{self._format_timestamp(failure.occurred_at)}] "
                f"{failure.stage.value}/{failure.kind.value}: {failure.path}"
            )
            if failure.detail:
                self._write_line(failure.detail, indent=4)
        self._write_line("")

    def log_footer(self, duration_seconds: float) -> None:
        """Write the duration and log location."""
        self._write_line(f"Duration: {self._format_duration(duration_seconds)}")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_duration(self, seconds: float) -> str:
        """Format duration like "5m 23s", "1h 5m 30s", or "45s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        else:
            return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the log file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
