"""HashOrchestrator for coordinating the analysis and comparison workflows.

This module provides the HashOrchestrator class, which wires the engine
components (PathEnumerator, HashWorkerPool, DatasetStore, DatasetComparer,
ResultCopier) to the presentation layer (HashTUI) and the optional RunLogger.

Example:
    from hashsnap.orchestration import HashOrchestrator
    from pathlib import Path

    orchestrator = HashOrchestrator(results_dir=Path("~/results").expanduser())

    # Hash a directory tree into a dataset
    summary = orchestrator.run_analysis(Path("/data/backup"))

    # Compare two datasets and copy the differing files
    summary = orchestrator.run_comparison(Path("before.csv"), Path("after.csv"))
"""

import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from hashsnap import config
from hashsnap.comparison import DatasetComparer
from hashsnap.diagnostics import ExceptionSink
from hashsnap.exceptions import EmptyDirectoryError
from hashsnap.models import (
    AnalysisSummary,
    ComparisonSummary,
    ExceptionRecord,
    HashProgress,
    Stage,
)
from hashsnap.operations import ResultCopier, generate_unique_path, scrub_filename
from hashsnap.orchestration.run_logger import RunLogger
from hashsnap.scanning import HashWorkerPool, PathEnumerator
from hashsnap.storage import DatasetStore
from hashsnap.ui import HashTUI

logger = logging.getLogger(__name__)


class HashOrchestrator:
    """Orchestrates the analysis and comparison workflows.

    The orchestrator exposes two operations:
    - run_analysis(): enumerate, hash in parallel, persist a dataset
    - run_comparison(): load two datasets, compare under a timeout, persist
      the differences and optionally copy the differing files

    Per-file and per-directory failures never abort a run; they appear in
    the summaries and failure listings. Operation-wide failures (empty
    directory, unreadable dataset, timeout, no unique output name, I/O
    errors on the output) propagate to the caller.

    Attributes:
        results_dir: Directory receiving datasets and copied files.
        workers: Hash worker count (None means CPU count).
        compare_timeout: Upper bound in seconds for one comparison.
        copy_files: Whether to copy differing files after a comparison.
        follow_symlinks: Whether enumeration descends into symlinked directories.
        verbose: Whether to display additional details.
        log_file_path: Optional structured run log.
    """

    def __init__(
        self,
        results_dir: Optional[Path] = None,
        workers: Optional[int] = None,
        compare_timeout: float = config.COMPARE_TIMEOUT_SECONDS,
        copy_files: bool = True,
        follow_symlinks: bool = False,
        verbose: bool = False,
        log_file_path: Optional[Path] = None,
        tui: Optional[HashTUI] = None,
    ) -> None:
        """Initialize the HashOrchestrator.

        Raises:
            ValueError: If workers is less than 1 or compare_timeout is not positive.
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if compare_timeout <= 0:
            raise ValueError(f"compare_timeout must be positive, got {compare_timeout}")

        self.results_dir = results_dir if results_dir is not None else config.default_results_dir()
        self.workers = workers
        self.compare_timeout = compare_timeout
        self.copy_files = copy_files
        self.follow_symlinks = follow_symlinks
        self.verbose = verbose
        self.log_file_path = log_file_path

        self._tui = tui or HashTUI()
        self._store = DatasetStore()

    def run_analysis(self, root: Path) -> AnalysisSummary:
        """Hash every file under `root` and write the dataset.

        Args:
            root: Directory to analyze.

        Returns:
            AnalysisSummary for the run.

        Raises:
            EmptyDirectoryError: If no files were found under `root`.
            UniqueFilenameError: If no output filename could be reserved.
            OSError: If the dataset cannot be written.
        """
        start_time = time.time()
        sink = ExceptionSink()
        root = Path(root).resolve()

        with self._tui.status(f"Reading directory info for {root}..."):
            paths = PathEnumerator(sink, self.follow_symlinks).enumerate(root)

        if not paths:
            raise EmptyDirectoryError(f"Directory contains no files: {root}")

        progress = HashProgress(len(paths))
        pool = HashWorkerPool(sink, workers=self.workers)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="hash-run") as runner:
            future = runner.submit(pool.hash_all, paths, progress)
            failures = self._tui.track_hashing(progress, sink, future)
            records = future.result()

        failures.extend(sink.drain())

        output_name = f"{config.HASH_OUTPUT_PREFIX}{self._output_label(root)}{config.OUTPUT_EXTENSION}"
        output_path = self._reserve_output(output_name)
        self._write_output(output_path, records, include_diff=False)

        hashing_failures = [f for f in failures if f.stage == Stage.HASHING]
        summary = AnalysisSummary(
            root=root,
            output_path=output_path,
            total_files=len(records),
            failed_files=len(hashing_failures),
            enumeration_errors=sum(1 for f in failures if f.stage == Stage.ENUMERATION),
            failures_by_kind=dict(Counter(f.kind.value for f in hashing_failures)),
            duration_seconds=time.time() - start_time,
        )

        self._tui.display_analysis_summary(summary)
        if self.verbose:
            self._tui.display_failures(failures)

        self._write_run_log("ANALYSIS", failures, summary.duration_seconds, analysis=summary)
        return summary

    def run_comparison(self, dataset_a: Path, dataset_b: Path) -> ComparisonSummary:
        """Compare two datasets, write the differences and copy the files.

        Args:
            dataset_a: Earlier dataset.
            dataset_b: Later dataset.

        Returns:
            ComparisonSummary for the run.

        Raises:
            DatasetFormatError: If either dataset cannot be read.
            ComparisonTimeoutError: If the comparison exceeds its bound.
            UniqueFilenameError: If no output filename could be reserved.
            OSError: If the differences file cannot be written.
        """
        start_time = time.time()
        sink = ExceptionSink()

        with self._tui.status("Reading datasets..."):
            a = self._store.load(dataset_a)
            b = self._store.load(dataset_b)

        if a.label == b.label:
            a.label, b.label = f"{a.label}-A", f"{b.label}-B"

        with self._tui.status("Comparing datasets..."):
            result = DatasetComparer(timeout=self.compare_timeout).compare(a, b)

        output_name = (
            f"{config.DIFF_OUTPUT_PREFIX}"
            f"{scrub_filename(f'{a.label}_vs_{b.label}')}{config.OUTPUT_EXTENSION}"
        )
        output_path = self._reserve_output(output_name)
        self._write_output(output_path, result.differences, include_diff=True)

        copy_report = None
        if self.copy_files and result.total:
            destination = self.results_dir / output_path.stem
            with self._tui.status(f"Copying {result.total:,} differing files..."):
                copy_report = ResultCopier(sink).copy_differences(
                    result.differences, destination
                )

        failures = sink.drain()
        summary = ComparisonSummary(
            dataset_a=Path(dataset_a),
            dataset_b=Path(dataset_b),
            output_path=output_path,
            mismatches=len(result.mismatches),
            missing_from_a=len(result.missing_from_a),
            missing_from_b=len(result.missing_from_b),
            copy_report=copy_report,
            duration_seconds=time.time() - start_time,
        )

        self._tui.display_failures(failures, title="Copy failures")
        self._tui.display_comparison_summary(summary)

        self._write_run_log("COMPARISON", failures, summary.duration_seconds, comparison=summary)
        return summary

    def _output_label(self, root: Path) -> str:
        """Filename-safe label for a directory, e.g. 'backup' for /data/backup."""
        return scrub_filename(root.name or str(root)) or "root"

    def _reserve_output(self, file_name: str) -> Path:
        self.results_dir.mkdir(parents=True, exist_ok=True)
        return generate_unique_path(self.results_dir, file_name)

    def _write_output(self, path: Path, records, include_diff: bool) -> None:
        """Write a dataset, removing the reserved placeholder if writing fails."""
        try:
            self._store.write(path, records, include_diff=include_diff)
        except OSError:
            path.unlink(missing_ok=True)
            raise

    def _write_run_log(
        self,
        mode: str,
        failures: List[ExceptionRecord],
        duration: float,
        analysis: Optional[AnalysisSummary] = None,
        comparison: Optional[ComparisonSummary] = None,
    ) -> None:
        """Append the run to the log file, if one was requested."""
        if self.log_file_path is None:
            return

        try:
            with RunLogger(self.log_file_path, mode=mode) as run_log:
                run_log.log_header()
                if analysis is not None:
                    run_log.log_analysis(analysis)
                if comparison is not None:
                    run_log.log_comparison(comparison)
                run_log.log_failures(failures)
                run_log.log_footer(duration)

                if self.verbose:
                    self._tui.console.print(f"[dim]Log file: {run_log.get_log_path()}[/dim]")
        except OSError as e:
            # Logging is not critical to the run
            logger.warning("Could not write run log: %s", e)
            self._tui.display_warning(f"Could not write log file: {e}")
