"""Terminal User Interface for hashsnap.

This module provides the HashTUI class, a Rich-based presentation layer for
the analysis and comparison workflows. The engine never renders anything
itself; HashTUI polls its progress counters and drains its failure queue.

Example:
    from hashsnap.ui import HashTUI

    tui = HashTUI()
    choice = tui.prompt_main_menu()
    failures = tui.track_hashing(progress, sink, future)
    tui.display_analysis_summary(summary)
"""

import time
from concurrent.futures import Future
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from hashsnap import config
from hashsnap.diagnostics import ExceptionSink
from hashsnap.models import (
    AnalysisSummary,
    ComparisonSummary,
    ExceptionRecord,
    HashProgress,
)


class HashTUI:
    """Rich-based Terminal User Interface for hashsnap.

    Provides:
    - The interactive top-level menu and path prompts
    - A polled progress bar for hashing, with failures printed as they arrive
    - Summary tables for analysis and comparison runs

    Args:
        console: Optional Rich Console instance for output. Pass a custom
            Console for testing (e.g., with StringIO file for output capture).

    Attributes:
        console: The Rich Console instance used for all output.
    """

    MENU_CHOICES = ["d", "c", "q"]

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def prompt_main_menu(self) -> str:
        """Ask for the next action.

        Returns:
            'd' (analyze a directory), 'c' (compare two datasets) or 'q' (quit).
        """
        self.console.print(
            Panel(
                "(d) Analyze a directory\n"
                "(c) Compare two datasets\n"
                "(q) Quit",
                title="hashsnap",
                border_style="cyan",
            )
        )
        return Prompt.ask(
            "Choose an action",
            choices=self.MENU_CHOICES,
            default="q",
            console=self.console,
        )

    def prompt_directory(self) -> Path:
        """Ask for a directory to analyze, re-prompting until one exists."""
        while True:
            answer = Prompt.ask("Directory to analyze", console=self.console).strip()
            path = Path(answer).expanduser()
            if answer and path.is_dir():
                self.console.print(f"Selected path: '{path}'")
                return path
            self.console.print(
                "[yellow]No directory selected. Please select a folder.[/yellow]"
            )

    def prompt_dataset(self, ordinal: str) -> Path:
        """Ask for a dataset file, re-prompting until one exists."""
        while True:
            answer = Prompt.ask(
                f"Select {ordinal} file for comparison", console=self.console
            ).strip()
            path = Path(answer).expanduser()
            if answer and path.is_file():
                return path
            self.console.print("[yellow]No file was selected.[/yellow]")

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while a step without progress counters runs."""
        with self.console.status(message, spinner="dots"):
            yield

    def track_hashing(
        self,
        progress: HashProgress,
        sink: ExceptionSink,
        future: Future,
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
    ) -> List[ExceptionRecord]:
        """Render hashing progress until `future` completes.

        Polls the run context for counters and the current file, and prints
        each failure drained from the sink as it arrives.

        Args:
            progress: Run context updated by the worker pool.
            sink: Failure queue fed by the enumerator and the workers.
            future: Future of the running hash pass.
            poll_interval: Seconds between polls.

        Returns:
            Every failure drained while tracking, in arrival order.
        """
        failures: List[ExceptionRecord] = []

        bar = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )

        with bar:
            task_id = bar.add_task("Calculating file hashes...", total=progress.total or None)

            while True:
                finished = future.done()
                completed, total, current = progress.snapshot()
                bar.update(
                    task_id,
                    completed=completed,
                    total=total or None,
                    description=f"Hashing {self._truncate_name(Path(current).name, 40)}"
                    if current else "Calculating file hashes...",
                )

                for failure in sink.drain():
                    failures.append(failure)
                    bar.console.print(self._format_failure(failure))

                if finished:
                    break
                time.sleep(poll_interval)

            bar.update(task_id, description="Hashing complete")

        return failures

    def display_failures(self, failures: List[ExceptionRecord], title: str = "Failures") -> None:
        """Display failures in a panel, at most ten of them."""
        if not failures:
            return

        max_display = 10
        lines = [self._format_failure(f) for f in failures[:max_display]]
        remaining = len(failures) - max_display
        if remaining > 0:
            lines.append(f"\n... and {remaining} more")

        self.console.print(
            Panel("\n".join(lines), title=f"{title} ({len(failures)})", border_style="red")
        )

    def display_analysis_summary(self, summary: AnalysisSummary) -> None:
        """Display statistics for a finished hashing run."""
        table = Table(show_header=True, header_style="bold", title="Analysis Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Directory", str(summary.root))
        table.add_row("Files hashed", f"{summary.total_files:,}")
        table.add_row("Files failed", f"{summary.failed_files:,}")
        for kind, count in sorted(summary.failures_by_kind.items()):
            table.add_row(f"  {kind}", f"{count:,}")
        table.add_row("Directories skipped", f"{summary.enumeration_errors:,}")
        table.add_row("Dataset", str(summary.output_path))
        table.add_row("Duration", self._format_duration(summary.duration_seconds))

        self.console.print(table)

    def display_comparison_summary(self, summary: ComparisonSummary) -> None:
        """Display statistics for a finished comparison run."""
        table = Table(show_header=True, header_style="bold", title="Comparison Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Hash mismatches", f"{summary.mismatches:,}")
        table.add_row("Missing from A", f"{summary.missing_from_a:,}")
        table.add_row("Missing from B", f"{summary.missing_from_b:,}")
        table.add_row("Total differences", f"{summary.total_differences:,}")
        table.add_row("Differences file", str(summary.output_path))

        report = summary.copy_report
        if report is not None:
            table.add_row("Copied to", str(report.destination))
            table.add_row("Files copied", f"{report.files_copied:,}")
            table.add_row("Copy failures", f"{report.files_failed:,}")

        table.add_row("Duration", self._format_duration(summary.duration_seconds))

        self.console.print(table)
        self.console.print(
            f"[green]{summary.total_differences:,} file differences found.[/green]"
        )

    def display_error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {message}")

    def display_warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def _format_failure(self, failure: ExceptionRecord) -> str:
        return (
            f"[red]{failure.stage.value} failed ({failure.kind.value})[/red] - "
            f"{self._truncate_name(failure.path, 80)}"
        )

    def _format_duration(self, seconds: float) -> str:
        """Convert seconds to human-readable duration (e.g., "5m 23s")."""
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        """Truncate long names with ellipsis."""
        if len(name) > max_length:
            return name[: max_length - 3] + "..."
        return name
