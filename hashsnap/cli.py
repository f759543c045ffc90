"""
hashsnap - CLI Interface.

A command-line interface for snapshotting directory trees as MD5 datasets
and comparing two snapshots to find altered, added or removed files.

Usage Examples:
    # Interactive menu (analyze a directory or compare two datasets)
    hashsnap

    # Hash a directory tree directly
    hashsnap /path/to/backup

    # Hash with 4 workers into a custom results directory
    hashsnap /path/to/backup --workers 4 --results-dir ~/hash-results

    # Compare two datasets and copy the differing files
    hashsnap --compare before.csv --compare after.csv

    # Compare without copying, with a run log
    hashsnap --compare before.csv --compare after.csv --no-copy --log-file run.log
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from hashsnap import __version__, config, platform_checks
from hashsnap.exceptions import EmptyDirectoryError, HashsnapError
from hashsnap.orchestration import HashOrchestrator
from hashsnap.ui import HashTUI

app = typer.Typer(
    name="hashsnap",
    help="hashsnap - Snapshot directory trees as MD5 datasets and compare snapshots.",
    add_completion=False,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"hashsnap v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, else ERROR."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def validate_directory(path: Path) -> None:
    """
    Validate that the directory to analyze exists and is readable.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not path.exists():
        console.print(f"[red]Error:[/red] Directory does not exist: {path}")
        raise typer.Exit(1)

    if not path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {path}")
        raise typer.Exit(1)

    if not os.access(path, os.R_OK):
        console.print(f"[red]Error:[/red] Permission denied - cannot read: {path}")
        raise typer.Exit(1)


def validate_workers(value: Optional[int]) -> Optional[int]:
    """Reject worker counts below one."""
    if value is not None and value < 1:
        raise typer.BadParameter("Workers must be at least 1")
    return value


def validate_timeout(value: float) -> float:
    """Reject non-positive comparison timeouts."""
    if value <= 0:
        raise typer.BadParameter("Timeout must be greater than 0")
    return value


def run_preflight() -> None:
    """
    Check the operating system and privileges before any work.

    Raises:
        typer.Exit: If the operating system is older than supported.
    """
    if not platform_checks.os_supported():
        console.print(
            f"[red]Error:[/red] Unsupported operating system: {platform_checks.describe_os()}. "
            f"Windows {config.MIN_WINDOWS_MAJOR_VERSION} or later is required."
        )
        raise typer.Exit(1)

    if not platform_checks.is_elevated():
        console.print(
            "[yellow]Warning:[/yellow] Not running with administrator privileges. "
            "Some files may be recorded as 'Read access denied.'"
        )


def interactive_loop(orchestrator: HashOrchestrator, tui: HashTUI) -> None:
    """
    Run the top-level menu until the operator quits.

    A failed run reports its error and returns to the menu.
    """
    while True:
        choice = tui.prompt_main_menu()

        if choice == "q":
            return

        try:
            if choice == "d":
                while True:
                    try:
                        orchestrator.run_analysis(tui.prompt_directory())
                        break
                    except EmptyDirectoryError:
                        tui.display_error(
                            "Directory contains no files. Please choose another directory."
                        )
            elif choice == "c":
                first = tui.prompt_dataset("first")
                second = tui.prompt_dataset("second")
                orchestrator.run_comparison(first, second)
        except HashsnapError as e:
            tui.display_error(str(e))
            tui.console.print("[red]Process failed.[/red]")
        except OSError as e:
            tui.display_error(str(e))
            tui.console.print("[red]Process failed.[/red]")


@app.command()
def main(
    path: Optional[Path] = typer.Argument(
        None,
        help="Directory to analyze. Omit (and omit --compare) for the interactive menu.",
        exists=False,  # We do our own validation
    ),
    compare: Optional[List[Path]] = typer.Option(
        None,
        "--compare",
        "-c",
        help="Dataset to compare; give exactly twice (first, then second).",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel hash workers (default: CPU count).",
        callback=validate_workers,
    ),
    results_dir: Optional[Path] = typer.Option(
        None,
        "--results-dir",
        "-o",
        help=f"Directory for datasets and copied files (default: ${config.RESULTS_DIR_ENV} "
        f"or ~/Desktop/{config.RESULTS_DIR_NAME}).",
    ),
    timeout: float = typer.Option(
        config.COMPARE_TIMEOUT_SECONDS,
        "--timeout",
        "-t",
        help="Maximum seconds allowed for one comparison.",
        callback=validate_timeout,
    ),
    copy_files: bool = typer.Option(
        True,
        "--copy/--no-copy",
        help="Copy differing files into 'missing' and 'hash' folders after comparing.",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        help="Descend into symlinked directories (cycles are skipped).",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """
    Hash every file under a directory, or compare two hash datasets.

    With no arguments an interactive menu is shown. With a directory the
    tree is hashed directly. With --compare twice the two datasets are
    compared and their differences written (and copied, unless --no-copy).
    """
    configure_logging(verbose)

    if compare and len(compare) != 2:
        console.print("[red]Error:[/red] --compare must be given exactly twice.")
        raise typer.Exit(1)

    if path is not None and compare:
        console.print("[red]Error:[/red] Give either a directory or --compare, not both.")
        raise typer.Exit(1)

    if path is not None:
        validate_directory(path)

    run_preflight()

    tui = HashTUI(console=console)
    orchestrator = HashOrchestrator(
        results_dir=results_dir,
        workers=workers,
        compare_timeout=timeout,
        copy_files=copy_files,
        follow_symlinks=follow_symlinks,
        verbose=verbose,
        log_file_path=log_file,
        tui=tui,
    )

    try:
        if compare:
            orchestrator.run_comparison(compare[0], compare[1])
        elif path is not None:
            summary = orchestrator.run_analysis(path)
            console.print(f"\n[green]Finished: dataset written to {summary.output_path}[/green]")
        else:
            interactive_loop(orchestrator, tui)

    except typer.Exit:
        raise

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except HashsnapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except PermissionError as e:
        console.print(f"[red]Error:[/red] Permission denied - {e}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        logging.getLogger(__name__).debug("Unhandled error", exc_info=True)
        console.print(f"[red]Fatal error:[/red] {type(e).__name__}: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
