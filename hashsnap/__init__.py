"""hashsnap - Directory snapshot hashing and comparison.

Recursively hashes every file under a directory into a CSV dataset, and
compares two datasets to find files that were altered, added or removed
between snapshots of a tree (backup verification, integrity auditing).
"""

__version__ = "1.0.0"

from .models import (
    AnalysisSummary,
    ComparisonResult,
    ComparisonSummary,
    Dataset,
    ExceptionRecord,
    FailureKind,
    FileRecord,
    Stage,
)

__all__ = [
    "__version__",
    "AnalysisSummary",
    "ComparisonResult",
    "ComparisonSummary",
    "Dataset",
    "ExceptionRecord",
    "FailureKind",
    "FileRecord",
    "Stage",
]


def main() -> None:
    """Entry point for the hashsnap CLI application.

    This function is called when the `hashsnap` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the hashsnap.cli module.
    """
    from hashsnap.cli import app
    app()
