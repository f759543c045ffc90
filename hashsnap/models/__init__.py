"""
Models package for hashsnap.

This package provides convenient imports for all data models:
- Stage, FailureKind: Enums describing per-item failures
- FileRecord: One analyzed file
- ExceptionRecord: One reported failure
- HashSuccess, HashFailure: Per-file hashing outcome
- Dataset, ComparisonResult: Comparison inputs and outputs
- HashProgress: Polled run context for a hashing pass
- CopyReport, AnalysisSummary, ComparisonSummary: Workflow results
"""

from .failure_kind import FAILURE_SENTINELS, FailureKind, Stage
from .data_models import (
    HASH_MISMATCH_TAG,
    MISSING_TAG_PREFIX,
    AnalysisSummary,
    ComparisonResult,
    ComparisonSummary,
    CopyReport,
    Dataset,
    ExceptionRecord,
    FileRecord,
    HashFailure,
    HashOutcome,
    HashProgress,
    HashSuccess,
    missing_tag,
)

__all__ = [
    "FAILURE_SENTINELS",
    "FailureKind",
    "Stage",
    "HASH_MISMATCH_TAG",
    "MISSING_TAG_PREFIX",
    "AnalysisSummary",
    "ComparisonResult",
    "ComparisonSummary",
    "CopyReport",
    "Dataset",
    "ExceptionRecord",
    "FileRecord",
    "HashFailure",
    "HashOutcome",
    "HashProgress",
    "HashSuccess",
    "missing_tag",
]
