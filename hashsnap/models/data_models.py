"""
Core data models for hashsnap.

This module contains the following dataclasses:
- FileRecord: One analyzed file (path, digest, analysis time, diff tag)
- ExceptionRecord: One per-item failure reported to the ExceptionSink
- HashSuccess / HashFailure: Tagged outcome of hashing a single file
- Dataset: A labelled, ordered collection of FileRecords
- ComparisonResult: The three difference lists produced by DatasetComparer
- HashProgress: Poll-friendly run context for one hashing pass
- CopyReport: Results of copying differing files
- AnalysisSummary / ComparisonSummary: Workflow summaries
"""

import ntpath
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .failure_kind import FailureKind, Stage

HASH_MISMATCH_TAG = "hash-mismatch"
MISSING_TAG_PREFIX = "missing-from-"


def missing_tag(label: str) -> str:
    """Diff tag for records absent from the dataset called `label`."""
    return f"{MISSING_TAG_PREFIX}{label}"


@dataclass(frozen=True)
class FileRecord:
    """One analyzed file."""
    path: str                         # Absolute path at analysis time
    digest: str                       # Hex MD5 or failure sentinel
    analyzed_at: datetime             # When the digest was computed
    diff_tag: str = ""                # Set only on comparer output

    @property
    def filename(self) -> str:
        """Basename of the path, for either path flavour."""
        return ntpath.basename(self.path)


@dataclass(frozen=True)
class ExceptionRecord:
    """A per-item failure, consumed once by the reporting side."""
    stage: Stage                      # Which operation failed
    kind: FailureKind                 # Categorized failure
    path: str                         # Best-effort path of the failing item
    detail: str = ""                  # Original error text
    occurred_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class HashSuccess:
    """File hashed successfully."""
    digest: str
    succeeded: bool = field(default=True, init=False)


@dataclass(frozen=True)
class HashFailure:
    """File could not be hashed."""
    kind: FailureKind
    detail: str = ""
    succeeded: bool = field(default=False, init=False)

    @property
    def digest(self) -> str:
        return self.kind.sentinel


HashOutcome = Union[HashSuccess, HashFailure]


@dataclass
class Dataset:
    """A labelled collection of FileRecords loaded from or bound for disk."""
    label: str                        # Name used in missing-from-<label> tags
    records: List[FileRecord]         # Order is not significant
    source: Optional[Path] = None     # File the dataset was read from

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class ComparisonResult:
    """Differences between two datasets, each record carrying one diff tag."""
    mismatches: List[FileRecord] = field(default_factory=list)
    missing_from_a: List[FileRecord] = field(default_factory=list)
    missing_from_b: List[FileRecord] = field(default_factory=list)

    @property
    def differences(self) -> List[FileRecord]:
        return self.mismatches + self.missing_from_a + self.missing_from_b

    @property
    def total(self) -> int:
        return len(self.mismatches) + len(self.missing_from_a) + len(self.missing_from_b)


class HashProgress:
    """Progress counters for one hashing pass.

    Workers call `start` and `finish` for each file; a presentation layer
    polls `snapshot` from another thread. `completed` never decreases.
    """

    def __init__(self, total: int = 0) -> None:
        self._lock = threading.Lock()
        self._total = total
        self._completed = 0
        self._current_path = ""

    def reset(self, total: int) -> None:
        with self._lock:
            self._total = total
            self._completed = 0
            self._current_path = ""

    def start(self, path: str) -> None:
        with self._lock:
            self._current_path = path

    def finish(self) -> None:
        with self._lock:
            self._completed += 1

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def current_path(self) -> str:
        with self._lock:
            return self._current_path

    def snapshot(self) -> Tuple[int, int, str]:
        """Return (completed, total, current_path) read under one lock."""
        with self._lock:
            return self._completed, self._total, self._current_path


@dataclass
class CopyReport:
    """Results of copying differing files into categorized folders."""
    destination: Path                 # Root of the category folders
    files_copied: int = 0             # Files copied successfully
    files_failed: int = 0             # Files that could not be copied
    copied_paths: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.files_failed == 0


@dataclass
class AnalysisSummary:
    """Summary of one directory hashing run."""
    root: Path                        # Directory that was analyzed
    output_path: Path                 # Dataset written
    total_files: int = 0              # Records written
    failed_files: int = 0             # Records carrying a failure sentinel
    enumeration_errors: int = 0       # Subtrees skipped during enumeration
    failures_by_kind: Dict[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0


@dataclass
class ComparisonSummary:
    """Summary of one dataset comparison run."""
    dataset_a: Path
    dataset_b: Path
    output_path: Path                 # Diff dataset written
    mismatches: int = 0
    missing_from_a: int = 0
    missing_from_b: int = 0
    copy_report: Optional[CopyReport] = None
    duration_seconds: float = 0.0

    @property
    def total_differences(self) -> int:
        return self.mismatches + self.missing_from_a + self.missing_from_b
