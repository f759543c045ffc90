"""
Copying of differing files for the comparison workflow.

This module contains the ResultCopier class, which copies the files behind
comparison results into category folders without overwriting anything.
"""

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

from hashsnap import config
from hashsnap.diagnostics import ExceptionSink
from hashsnap.exceptions import UniqueFilenameError
from hashsnap.models import (
    HASH_MISMATCH_TAG,
    MISSING_TAG_PREFIX,
    CopyReport,
    ExceptionRecord,
    FailureKind,
    FileRecord,
    Stage,
)

from .filenames import generate_unique_path

logger = logging.getLogger(__name__)


class ResultCopier:
    """
    Copies differing files into "missing" and "hash" folders.

    Records tagged missing-from-* go to the missing folder, hash-mismatch
    records to the hash folder. A name collision yields "name (n).ext".
    One failed file is reported to the sink and counted; the batch goes on.
    """

    def __init__(self, sink: ExceptionSink) -> None:
        """
        Create a ResultCopier reporting per-file failures to `sink`.

        Parameters:
            sink (ExceptionSink): Receives one `copy` ExceptionRecord per failed file.
        """
        self._sink = sink

    def copy_differences(
        self, records: Iterable[FileRecord], destination: Path
    ) -> CopyReport:
        """
        Copy every tagged record's file into its category folder under `destination`.

        Parameters:
            records (Iterable[FileRecord]): Comparer output. Untagged records are ignored.
            destination (Path): Root folder; category folders are created beneath it.

        Returns:
            CopyReport: Counts of copied and failed files plus the created paths.
        """
        report = CopyReport(destination=destination)

        for record in records:
            folder_name = self._category_folder(record)
            if folder_name is None:
                continue

            try:
                target = self._copy_file(Path(record.path), destination / folder_name)
            except (OSError, UniqueFilenameError) as e:
                self._record_failure(report, record, e)
                continue

            report.files_copied += 1
            report.copied_paths.append(target)
            logger.debug(f"Copied {record.path} -> {target}")

        return report

    def _category_folder(self, record: FileRecord) -> Optional[str]:
        """Return the category folder name for a record's diff tag, or None."""
        if record.diff_tag == HASH_MISMATCH_TAG:
            return config.HASH_FOLDER_NAME
        if record.diff_tag.startswith(MISSING_TAG_PREFIX):
            return config.MISSING_FOLDER_NAME
        return None

    def _copy_file(self, source: Path, folder: Path) -> Path:
        """
        Copy `source` into `folder` under a unique name, preserving metadata.

        The destination name is reserved before copying; if the copy fails the
        empty placeholder is removed again.
        """
        if not source.is_file():
            raise FileNotFoundError(2, "Source file not found", str(source))

        folder.mkdir(parents=True, exist_ok=True)
        target = generate_unique_path(folder, source.name)
        try:
            shutil.copy2(source, target)
        except OSError:
            target.unlink(missing_ok=True)
            raise
        return target

    def _record_failure(
        self, report: CopyReport, record: FileRecord, error: Exception
    ) -> None:
        """Count a failed copy and report it to the sink."""
        report.files_failed += 1
        report.errors.append(f"{record.path}: {error}")

        if isinstance(error, OSError):
            self._sink.report(Stage.COPY, error, record.path)
        else:
            self._sink.put(
                ExceptionRecord(
                    stage=Stage.COPY,
                    kind=FailureKind.OTHER,
                    path=record.path,
                    detail=str(error),
                )
            )
