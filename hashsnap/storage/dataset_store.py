"""Persistence of datasets as CSV files.

Columns are stable across hashing output and comparison output:

    FilePath,FileHash,DateOfAnalysis[,Diff]

The Diff column is written only for comparison results.

Example:
    >>> store = DatasetStore()
    >>> store.write(Path("hashes.csv"), records)
    >>> dataset = store.load(Path("hashes.csv"))
    >>> print(dataset.label, len(dataset))
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from hashsnap.exceptions import DatasetFormatError
from hashsnap.models import Dataset, FileRecord

logger = logging.getLogger(__name__)

PATH_COLUMN = "FilePath"
HASH_COLUMN = "FileHash"
DATE_COLUMN = "DateOfAnalysis"
DIFF_COLUMN = "Diff"

BASE_COLUMNS = [PATH_COLUMN, HASH_COLUMN, DATE_COLUMN]

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Timestamps written by older, culture-formatted datasets
_LEGACY_DATE_FORMATS = (
    "%m/%d/%Y %I:%M:%S %p",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)


class DatasetStore:
    """Reads and writes FileRecord collections as CSV."""

    def write(
        self,
        path: Path,
        records: Iterable[FileRecord],
        include_diff: bool = False,
    ) -> int:
        """Write records to `path`, replacing its contents.

        Args:
            path: Destination file (typically reserved by generate_unique_path).
            records: Records to write, in the given order.
            include_diff: Add the Diff column (comparison output).

        Returns:
            Number of records written.

        Raises:
            OSError: If the file cannot be written.
        """
        columns = BASE_COLUMNS + ([DIFF_COLUMN] if include_diff else [])
        count = 0

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(columns)
            for record in records:
                row = [
                    record.path,
                    record.digest,
                    record.analyzed_at.strftime(DATE_FORMAT),
                ]
                if include_diff:
                    row.append(record.diff_tag)
                writer.writerow(row)
                count += 1

        logger.info("Wrote %d records to %s", count, path)
        return count

    def load(self, path: Path, label: Optional[str] = None) -> Dataset:
        """Read a dataset from `path`.

        Args:
            path: CSV file written by `write` (or a compatible tool).
            label: Name for the dataset. Defaults to the file stem.

        Returns:
            Dataset holding the file's records in file order.

        Raises:
            DatasetFormatError: If the file cannot be opened, lacks required
                columns, or holds an unreadable row.
        """
        path = Path(path)
        records: List[FileRecord] = []

        try:
            with open(path, "r", newline="", encoding="utf-8-sig") as f:
                reader = csv.DictReader(f)
                missing = [c for c in BASE_COLUMNS if c not in (reader.fieldnames or [])]
                if missing:
                    raise DatasetFormatError(
                        f"Dataset {path} is missing column(s): {', '.join(missing)}"
                    )

                for row in reader:
                    records.append(self._parse_row(row, path, reader.line_num))
        except OSError as e:
            raise DatasetFormatError(f"Could not read dataset {path}: {e}") from e
        except (csv.Error, UnicodeDecodeError) as e:
            raise DatasetFormatError(f"Could not parse dataset {path}: {e}") from e

        logger.info("Loaded %d records from %s", len(records), path)
        return Dataset(label=label or path.stem, records=records, source=path)

    def _parse_row(self, row: dict, path: Path, line: int) -> FileRecord:
        file_path = row.get(PATH_COLUMN) or ""
        digest = row.get(HASH_COLUMN) or ""
        if not file_path or not digest:
            raise DatasetFormatError(f"{path}, line {line}: empty FilePath or FileHash")

        return FileRecord(
            path=file_path,
            digest=digest,
            analyzed_at=self._parse_date(row.get(DATE_COLUMN) or "", path, line),
            diff_tag=row.get(DIFF_COLUMN) or "",
        )

    def _parse_date(self, value: str, path: Path, line: int) -> datetime:
        value = value.strip()
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass

        for fmt in _LEGACY_DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue

        raise DatasetFormatError(
            f"{path}, line {line}: unrecognized DateOfAnalysis '{value}'"
        )
