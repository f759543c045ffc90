"""File operations package for hashsnap.

This package provides output-side filesystem helpers:
- ResultCopier: Copies differing files into "missing" and "hash" folders.
- generate_unique_path: Reserves a non-colliding output filename.
- scrub_filename: Strips characters not allowed in filenames.

Example:
    >>> from hashsnap.operations import ResultCopier
    >>> report = ResultCopier(sink).copy_differences(result.differences, Path("out"))
    >>> print(f"Copied: {report.files_copied}, Failed: {report.files_failed}")
"""

from .filenames import generate_unique_path, scrub_filename
from .result_copier import ResultCopier

__all__ = ["ResultCopier", "generate_unique_path", "scrub_filename"]
