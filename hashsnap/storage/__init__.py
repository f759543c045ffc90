"""Dataset persistence package for hashsnap.

- DatasetStore: Reads and writes datasets as CSV with the columns
  FilePath, FileHash, DateOfAnalysis and (for comparison output) Diff.
"""

from .dataset_store import DatasetStore

__all__ = ["DatasetStore"]
