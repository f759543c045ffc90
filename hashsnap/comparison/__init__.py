"""Dataset comparison package for hashsnap.

This package contains the DatasetComparer, which finds files that were
altered, added or removed between two hashing snapshots.

Example:
    >>> from hashsnap.comparison import DatasetComparer
    >>> comparer = DatasetComparer(timeout=4800)
    >>> result = comparer.compare(dataset_a, dataset_b)
    >>> print(f"{result.total} differences")
"""

from .dataset_comparer import DatasetComparer

__all__ = [
    "DatasetComparer",
]
