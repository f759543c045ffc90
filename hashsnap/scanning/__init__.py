"""File scanning package for hashsnap.

This package discovers files and computes their digests:

- PathEnumerator: Recursively lists regular files, skipping and reporting
  directories that cannot be read.
- FileHasher: Computes the MD5 digest of one file as a tagged outcome.
- HashWorkerPool: Hashes many files on a bounded thread pool, one
  FileRecord per path.

Example:
    >>> from hashsnap.diagnostics import ExceptionSink
    >>> from hashsnap.scanning import HashWorkerPool, PathEnumerator
    >>>
    >>> sink = ExceptionSink()
    >>> paths = PathEnumerator(sink).enumerate(Path("/data"))
    >>> records = HashWorkerPool(sink).hash_all(paths)
"""

from .file_hasher import FileHasher
from .hash_worker_pool import HashWorkerPool
from .path_enumerator import PathEnumerator

__all__ = ["FileHasher", "HashWorkerPool", "PathEnumerator"]
