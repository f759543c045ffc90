"""Bounded parallel hashing.

This module provides the HashWorkerPool class, which hashes a list of files
on a fixed number of worker threads and returns exactly one FileRecord per
input path. Failures are recorded as data: the record carries the failure
sentinel as its digest, and an ExceptionRecord goes to the sink.

Example:
    >>> pool = HashWorkerPool(sink, workers=4)
    >>> progress = HashProgress()
    >>> records = pool.hash_all(paths, progress)
    >>> print(f"{progress.completed} of {progress.total} hashed")
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence

from hashsnap.diagnostics import ExceptionSink
from hashsnap.models import ExceptionRecord, FileRecord, HashProgress, Stage

from .file_hasher import FileHasher

logger = logging.getLogger(__name__)


class HashWorkerPool:
    """Hashes files concurrently with a bounded number of workers.

    Parallelism is capped at `workers` (default: CPU count). Unbounded
    fan-out thrashes spinning disks and exhausts file handles on large trees.

    Each worker appends only its own record to the shared result list and
    never touches another worker's record. There are no retries: a file that
    is locked is recorded once as "File in use." and left alone.

    Attributes:
        workers: Maximum number of files hashed at the same time.
    """

    def __init__(
        self,
        sink: ExceptionSink,
        workers: Optional[int] = None,
        hasher: Optional[FileHasher] = None,
    ) -> None:
        """Initialize the HashWorkerPool.

        Args:
            sink: Receives one `hashing` ExceptionRecord per failed file.
            workers: Worker count. Defaults to the number of CPUs.
            hasher: FileHasher to use. A new one is created if omitted.

        Raises:
            ValueError: If workers is less than 1.
        """
        if workers is None:
            workers = os.cpu_count() or 1
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        self.workers = workers
        self._sink = sink
        self._hasher = hasher if hasher is not None else FileHasher()

    def hash_all(
        self,
        paths: Sequence[str],
        progress: Optional[HashProgress] = None,
    ) -> List[FileRecord]:
        """Hash every path and return one FileRecord for each.

        Args:
            paths: Files to hash.
            progress: Run context to keep current. Pass one in to poll it
                from another thread while this call blocks.

        Returns:
            FileRecords in completion order (order is not significant).
        """
        if progress is None:
            progress = HashProgress()
        progress.reset(len(paths))

        results: List[FileRecord] = []
        results_lock = threading.Lock()

        def work(path: str) -> None:
            record = self._hash_one(path, progress)
            with results_lock:
                results.append(record)
            progress.finish()

        logger.debug("Hashing %d files with %d workers", len(paths), self.workers)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            # Propagate unexpected worker errors instead of dropping records
            for future in [executor.submit(work, path) for path in paths]:
                future.result()

        return results

    def _hash_one(self, path: str, progress: HashProgress) -> FileRecord:
        """Hash a single file, reporting a failure to the sink if needed."""
        progress.start(path)
        analyzed_at = datetime.now()
        outcome = self._hasher.hash_file(path)

        if not outcome.succeeded:
            self._sink.put(
                ExceptionRecord(
                    stage=Stage.HASHING,
                    kind=outcome.kind,
                    path=path,
                    detail=outcome.detail,
                )
            )

        return FileRecord(path=path, digest=outcome.digest, analyzed_at=analyzed_at)
