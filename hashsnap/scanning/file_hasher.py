"""Content digests for single files.

This module provides the FileHasher class for computing the MD5 digest of a
file. MD5 is used as a change-detection fingerprint only.

Example:
    >>> from hashsnap.scanning import FileHasher
    >>> outcome = FileHasher().hash_file(Path("/path/to/file.txt"))
    >>> if outcome.succeeded:
    ...     print(f"MD5: {outcome.digest}")
    ... else:
    ...     print(f"Failed: {outcome.kind.value}")
"""

import hashlib
from pathlib import Path
from typing import Union

from hashsnap import config
from hashsnap.models import FailureKind, HashFailure, HashOutcome, HashSuccess


class FileHasher:
    """Computes upper-case hex MD5 digests of files.

    Files are opened for plain shared reading (no exclusive lock is
    requested) and streamed in `chunk_size` pieces, so large files are never
    loaded whole.

    Hashing never raises for I/O problems; the outcome is tagged instead:
    - HashSuccess(digest) when the file was read to the end
    - HashFailure(kind, detail) when opening or reading failed

    Attributes:
        chunk_size: Number of bytes read per iteration.
    """

    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE) -> None:
        """Initialize the FileHasher.

        Args:
            chunk_size: Read buffer size in bytes. Must be positive.

        Raises:
            ValueError: If chunk_size is not positive.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def hash_file(self, file_path: Union[str, Path]) -> HashOutcome:
        """Compute the MD5 digest of a file.

        Args:
            file_path: Path to the file to hash.

        Returns:
            HashSuccess with the digest, or HashFailure classifying the error:
            permission problems as ACCESS_DENIED, vanished files or parent
            directories as DIRECTORY_NOT_FOUND, sharing/lock violations as
            FILE_IN_USE and any other OS error as OTHER.
        """
        try:
            return HashSuccess(self._compute_digest(file_path))
        except OSError as e:
            return HashFailure(FailureKind.classify(e), str(e))

    def _compute_digest(self, file_path: Union[str, Path]) -> str:
        """Read the file in chunks and return its MD5 hex digest."""
        md5_hash = hashlib.md5(usedforsecurity=False)

        with open(file_path, "rb") as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                md5_hash.update(chunk)

        return md5_hash.hexdigest().upper()
