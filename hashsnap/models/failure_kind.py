"""
Failure categories for per-file and per-directory errors.

Two enums describe a failure:
1. Stage - which operation failed (enumeration, hashing, copy)
2. FailureKind - what went wrong, each kind carrying the sentinel digest
   written to a FileRecord when hashing fails that way
"""

import errno
from enum import Enum

# Windows sharing/lock violation codes (ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION)
_WINERROR_IN_USE = {32, 33}
_ERRNO_IN_USE = {errno.EBUSY, getattr(errno, "ETXTBSY", errno.EBUSY)}


class Stage(Enum):
    """Operation that produced an ExceptionRecord."""
    ENUMERATION = "enumeration"
    HASHING = "hashing"
    COPY = "copy"


class FailureKind(Enum):
    """Categorized failure with its digest sentinel."""
    ACCESS_DENIED = "AccessDenied"           # Read access denied
    FILE_IN_USE = "FileInUse"                # Locked by another process
    DIRECTORY_NOT_FOUND = "DirectoryNotFound"  # Path vanished
    OTHER = "Other"                          # Anything else

    @property
    def sentinel(self) -> str:
        """Digest string recorded for a file that failed with this kind."""
        return _SENTINELS[self]

    @classmethod
    def classify(cls, error: BaseException) -> "FailureKind":
        """Map an exception raised by a filesystem call to a FailureKind."""
        if isinstance(error, PermissionError):
            return cls.ACCESS_DENIED
        if isinstance(error, (FileNotFoundError, NotADirectoryError)):
            return cls.DIRECTORY_NOT_FOUND
        if isinstance(error, OSError):
            if getattr(error, "winerror", None) in _WINERROR_IN_USE:
                return cls.FILE_IN_USE
            if error.errno in _ERRNO_IN_USE:
                return cls.FILE_IN_USE
        return cls.OTHER


_SENTINELS = {
    FailureKind.ACCESS_DENIED: "Read access denied.",
    FailureKind.FILE_IN_USE: "File in use.",
    FailureKind.DIRECTORY_NOT_FOUND: "Directory not found.",
    FailureKind.OTHER: "Hash failed.",
}

FAILURE_SENTINELS = frozenset(_SENTINELS.values())
