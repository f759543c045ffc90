"""
Exception hierarchy for hashsnap.

Only operation-wide failures are raised. Problems with a single file or
directory are turned into data (a failure digest or an ExceptionRecord).
"""


class HashsnapError(Exception):
    """Base exception for all hashsnap errors."""
    pass


class EmptyDirectoryError(HashsnapError):
    """Raised when a directory to analyze contains no files."""
    pass


class DatasetFormatError(HashsnapError):
    """Raised when a dataset file cannot be opened or parsed."""
    pass


class ComparisonTimeoutError(HashsnapError):
    """Raised when a comparison exceeds its time bound."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Comparison query timed out after {timeout:g} seconds.")
        self.timeout = timeout


class UniqueFilenameError(HashsnapError):
    """Raised when no unused output filename is found within the attempt budget."""

    def __init__(self, folder, file_name: str, attempts: int) -> None:
        super().__init__(
            f"Could not create unique filename for '{file_name}' in {folder} "
            f"after {attempts} attempts."
        )
        self.folder = folder
        self.file_name = file_name
        self.attempts = attempts
