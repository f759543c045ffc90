"""
Configuration constants for hashsnap.

CLI options override the runtime values (workers, results directory,
timeout); everything else is fixed here.
"""
import os
from pathlib import Path

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading
DEFAULT_WORKERS = os.cpu_count() or 1

# --- Output ---
RESULTS_DIR_ENV = "HASHSNAP_RESULTS_DIR"
RESULTS_DIR_NAME = "hashsnap-results"
HASH_OUTPUT_PREFIX = "FileHashes_"
DIFF_OUTPUT_PREFIX = "FileDifferences_"
OUTPUT_EXTENSION = ".csv"
MAX_FILENAME_ATTEMPTS = 1024

# Category folders for copied differences
MISSING_FOLDER_NAME = "missing"
HASH_FOLDER_NAME = "hash"

# --- Comparison ---
COMPARE_TIMEOUT_SECONDS = 4800.0

# --- Presentation ---
POLL_INTERVAL_SECONDS = 0.1

# --- Platform ---
MIN_WINDOWS_MAJOR_VERSION = 10


def default_results_dir() -> Path:
    """Results directory: $HASHSNAP_RESULTS_DIR, else ~/Desktop/hashsnap-results."""
    override = os.environ.get(RESULTS_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / "Desktop" / RESULTS_DIR_NAME
