"""
Output filename helpers.

Output files are never overwritten: `generate_unique_path` picks the first
unused name of the form `name.ext`, `name (1).ext`, `name (2).ext`, ... and
reserves it by creating it exclusively.
"""

import logging
import os
import re
from pathlib import Path
from typing import Union

from hashsnap import config
from hashsnap.exceptions import UniqueFilenameError

logger = logging.getLogger(__name__)

_DISALLOWED_CHARACTERS = re.compile(r'[\\/:*?"<>|]')


def scrub_filename(text: str) -> str:
    """Remove characters that are not allowed in filenames on common platforms."""
    return _DISALLOWED_CHARACTERS.sub("", text)


def generate_unique_path(
    folder: Union[str, Path],
    file_name: str,
    max_attempts: int = config.MAX_FILENAME_ATTEMPTS,
) -> Path:
    """Reserve and return an unused path for `file_name` inside `folder`.

    The first attempt uses `file_name` unchanged; attempt n appends " (n)"
    before the extension. The chosen file is created empty with O_EXCL, so a
    name taken concurrently by another writer is skipped rather than reused.

    Args:
        folder: Existing directory to create the file in.
        file_name: Desired name, e.g. "report.csv".
        max_attempts: Number of names to try before giving up.

    Returns:
        Path of the newly created, empty file.

    Raises:
        UniqueFilenameError: If every candidate name is taken.
        OSError: If the folder is missing or not writable.
    """
    folder = Path(folder)
    stem, ext = os.path.splitext(file_name)

    for index in range(max_attempts):
        name = file_name if index == 0 else f"{stem} ({index}){ext}"
        candidate = folder / name
        try:
            fd = os.open(candidate, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            continue
        os.close(fd)
        logger.debug("Reserved output path %s", candidate)
        return candidate

    raise UniqueFilenameError(folder, file_name, max_attempts)
