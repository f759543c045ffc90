"""Recursive file discovery.

This module provides the PathEnumerator class, which lists every regular
file under a root directory. A directory that cannot be listed is reported
to the ExceptionSink and its subtree is skipped; enumeration itself never
aborts because of one inaccessible directory.

Example:
    >>> from hashsnap.scanning import PathEnumerator
    >>> enumerator = PathEnumerator(sink)
    >>> paths = enumerator.enumerate(Path("/data/backup"))
    >>> print(f"Found {len(paths)} files")
"""

import logging
import os
from pathlib import Path
from typing import List, Set, Tuple, Union

from hashsnap.models import Stage
from hashsnap.diagnostics import ExceptionSink

logger = logging.getLogger(__name__)


class PathEnumerator:
    """Lists all regular files reachable from a root directory.

    Symlinks to regular files are returned like any other file. Symlinked
    directories are only descended into when `follow_symlinks` is set, and
    then each directory is visited at most once, tracked by (device, inode),
    so link cycles terminate.

    Attributes:
        follow_symlinks: Whether to descend into symlinked directories.
    """

    def __init__(self, sink: ExceptionSink, follow_symlinks: bool = False) -> None:
        self._sink = sink
        self.follow_symlinks = follow_symlinks

    def enumerate(self, root: Union[str, Path]) -> List[str]:
        """Return the absolute paths of all regular files under `root`.

        Args:
            root: Directory to walk.

        Returns:
            One entry per regular file, in no particular order. Empty if the
            root itself cannot be listed (which is reported like any other
            directory failure).
        """
        root_path = os.path.abspath(os.fspath(root))
        files: List[str] = []
        visited: Set[Tuple[int, int]] = set()
        pending: List[str] = [root_path]

        if self.follow_symlinks:
            try:
                root_stat = os.stat(root_path)
                visited.add((root_stat.st_dev, root_stat.st_ino))
            except OSError:
                # Reported by the listing attempt below
                pass

        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        self._classify_entry(entry, files, pending, visited)
            except OSError as e:
                self._sink.report(Stage.ENUMERATION, e, directory)

        logger.debug("Enumerated %d files under %s", len(files), root_path)
        return files

    def _classify_entry(
        self,
        entry: os.DirEntry,
        files: List[str],
        pending: List[str],
        visited: Set[Tuple[int, int]],
    ) -> None:
        """Route one directory entry to the file list or the pending stack."""
        try:
            if entry.is_dir(follow_symlinks=False):
                if self.follow_symlinks:
                    st = entry.stat(follow_symlinks=False)
                    dir_id = (st.st_dev, st.st_ino)
                    if dir_id in visited:
                        logger.debug("Skipping %s, already reached through a link", entry.path)
                        return
                    visited.add(dir_id)
                pending.append(entry.path)
                return

            if entry.is_symlink():
                if entry.is_dir(follow_symlinks=True):
                    if not self.follow_symlinks:
                        return
                    target = entry.stat(follow_symlinks=True)
                    dir_id = (target.st_dev, target.st_ino)
                    if dir_id in visited:
                        logger.debug("Skipping symlink cycle at %s", entry.path)
                        return
                    visited.add(dir_id)
                    pending.append(entry.path)
                    return

            if entry.is_file(follow_symlinks=True):
                files.append(entry.path)
        except OSError as e:
            # Broken or unreadable link target: not a reachable regular file
            logger.debug("Skipping %s: %s", entry.path, e)
