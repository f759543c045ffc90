"""Pytest fixtures for hashsnap tests."""

import io
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, List

import pytest
from rich.console import Console

from hashsnap.diagnostics import ExceptionSink
from hashsnap.models import Dataset, FileRecord
from hashsnap.ui import HashTUI

# Permission-based tests are meaningless when running as root
running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0
requires_permissions = pytest.mark.skipif(
    os.name == "nt" or running_as_root,
    reason="POSIX permission bits are not enforced here",
)

ANALYZED_AT = datetime(2024, 3, 1, 12, 30, 0)


def make_record(path: str, digest: str, diff_tag: str = "") -> FileRecord:
    """Create a FileRecord with a fixed analysis time."""
    return FileRecord(path=path, digest=digest, analyzed_at=ANALYZED_AT, diff_tag=diff_tag)


def make_dataset(label: str, entries: List[tuple]) -> Dataset:
    """Create a Dataset from (path, digest) pairs."""
    return Dataset(label=label, records=[make_record(p, d) for p, d in entries])


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sink() -> ExceptionSink:
    """Return an empty ExceptionSink."""
    return ExceptionSink()


@pytest.fixture
def sample_tree(temp_dir: Path) -> Dict[str, Path]:
    """Create a nested directory tree with known content.

    Creates:
        temp_dir/tree/
        ├── top.txt            ("top")
        ├── empty.bin          (0 bytes)
        ├── docs/
        │   ├── readme.md      ("readme")
        │   └── deep/
        │       └── notes.txt  ("notes")
        └── media/
            └── photo.jpg      (64KB + 1 of 'p', spans two read chunks)

    Returns:
        Dictionary mapping short names to paths; "root" is the tree root.
    """
    root = temp_dir / "tree"
    deep = root / "docs" / "deep"
    deep.mkdir(parents=True)
    (root / "media").mkdir()

    files = {
        "root": root,
        "top": root / "top.txt",
        "empty": root / "empty.bin",
        "readme": root / "docs" / "readme.md",
        "notes": deep / "notes.txt",
        "photo": root / "media" / "photo.jpg",
    }
    files["top"].write_bytes(b"top")
    files["empty"].touch()
    files["readme"].write_bytes(b"readme")
    files["notes"].write_bytes(b"notes")
    files["photo"].write_bytes(b"p" * (64 * 1024 + 1))
    return files


@pytest.fixture
def quiet_tui() -> HashTUI:
    """Return a HashTUI writing to an in-memory buffer."""
    return HashTUI(console=Console(file=io.StringIO(), width=120))


def tui_output(tui: HashTUI) -> str:
    """Return everything a quiet_tui has printed."""
    return tui.console.file.getvalue()
