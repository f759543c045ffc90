"""Preflight checks run before any analysis.

- is_elevated: Whether the process runs with administrator/root rights.
  Without them some files are likely to be recorded as "Read access denied."
- os_supported: Whether the operating system meets the minimum version.
"""

import ctypes
import os
import platform
import sys

from hashsnap import config


def is_elevated() -> bool:
    """Return True when running as root (POSIX) or as an administrator (Windows)."""
    if sys.platform == "win32":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def os_supported() -> bool:
    """Return False only on Windows releases older than the minimum version."""
    if sys.platform != "win32":
        return True
    try:
        major = int(platform.version().split(".")[0])
    except ValueError:
        return True
    return major >= config.MIN_WINDOWS_MAJOR_VERSION


def describe_os() -> str:
    return f"{platform.system()} {platform.release()} ({platform.version()})"
