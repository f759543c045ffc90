"""Terminal UI package for hashsnap.

- HashTUI: Rich-based menu, prompts, progress polling and summaries.
"""

from .hash_tui import HashTUI

__all__ = ["HashTUI"]
