"""Failure reporting package for hashsnap.

- ExceptionSink: Thread-safe queue of ExceptionRecords fed by the enumerator,
  hash workers and result copier, drained by the presentation layer.
"""

from .exception_sink import ExceptionSink

__all__ = ["ExceptionSink"]
