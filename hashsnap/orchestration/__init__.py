"""Workflow orchestration package for hashsnap.

This package contains orchestration components for both workflows:
- RunLogger: Structured logging of runs to a log file.
- HashOrchestrator: Central coordinator for analysis and comparison runs.
"""

from hashsnap.orchestration.run_logger import RunLogger
from hashsnap.orchestration.hash_orchestrator import HashOrchestrator

__all__ = ["RunLogger", "HashOrchestrator"]
