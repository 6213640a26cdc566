"""
Acceleration Module

Parallel processing of independent per-reading work within a fusion pass.
"""

from .parallel_executor import ReadingParallelExecutor
from .reading_workers import MapSnapshot, detect_reading_overlap, install_snapshot

__all__ = [
    "ReadingParallelExecutor",
    "MapSnapshot",
    "detect_reading_overlap",
    "install_snapshot",
]
