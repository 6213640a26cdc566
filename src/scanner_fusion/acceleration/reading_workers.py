"""
Worker functions for parallel reading processing.

A fusion pass compares every unresolved reading against the same global map,
so the map is shipped to each worker process once, through the pool
initializer, and kept in module state. Per-reading calls then only carry the
reading itself. Everything here is module level so it can be pickled for
multiprocessing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import numpy as np

from ..alignment.fingerprint import Fingerprint, compute_fingerprint
from ..alignment.overlap_detection import OverlapDetector, OverlapMatch

if TYPE_CHECKING:
    from ..preprocessing.loader import ScannerReading


@dataclass(frozen=True)
class MapSnapshot:
    """Global map state a pass detects against; never mutated by workers."""

    points: np.ndarray
    fingerprint: Optional[Fingerprint]
    detector: OverlapDetector


# Set per process by install_snapshot
_snapshot: Optional[MapSnapshot] = None


def install_snapshot(snapshot: Optional[MapSnapshot]) -> None:
    """Pool initializer: make ``snapshot`` the map this process detects against."""
    global _snapshot
    _snapshot = snapshot


def current_snapshot() -> Optional[MapSnapshot]:
    return _snapshot


def detect_reading_overlap(reading: "ScannerReading") -> Optional[OverlapMatch]:
    """
    Try to align one reading onto the installed map snapshot.

    Args:
        reading: Unresolved scanner reading

    Returns:
        OverlapMatch or None

    Raises:
        RuntimeError: If no snapshot is installed in this process
    """
    snapshot = _snapshot
    if snapshot is None:
        raise RuntimeError("No map snapshot installed in this process")
    detector = snapshot.detector
    candidate_fingerprint = compute_fingerprint(reading.points) if detector.use_fingerprint else None
    return detector.detect(
        snapshot.points,
        reading.points,
        base_fingerprint=snapshot.fingerprint,
        candidate_fingerprint=candidate_fingerprint,
    )
