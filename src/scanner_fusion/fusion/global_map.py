"""
Global map: the fused point set in the reference frame.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..alignment.fingerprint import Fingerprint, compute_fingerprint


class GlobalMap:
    """
    Accumulating set of unique points in the reference frame.

    The map owns its point array; ``merge`` replaces it with a new read-only
    array, so arrays handed out earlier remain valid snapshots. The
    fingerprint is recomputed lazily after each merge.
    """

    def __init__(self, points: np.ndarray):
        self._points = self._freeze(np.unique(np.asarray(points, dtype=np.int64).reshape(-1, 3), axis=0))
        self._fingerprint: Optional[Fingerprint] = None

    @staticmethod
    def _freeze(points: np.ndarray) -> np.ndarray:
        points.setflags(write=False)
        return points

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def fingerprint(self) -> Fingerprint:
        if self._fingerprint is None:
            self._fingerprint = compute_fingerprint(self._points)
        return self._fingerprint

    def __len__(self) -> int:
        return len(self._points)

    def merge(self, points: np.ndarray) -> int:
        """
        Union points (already in the reference frame) into the map.

        Returns:
            Number of points that were new to the map
        """
        before = len(self._points)
        incoming = np.asarray(points, dtype=np.int64).reshape(-1, 3)
        self._points = self._freeze(np.unique(np.vstack([self._points, incoming]), axis=0))
        self._fingerprint = None
        return len(self._points) - before
