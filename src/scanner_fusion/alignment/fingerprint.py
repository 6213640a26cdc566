"""
Distance Fingerprints

A fingerprint is the multiset of squared distances between every unordered
pair of points in a reading. Rotations and translations do not change it,
so two readings can only share k points if their fingerprints share at
least C(k, 2) values. The overlap detector uses this as a cheap gate before
the exhaustive rotation/translation search.

Squared distances are exact integers, so no rounding is involved.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """Sorted distinct squared distances and how often each occurs."""

    values: np.ndarray
    counts: np.ndarray

    @property
    def pair_count(self) -> int:
        return int(self.counts.sum())

    def shared_pairs(self, other: "Fingerprint") -> int:
        """Size of the multiset intersection with another fingerprint."""
        _, idx_self, idx_other = np.intersect1d(
            self.values, other.values, assume_unique=True, return_indices=True
        )
        if idx_self.size == 0:
            return 0
        return int(np.minimum(self.counts[idx_self], other.counts[idx_other]).sum())

    def may_overlap(self, other: "Fingerprint", min_shared: int) -> bool:
        return self.shared_pairs(other) >= min_shared

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return np.array_equal(self.values, other.values) and np.array_equal(self.counts, other.counts)

    def __hash__(self) -> int:
        return hash((self.values.tobytes(), self.counts.tobytes()))


def compute_fingerprint(points: np.ndarray) -> Fingerprint:
    """
    Compute the pairwise squared-distance fingerprint of a point set.

    Args:
        points: (N, 3) integer array of unique points

    Returns:
        Fingerprint over the N*(N-1)/2 unordered pairs
    """
    points = np.asarray(points, dtype=np.int64)
    n = len(points)
    if n < 2:
        empty = np.empty(0, dtype=np.int64)
        return Fingerprint(values=empty, counts=empty.copy())

    i, j = np.triu_indices(n, k=1)
    diff = points[i] - points[j]
    d2 = np.einsum("ij,ij->i", diff, diff)
    values, counts = np.unique(d2, return_counts=True)
    return Fingerprint(values=values, counts=counts.astype(np.int64))
