"""
Overlap Detection

Finds the axis-aligned rotation and integer translation that map a candidate
reading onto a base point set so that at least ``min_overlap`` points
coincide exactly.

Search strategy: for every rotation in the catalog, each pair
(p0 in base, p1 in rotated candidate) proposes the translation t = p0 - p1.
Shifting the rotated candidate by t and counting hits in base gives the same
number as counting how many pairs propose t, because points inside one set
are unique. All proposals of a rotation are therefore counted in a single
vectorized pass instead of re-testing the whole candidate per pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import comb
from typing import Optional

import numpy as np

from .fingerprint import Fingerprint, compute_fingerprint
from .rotations import ROTATIONS, rotate_points
from ..utils.logging import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True, eq=False)
class OverlapMatch:
    """Result of a successful overlap detection."""

    rotation_index: int
    rotation: np.ndarray
    # Position of the candidate scanner in the base frame
    translation: tuple[int, int, int]
    matched: int
    # Candidate points expressed in the base frame
    transformed: np.ndarray


class OverlapDetector:
    """
    Exact overlap search over the 24-rotation catalog.

    Args:
        min_overlap: Number of points that must coincide exactly
        min_shared_distances: Fingerprint gate threshold. Defaults to
            C(min_overlap, 2), the number of pairwise distances a minimal
            overlap is guaranteed to share.
        use_fingerprint: If False, every pair of readings goes through the
            full search. Results are identical either way.
    """

    def __init__(
        self,
        min_overlap: int = 12,
        min_shared_distances: Optional[int] = None,
        use_fingerprint: bool = True,
    ):
        if min_overlap < 2:
            raise ValueError(f"min_overlap must be at least 2, got {min_overlap}")
        if min_shared_distances is None:
            min_shared_distances = comb(min_overlap, 2)
        if min_shared_distances > comb(min_overlap, 2):
            raise ValueError(
                f"min_shared_distances={min_shared_distances} would reject overlaps of "
                f"{min_overlap} points (at most {comb(min_overlap, 2)} shared distances guaranteed)"
            )
        self.min_overlap = min_overlap
        self.min_shared_distances = min_shared_distances
        self.use_fingerprint = use_fingerprint

    def detect(
        self,
        base: np.ndarray,
        candidate: np.ndarray,
        base_fingerprint: Optional[Fingerprint] = None,
        candidate_fingerprint: Optional[Fingerprint] = None,
    ) -> Optional[OverlapMatch]:
        """
        Align ``candidate`` onto ``base``.

        Args:
            base: (N, 3) int array of unique points defining the target frame
            candidate: (M, 3) int array of unique points in their own frame
            base_fingerprint: Precomputed fingerprint of base (optional)
            candidate_fingerprint: Precomputed fingerprint of candidate (optional)

        Returns:
            OverlapMatch or None if no rotation/translation aligns enough points
        """
        base = np.asarray(base, dtype=np.int64)
        candidate = np.asarray(candidate, dtype=np.int64)

        if len(base) < self.min_overlap or len(candidate) < self.min_overlap:
            return None

        if self.use_fingerprint:
            if base_fingerprint is None:
                base_fingerprint = compute_fingerprint(base)
            if candidate_fingerprint is None:
                candidate_fingerprint = compute_fingerprint(candidate)
            shared = base_fingerprint.shared_pairs(candidate_fingerprint)
            if shared < self.min_shared_distances:
                logger.debug(
                    f"Fingerprint gate rejected candidate: {shared} shared distances "
                    f"(< {self.min_shared_distances})"
                )
                return None

        for idx, R in enumerate(ROTATIONS):
            rotated = rotate_points(R, candidate)
            proposals = (base[:, None, :] - rotated[None, :, :]).reshape(-1, 3)
            translations, counts = np.unique(proposals, axis=0, return_counts=True)
            # np.unique sorts rows, so argmax picks the lowest translation on ties
            best = int(np.argmax(counts))
            if counts[best] < self.min_overlap:
                continue

            t = translations[best]
            transformed = rotated + t
            match = OverlapMatch(
                rotation_index=idx,
                rotation=R,
                translation=(int(t[0]), int(t[1]), int(t[2])),
                matched=int(counts[best]),
                transformed=transformed,
            )
            logger.debug(
                f"Overlap found: rotation #{idx}, translation {match.translation}, "
                f"{match.matched} matching points"
            )
            return match

        return None
