"""
Axis-aligned rotation catalog.

A scanner may face any of the six axis directions and have any of four
"up" directions, which gives 24 orientations. Each orientation is a signed
permutation matrix with determinant +1; reflections are excluded. The
catalog is generated once at import time and is read-only.
"""

from __future__ import annotations

from itertools import permutations, product
from typing import Sequence, Tuple

import numpy as np


def _generate_rotations() -> Tuple[np.ndarray, ...]:
    rotations = []
    for perm in permutations(range(3)):
        for signs in product((1, -1), repeat=3):
            R = np.zeros((3, 3), dtype=np.int64)
            for row, (col, sign) in enumerate(zip(perm, signs)):
                R[row, col] = sign
            # Integer determinant of a signed permutation is exactly +/-1
            if round(np.linalg.det(R)) != 1:
                continue
            R.setflags(write=False)
            rotations.append(R)
    return tuple(rotations)


ROTATIONS: Tuple[np.ndarray, ...] = _generate_rotations()
IDENTITY_INDEX = 0


def apply_rotation(rotation: np.ndarray, point: Sequence[int]) -> Tuple[int, int, int]:
    """Rotate a single integer point."""
    x, y, z = (int(v) for v in rotation @ np.asarray(point, dtype=np.int64))
    return (x, y, z)


def rotate_points(rotation: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Rotate an (N, 3) integer array of points.

    Args:
        rotation: 3x3 matrix from ROTATIONS
        points: (N, 3) integer array

    Returns:
        (N, 3) int64 array of rotated points
    """
    points = np.asarray(points, dtype=np.int64)
    if points.size == 0:
        return points.reshape(0, 3)
    return points @ rotation.T


def rotation_index(matrix: np.ndarray) -> int:
    """Return the catalog index of a rotation matrix."""
    matrix = np.asarray(matrix)
    for i, R in enumerate(ROTATIONS):
        if np.array_equal(R, matrix):
            return i
    raise ValueError(f"Matrix is not an axis-aligned proper rotation:\n{matrix}")
