"""
Tests for the axis-aligned rotation catalog.
"""

from pathlib import Path
import sys

import numpy as np
import pytest

# Ensure src is importable
sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.alignment.rotations import (
    ROTATIONS,
    apply_rotation,
    rotate_points,
    rotation_index,
)


def test_catalog_has_24_distinct_proper_rotations():
    assert len(ROTATIONS) == 24
    assert len({R.tobytes() for R in ROTATIONS}) == 24
    for R in ROTATIONS:
        assert round(np.linalg.det(R)) == 1
        # Orthogonal signed permutation
        assert np.array_equal(R @ R.T, np.eye(3, dtype=np.int64))
        assert np.array_equal(np.abs(R).sum(axis=0), np.ones(3))


def test_identity_is_first():
    assert np.array_equal(ROTATIONS[0], np.eye(3, dtype=np.int64))


def test_catalog_is_closed_under_composition():
    keys = {R.tobytes() for R in ROTATIONS}
    for A in ROTATIONS:
        for B in ROTATIONS:
            assert (A @ B).tobytes() in keys


def test_rotations_preserve_squared_norm():
    rng = np.random.default_rng(7)
    points = rng.integers(-1000, 1001, size=(50, 3))
    norms = np.einsum("ij,ij->i", points, points)
    for R in ROTATIONS:
        rotated = rotate_points(R, points)
        assert rotated.dtype == np.int64
        assert np.array_equal(np.einsum("ij,ij->i", rotated, rotated), norms)


def test_apply_rotation_matches_vectorized_form():
    point = (5, -3, 11)
    for R in ROTATIONS:
        single = apply_rotation(R, point)
        assert isinstance(single, tuple)
        assert single == tuple(rotate_points(R, np.array([point]))[0])


def test_catalog_is_read_only():
    with pytest.raises(ValueError):
        ROTATIONS[0][0, 0] = -1


def test_rotation_index_lookup():
    for i, R in enumerate(ROTATIONS):
        assert rotation_index(R.copy()) == i
    reflection = np.diag([-1, 1, 1])
    with pytest.raises(ValueError):
        rotation_index(reflection)


def test_rotate_empty_points():
    out = rotate_points(ROTATIONS[3], np.empty((0, 3), dtype=np.int64))
    assert out.shape == (0, 3)
