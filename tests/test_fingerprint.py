"""
Tests for pairwise-distance fingerprints.
"""

from math import comb
from pathlib import Path
import sys

import numpy as np

# Ensure src is importable
sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.alignment.fingerprint import compute_fingerprint
from scanner_fusion.alignment.rotations import ROTATIONS, rotate_points


def _random_points(n: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.unique(rng.integers(-1000, 1001, size=(n, 3)), axis=0)


def test_fingerprint_counts_all_pairs():
    pts = _random_points(25, seed=0)
    fp = compute_fingerprint(pts)
    assert fp.pair_count == comb(len(pts), 2)
    assert np.all(np.diff(fp.values) > 0)


def test_known_distances():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 2, 0]])
    fp = compute_fingerprint(pts)
    assert fp.values.tolist() == [1, 4, 5]
    assert fp.counts.tolist() == [1, 1, 1]


def test_repeated_distances_are_counted():
    # Unit square: four sides of length 1, two diagonals of length sqrt(2)
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]])
    fp = compute_fingerprint(pts)
    assert fp.values.tolist() == [1, 2]
    assert fp.counts.tolist() == [4, 2]


def test_invariant_under_rotation_and_translation():
    pts = _random_points(30, seed=1)
    reference = compute_fingerprint(pts)
    rng = np.random.default_rng(2)
    for R in ROTATIONS:
        t = rng.integers(-5000, 5001, size=3)
        moved = rotate_points(R, pts) + t
        assert compute_fingerprint(moved) == reference


def test_shared_pairs_is_multiset_intersection():
    square = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]])
    line = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]])
    fp_square = compute_fingerprint(square)
    fp_line = compute_fingerprint(line)
    # line distances: 1, 1, 4 -> shares two 1s with the square
    assert fp_square.shared_pairs(fp_line) == 2
    assert fp_line.shared_pairs(fp_square) == 2


def test_shared_overlap_guarantees_gate_threshold():
    rng = np.random.default_rng(3)
    shared = _random_points(12, seed=4)
    a = np.vstack([shared, rng.integers(5000, 6000, size=(10, 3))])
    b = np.vstack([rotate_points(ROTATIONS[9], shared) + 17, rng.integers(-9000, -8000, size=(10, 3))])
    fp_a = compute_fingerprint(np.unique(a, axis=0))
    fp_b = compute_fingerprint(np.unique(b, axis=0))
    assert fp_a.shared_pairs(fp_b) >= comb(len(shared), 2)
    assert fp_a.may_overlap(fp_b, comb(len(shared), 2))


def test_small_inputs():
    assert compute_fingerprint(np.empty((0, 3), dtype=np.int64)).pair_count == 0
    assert compute_fingerprint(np.array([[1, 2, 3]])).pair_count == 0
