"""
Spatial Alignment Module

This module provides the exact registration primitives used to align
scanner readings: the rotation catalog, distance fingerprints used for
pruning, and the overlap detector.
"""

from .rotations import ROTATIONS, apply_rotation, rotate_points, rotation_index
from .fingerprint import Fingerprint, compute_fingerprint
from .overlap_detection import OverlapDetector, OverlapMatch

__all__ = [
    "ROTATIONS",
    "apply_rotation",
    "rotate_points",
    "rotation_index",
    "Fingerprint",
    "compute_fingerprint",
    "OverlapDetector",
    "OverlapMatch",
]
