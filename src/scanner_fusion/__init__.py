"""
Scanner Fusion Package

A Python package for registering and fusing integer point-cloud readings
taken by scanners with unknown axis-aligned orientations and offsets.
Overlapping readings are aligned by an exact search over the 24 proper
axis-aligned rotations, pruned by pairwise-distance fingerprints, and
merged into a single global map while each scanner's position is recovered.
"""

__version__ = "0.1.0"

from .alignment import *
from .fusion import *
from .preprocessing import *
from .utils import *
from .acceleration import *
from .visualization import *

__all__ = [
    "alignment",
    "fusion",
    "preprocessing",
    "utils",
    "acceleration",
    "visualization",
]
