"""
Fusion Module

Drives repeated overlap detection to merge all readings into one global map
and records each scanner's position in that map.
"""

from .global_map import GlobalMap
from .position_tracker import PositionTracker, manhattan_distance, max_pairwise_manhattan
from .fusion_engine import (
    FusionEngine,
    FusionResult,
    UnresolvableConfigurationError,
    fuse_readings,
)

__all__ = [
    "GlobalMap",
    "PositionTracker",
    "manhattan_distance",
    "max_pairwise_manhattan",
    "FusionEngine",
    "FusionResult",
    "UnresolvableConfigurationError",
    "fuse_readings",
]
