"""
Visualization Module

This module provides visualization of fused maps using Plotly.
"""

from .point_cloud import FusionVisualizer

__all__ = [
    "FusionVisualizer",
]
