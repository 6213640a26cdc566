"""
Point Cloud Visualization Tools

This module provides plotly-based views of fused scanner maps.
"""

from typing import Optional, Sequence

import numpy as np
import plotly.graph_objects as go


class FusionVisualizer:
    """Renders the fused point set together with the recovered scanner positions."""

    def __init__(self, point_size: int = 3):
        self.point_size = point_size

    # ----------------- Public API -----------------
    def build_figure(
        self,
        points: np.ndarray,
        scanner_positions: Sequence[Sequence[int]],
        scanner_ids: Optional[Sequence[int]] = None,
        title: str = "Fused scanner map",
    ) -> go.Figure:
        points = np.asarray(points).reshape(-1, 3)
        positions = np.asarray(scanner_positions).reshape(-1, 3)
        if scanner_ids is None:
            scanner_ids = list(range(len(positions)))
        if len(scanner_ids) != len(positions):
            raise ValueError("The number of scanner ids must match the number of positions.")

        fig = go.Figure()
        fig.add_trace(go.Scatter3d(
            x=points[:, 0], y=points[:, 1], z=points[:, 2],
            mode='markers',
            marker=dict(size=self.point_size),
            name=f"points ({len(points)})",
        ))
        fig.add_trace(go.Scatter3d(
            x=positions[:, 0], y=positions[:, 1], z=positions[:, 2],
            mode='markers+text',
            marker=dict(size=self.point_size * 2, symbol='diamond'),
            text=[f"scanner {i}" for i in scanner_ids],
            name="scanners",
        ))
        fig.update_layout(
            title=title,
            scene=dict(aspectmode='data'),
            margin=dict(l=0, r=0, t=40, b=0),
        )
        return fig

    def show(self, points: np.ndarray, scanner_positions: Sequence[Sequence[int]],
             scanner_ids: Optional[Sequence[int]] = None):
        self.build_figure(points, scanner_positions, scanner_ids).show(renderer="browser")
