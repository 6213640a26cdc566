"""
Tests for the plotly view of a fused map (figure construction only).
"""

from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.visualization import FusionVisualizer


def test_build_figure_has_points_and_scanners():
    points = np.array([[0, 0, 0], [1, 2, 3], [-4, 5, 6]])
    positions = [(0, 0, 0), (68, -1246, -43)]

    fig = FusionVisualizer(point_size=2).build_figure(points, positions, scanner_ids=[0, 1])

    assert len(fig.data) == 2
    assert list(fig.data[0].x) == [0, 1, -4]
    assert list(fig.data[1].text) == ["scanner 0", "scanner 1"]


def test_mismatched_ids_rejected():
    with pytest.raises(ValueError):
        FusionVisualizer().build_figure(np.zeros((1, 3)), [(0, 0, 0)], scanner_ids=[0, 1])
