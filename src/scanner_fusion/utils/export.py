"""
Export utilities for fusion results.

Provides functions to export:
- The fused point set as CSV (x,y,z per line)
- A JSON summary with point count, scanner positions and max distance
"""

import json
from pathlib import Path
from typing import Any, Dict, TYPE_CHECKING

import numpy as np

from .logging import setup_logger

if TYPE_CHECKING:
    from ..fusion.fusion_engine import FusionResult

logger = setup_logger(__name__)


def export_points_to_csv(points: np.ndarray, output_path: str | Path) -> Path:
    """
    Write integer points to a CSV file with an x,y,z header.

    Args:
        points: (N, 3) integer array
        output_path: Destination file; parent directories are created

    Returns:
        Path of the written file
    """
    points = np.asarray(points, dtype=np.int64).reshape(-1, 3)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(output_path, points, fmt="%d", delimiter=",", header="x,y,z", comments="")
    logger.info(f"Exported {len(points)} points to {output_path}")
    return output_path


def fusion_summary(result: "FusionResult") -> Dict[str, Any]:
    return {
        "point_count": result.point_count,
        "max_manhattan_distance": result.max_manhattan_distance(),
        "passes": result.passes,
        "scanners": [
            {"scanner_id": sid, "position": list(pos)}
            for sid, pos in zip(result.scanner_ids, result.positions)
        ],
    }


def export_fusion_summary(result: "FusionResult", output_path: str | Path) -> Path:
    """
    Write a JSON summary of a fusion result.

    Args:
        result: FusionResult from FusionEngine.fuse
        output_path: Destination JSON file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(fusion_summary(result), f, indent=2)
    logger.info(f"Exported fusion summary to {output_path}")
    return output_path
