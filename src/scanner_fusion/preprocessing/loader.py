"""
Scanner Report Loader

This module handles loading and validation of scanner readings.

A scanner report is plain text made of blocks like::

    --- scanner 0 ---
    404,-588,-901
    528,-643,409
    ...

with blocks separated by blank lines. Each block becomes one
ScannerReading whose points are expressed in that scanner's own frame.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_HEADER_RE = re.compile(r"^---\s*scanner\s+(-?\d+)\s*---$")
_POINT_RE = re.compile(r"^(-?\d+)\s*,\s*(-?\d+)\s*,\s*(-?\d+)$")
_INT64_MAX = np.iinfo(np.int64).max


@dataclass(frozen=True, eq=False)
class ScannerReading:
    """
    One scanner's observation: a set of unique integer points.

    Points are de-duplicated and sorted on construction, so two readings
    with the same point set compare equal regardless of input order.
    """

    scanner_id: int
    points: np.ndarray = field(repr=False)

    def __post_init__(self):
        pts = np.asarray(self.points)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(
                f"Scanner {self.scanner_id}: expected an (N, 3) array of points, got shape {pts.shape}"
            )
        if len(pts) == 0:
            raise ValueError(f"Scanner {self.scanner_id}: reading contains no points")
        if np.issubdtype(pts.dtype, np.bool_) or not (
            np.issubdtype(pts.dtype, np.integer) or np.issubdtype(pts.dtype, np.floating)
        ):
            raise ValueError(
                f"Scanner {self.scanner_id}: coordinates must be integers, got dtype {pts.dtype}"
            )
        if np.issubdtype(pts.dtype, np.floating):
            if not np.all(np.isfinite(pts)) or not np.all(np.mod(pts, 1) == 0):
                raise ValueError(f"Scanner {self.scanner_id}: coordinates must be integers")
            # 2**63 itself is the first float past the int64 range
            out_of_range = not np.all(np.abs(pts) < 2.0 ** 63)
        else:
            out_of_range = np.issubdtype(pts.dtype, np.unsignedinteger) and bool(
                pts.max() > np.uint64(_INT64_MAX)
            )
        if out_of_range:
            raise ValueError(f"Scanner {self.scanner_id}: coordinates exceed the 64-bit integer range")
        pts = np.unique(pts.astype(np.int64), axis=0)
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return len(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScannerReading):
            return NotImplemented
        return self.scanner_id == other.scanner_id and np.array_equal(self.points, other.points)

    def __hash__(self) -> int:
        return hash((self.scanner_id, self.points.tobytes()))


def readings_from_arrays(point_sets: Sequence[np.ndarray]) -> List[ScannerReading]:
    """Wrap raw point arrays as readings numbered in input order."""
    return [ScannerReading(scanner_id=i, points=pts) for i, pts in enumerate(point_sets)]


def parse_scanner_report(text: str) -> List[ScannerReading]:
    """
    Parse a scanner report into readings, preserving block order.

    Args:
        text: Report contents

    Returns:
        List of ScannerReading in the order they appear

    Raises:
        ValueError: On a missing header, malformed coordinate line,
            duplicate scanner id or empty block
    """
    blocks: List[tuple[int, List[tuple[int, int, int]]]] = []
    seen_ids = set()

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        header = _HEADER_RE.match(line)
        if header:
            scanner_id = int(header.group(1))
            if scanner_id in seen_ids:
                raise ValueError(f"Line {lineno}: duplicate scanner id {scanner_id}")
            seen_ids.add(scanner_id)
            blocks.append((scanner_id, []))
            continue

        point = _POINT_RE.match(line)
        if point is None:
            raise ValueError(f"Line {lineno}: cannot parse '{line}' as a scanner header or x,y,z point")
        if not blocks:
            raise ValueError(f"Line {lineno}: point found before any '--- scanner N ---' header")
        x, y, z = (int(v) for v in point.groups())
        if max(abs(x), abs(y), abs(z)) > _INT64_MAX:
            raise ValueError(f"Line {lineno}: coordinate outside the 64-bit integer range in '{line}'")
        blocks[-1][1].append((x, y, z))

    readings = []
    for scanner_id, pts in blocks:
        readings.append(ScannerReading(scanner_id=scanner_id, points=np.array(pts, dtype=np.int64).reshape(-1, 3)))
    return readings


class ScannerReportLoader:
    """
    Loads scanner readings from report files.

    Features:
    - Parsing of '--- scanner N ---' blocks
    - Validation (headers, coordinates, duplicate ids, empty readings)
    - Basic statistics logging
    """

    def __init__(self, *, min_points: int = 1):
        """
        Args:
            min_points: Readings with fewer points are rejected
        """
        self.min_points = min_points

    def load(self, file_path: str | Path) -> List[ScannerReading]:
        """
        Load a scanner report.

        Args:
            file_path: Path to the report

        Returns:
            List of ScannerReading in file order

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the report is malformed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading scanner report from {file_path}")
        try:
            readings = parse_scanner_report(file_path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise ValueError(f"Malformed scanner report {file_path}: {e}") from e

        if not readings:
            raise ValueError(f"Scanner report {file_path} contains no readings")

        for reading in readings:
            if len(reading) < self.min_points:
                raise ValueError(
                    f"Scanner {reading.scanner_id} has {len(reading)} points (< {self.min_points})"
                )

        total = sum(len(r) for r in readings)
        logger.info(f"Loaded {len(readings)} readings with {total} points in total")
        return readings
