"""
Unit tests for the per-reading parallel executor.
"""

from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.acceleration import (
    MapSnapshot,
    ReadingParallelExecutor,
    detect_reading_overlap,
    install_snapshot,
)
from scanner_fusion.acceleration.reading_workers import current_snapshot
from scanner_fusion.alignment.fingerprint import compute_fingerprint
from scanner_fusion.alignment.overlap_detection import OverlapDetector
from scanner_fusion.preprocessing.loader import ScannerReportLoader

DATA_FILE = Path(__file__).parent / "data" / "canonical_scanners.txt"


@pytest.fixture(scope="module")
def readings():
    return ScannerReportLoader().load(DATA_FILE)


def _snapshot(points, detector=None):
    detector = detector if detector is not None else OverlapDetector()
    fingerprint = compute_fingerprint(points) if detector.use_fingerprint else None
    return MapSnapshot(points=points, fingerprint=fingerprint, detector=detector)


def _broken_snapshot():
    # 2D points cannot be aligned with 3D readings
    return MapSnapshot(
        points=np.zeros((20, 2), dtype=np.int64),
        fingerprint=None,
        detector=OverlapDetector(use_fingerprint=False),
    )


class TestReadingParallelExecutor:

    def test_executor_initialization(self):
        assert ReadingParallelExecutor().n_workers >= 1
        assert ReadingParallelExecutor(n_workers=4).n_workers == 4
        # Minimum workers (should be at least 1)
        assert ReadingParallelExecutor(n_workers=0).n_workers == 1

    def test_empty_input(self, readings):
        executor = ReadingParallelExecutor(n_workers=2)
        assert executor.detect_overlaps([], _snapshot(readings[0].points)) == []

    @pytest.mark.parametrize("n_workers", [1, 2])
    def test_matches_in_input_order(self, readings, n_workers):
        executor = ReadingParallelExecutor(n_workers=n_workers)
        matches = executor.detect_overlaps(readings[1:], _snapshot(readings[0].points))

        # Only scanner 1 overlaps scanner 0 directly
        assert len(matches) == 4
        assert matches[0] is not None
        assert matches[0].translation == (68, -1246, -43)
        assert all(m is None for m in matches[1:])

    def test_in_process_detection_clears_snapshot(self, readings):
        executor = ReadingParallelExecutor(n_workers=1)
        executor.detect_overlaps(readings[1:3], _snapshot(readings[0].points))
        assert current_snapshot() is None

    def test_in_process_error_propagates(self, readings):
        executor = ReadingParallelExecutor(n_workers=1)
        with pytest.raises(RuntimeError, match="Reading processing failed"):
            executor.detect_overlaps(readings[1:3], _broken_snapshot())
        assert current_snapshot() is None

    def test_pool_error_propagates(self, readings):
        executor = ReadingParallelExecutor(n_workers=2)
        with pytest.raises(RuntimeError, match="Parallel reading processing failed"):
            executor.detect_overlaps(readings[1:4], _broken_snapshot())


def test_worker_requires_installed_snapshot(readings):
    install_snapshot(None)
    with pytest.raises(RuntimeError, match="No map snapshot"):
        detect_reading_overlap(readings[1])


def test_worker_reads_installed_snapshot(readings):
    base = readings[0].points
    install_snapshot(_snapshot(base))
    try:
        gated = detect_reading_overlap(readings[1])
        install_snapshot(_snapshot(base, OverlapDetector(use_fingerprint=False)))
        exhaustive = detect_reading_overlap(readings[1])
    finally:
        install_snapshot(None)

    assert gated.translation == (68, -1246, -43)
    assert np.array_equal(exhaustive.transformed, gated.transformed)
