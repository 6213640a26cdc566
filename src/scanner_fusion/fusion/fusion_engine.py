"""
Fusion Engine

Merges scanner readings into a single global map.

The first reading defines the reference frame and sits at the origin. Every
fusion pass tries to align each unresolved reading onto the whole map built
so far; a reading that aligns is transformed, merged and its scanner
position recorded. Readings connected only through other readings resolve
in later passes once the map has grown. A pass without any merge while
readings remain means the input is disconnected, which is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..acceleration.parallel_executor import ReadingParallelExecutor
from ..acceleration.reading_workers import MapSnapshot
from ..alignment.fingerprint import Fingerprint, compute_fingerprint
from ..alignment.overlap_detection import OverlapDetector, OverlapMatch
from ..preprocessing.loader import ScannerReading
from ..utils.config import AppConfig
from ..utils.logging import setup_logger
from .global_map import GlobalMap
from .position_tracker import ORIGIN, Position, PositionTracker, max_pairwise_manhattan

logger = setup_logger(__name__)


class UnresolvableConfigurationError(RuntimeError):
    """Raised when some readings cannot be aligned to the global map."""

    def __init__(self, unresolved_ids: Sequence[int], passes: int):
        self.unresolved_ids = list(unresolved_ids)
        self.passes = passes
        super().__init__(
            f"Fusion stalled after {passes} passes: scanners {self.unresolved_ids} "
            f"share no sufficient overlap with the fused map"
        )


@dataclass
class FusionResult:
    """Fused map and scanner positions, in input reading order."""

    points: np.ndarray
    scanner_ids: List[int]
    positions: List[Position]
    passes: int
    pass_point_counts: List[int] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.points)

    def position_of(self, scanner_id: int) -> Position:
        return self.positions[self.scanner_ids.index(scanner_id)]

    def max_manhattan_distance(self) -> int:
        return max_pairwise_manhattan(self.positions)


class FusionEngine:
    """
    Drives fusion passes until every reading is merged.

    Args:
        detector: Overlap detector (default: 12-point overlap with fingerprint gate)
        parallel: Detect overlaps of a pass in worker processes against a
            snapshot of the map, then merge serially in input order
        n_workers: Worker processes for parallel mode (None = cpu_count - 1)
    """

    def __init__(
        self,
        detector: Optional[OverlapDetector] = None,
        *,
        parallel: bool = False,
        n_workers: Optional[int] = None,
    ):
        self.detector = detector if detector is not None else OverlapDetector()
        self.parallel = parallel
        self.executor = ReadingParallelExecutor(n_workers=n_workers) if parallel else None
        # Keyed by id and points; the same id may carry other points across runs
        self._fingerprints: Dict[ScannerReading, Fingerprint] = {}

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "FusionEngine":
        detector = OverlapDetector(
            min_overlap=cfg.fusion.min_overlap,
            min_shared_distances=cfg.fusion.gate_threshold,
            use_fingerprint=cfg.fusion.use_fingerprint,
        )
        return cls(detector, parallel=cfg.parallel.enabled, n_workers=cfg.parallel.n_workers)

    def fuse(self, readings: Sequence[ScannerReading]) -> FusionResult:
        """
        Fuse readings into one global map.

        Args:
            readings: Readings in input order; the first fixes the reference frame

        Returns:
            FusionResult

        Raises:
            ValueError: If there are no readings or scanner ids repeat
            UnresolvableConfigurationError: If a pass merges nothing while
                readings remain unresolved
        """
        if not readings:
            raise ValueError("At least one scanner reading is required")
        scanner_ids = [r.scanner_id for r in readings]
        if len(set(scanner_ids)) != len(scanner_ids):
            raise ValueError(f"Scanner ids must be unique, got {scanner_ids}")

        self._fingerprints.clear()
        reference = readings[0]
        global_map = GlobalMap(reference.points)
        tracker = PositionTracker()
        tracker.record(reference.scanner_id, ORIGIN)

        unresolved = list(readings[1:])
        pass_point_counts: List[int] = []
        passes = 0

        logger.info(
            f"Fusing {len(readings)} readings "
            f"(reference scanner {reference.scanner_id}, {len(global_map)} points)"
        )

        while unresolved:
            passes += 1
            remaining = self.run_pass(global_map, unresolved, tracker)
            pass_point_counts.append(len(global_map))
            merged = len(unresolved) - len(remaining)
            logger.info(
                f"Pass {passes}: merged {merged} readings, {len(remaining)} unresolved, "
                f"global map has {len(global_map)} points"
            )
            if merged == 0:
                error = UnresolvableConfigurationError([r.scanner_id for r in remaining], passes)
                logger.error(str(error))
                raise error
            unresolved = remaining

        result = FusionResult(
            points=global_map.points,
            scanner_ids=scanner_ids,
            positions=tracker.ordered(scanner_ids),
            passes=passes,
            pass_point_counts=pass_point_counts,
        )
        logger.info(
            f"Fusion complete: {result.point_count} distinct points from {len(readings)} readings "
            f"in {passes} passes"
        )
        return result

    def run_pass(
        self,
        global_map: GlobalMap,
        unresolved: Sequence[ScannerReading],
        tracker: PositionTracker,
    ) -> List[ScannerReading]:
        """
        Run one fusion pass, mutating ``global_map`` and ``tracker``.

        Returns:
            Readings that are still unresolved after the pass
        """
        if self.parallel:
            return self._run_pass_parallel(global_map, unresolved, tracker)

        remaining = []
        for reading in unresolved:
            match = self.detector.detect(
                global_map.points,
                reading.points,
                base_fingerprint=global_map.fingerprint if self.detector.use_fingerprint else None,
                candidate_fingerprint=self._fingerprint(reading),
            )
            if match is None:
                remaining.append(reading)
                continue
            self._merge(global_map, tracker, reading, match)
        return remaining

    def _run_pass_parallel(
        self,
        global_map: GlobalMap,
        unresolved: Sequence[ScannerReading],
        tracker: PositionTracker,
    ) -> List[ScannerReading]:
        # Workers see one immutable snapshot; merges happen here afterwards
        snapshot = MapSnapshot(
            points=global_map.points,
            fingerprint=global_map.fingerprint if self.detector.use_fingerprint else None,
            detector=self.detector,
        )
        matches = self.executor.detect_overlaps(unresolved, snapshot)
        remaining = []
        for reading, match in zip(unresolved, matches):
            if match is None:
                remaining.append(reading)
            else:
                self._merge(global_map, tracker, reading, match)
        return remaining

    def _fingerprint(self, reading: ScannerReading) -> Optional[Fingerprint]:
        if not self.detector.use_fingerprint:
            return None
        fp = self._fingerprints.get(reading)
        if fp is None:
            fp = compute_fingerprint(reading.points)
            self._fingerprints[reading] = fp
        return fp

    def _merge(
        self,
        global_map: GlobalMap,
        tracker: PositionTracker,
        reading: ScannerReading,
        match: OverlapMatch,
    ) -> None:
        added = global_map.merge(match.transformed)
        tracker.record(reading.scanner_id, match.translation)
        logger.info(
            f"Merged scanner {reading.scanner_id} at {match.translation} "
            f"(rotation #{match.rotation_index}, {match.matched} shared, {added} new points)"
        )


def fuse_readings(readings: Sequence[ScannerReading], cfg: Optional[AppConfig] = None) -> FusionResult:
    """Fuse readings with an engine built from configuration (defaults if None)."""
    return FusionEngine.from_config(cfg if cfg is not None else AppConfig()).fuse(readings)
