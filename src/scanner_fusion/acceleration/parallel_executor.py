"""
Process pool for the detection step of a fusion pass.

ReadingParallelExecutor aligns a batch of unresolved readings against one
map snapshot. The snapshot travels to each worker once (pool initializer),
readings are distributed one per task, and matches come back in input order.
Merging stays with the caller.
"""

from __future__ import annotations

import logging
import time
from multiprocessing import Pool, cpu_count
from typing import List, Optional, Sequence, TYPE_CHECKING

from .reading_workers import MapSnapshot, detect_reading_overlap, install_snapshot

if TYPE_CHECKING:
    from ..alignment.overlap_detection import OverlapMatch
    from ..preprocessing.loader import ScannerReading

logger = logging.getLogger(__name__)


class ReadingParallelExecutor:
    """
    Runs overlap detection for many readings against a shared snapshot.

    Example:
        executor = ReadingParallelExecutor(n_workers=4)
        snapshot = MapSnapshot(global_map.points, global_map.fingerprint, detector)
        matches = executor.detect_overlaps(unresolved, snapshot)

    Args:
        n_workers: Worker processes. None uses cpu_count - 1, minimum 1.
    """

    def __init__(self, n_workers: Optional[int] = None):
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        self.n_workers = max(1, int(n_workers))
        logger.info(
            f"Initialized ReadingParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    def detect_overlaps(
        self,
        readings: Sequence["ScannerReading"],
        snapshot: MapSnapshot,
    ) -> List[Optional["OverlapMatch"]]:
        """
        Detect each reading against ``snapshot``.

        Returns:
            One OverlapMatch or None per reading, in input order

        Raises:
            RuntimeError: If detection fails for any reading
        """
        readings = list(readings)
        if not readings:
            return []

        start_time = time.time()
        if self.n_workers == 1 or len(readings) == 1:
            logger.debug("Detecting in-process (1 worker or 1 reading)")
            matches = self._detect_in_process(readings, snapshot)
        else:
            matches = self._detect_in_pool(readings, snapshot)

        logger.debug(
            f"Detection complete: {len(readings)} readings in {time.time() - start_time:.2f}s, "
            f"{sum(m is not None for m in matches)} aligned"
        )
        return matches

    def _detect_in_process(
        self,
        readings: List["ScannerReading"],
        snapshot: MapSnapshot,
    ) -> List[Optional["OverlapMatch"]]:
        install_snapshot(snapshot)
        try:
            matches = []
            for reading in readings:
                try:
                    matches.append(detect_reading_overlap(reading))
                except Exception as e:
                    logger.error(f"Detection failed for scanner {reading.scanner_id}: {e}", exc_info=True)
                    raise RuntimeError(f"Reading processing failed: {e}") from e
            return matches
        finally:
            install_snapshot(None)

    def _detect_in_pool(
        self,
        readings: List["ScannerReading"],
        snapshot: MapSnapshot,
    ) -> List[Optional["OverlapMatch"]]:
        n_processes = min(self.n_workers, len(readings))
        try:
            with Pool(processes=n_processes, initializer=install_snapshot, initargs=(snapshot,)) as pool:
                # imap keeps input order; chunksize 1 balances uneven readings
                return list(pool.imap(detect_reading_overlap, readings, chunksize=1))
        except Exception as e:
            logger.error(f"Parallel detection failed: {e}", exc_info=True)
            raise RuntimeError(f"Parallel reading processing failed: {e}") from e
