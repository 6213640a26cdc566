"""
Scanner position bookkeeping.
"""

from __future__ import annotations

from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Tuple

Position = Tuple[int, int, int]

ORIGIN: Position = (0, 0, 0)


def manhattan_distance(a: Sequence[int], b: Sequence[int]) -> int:
    return sum(abs(int(p) - int(q)) for p, q in zip(a, b))


def max_pairwise_manhattan(positions: Iterable[Sequence[int]]) -> int:
    """Largest Manhattan distance between any two positions (0 for fewer than two)."""
    return max((manhattan_distance(a, b) for a, b in combinations(positions, 2)), default=0)


class PositionTracker:
    """Records the resolved position of each scanner, keyed by scanner id."""

    def __init__(self):
        self._positions: Dict[int, Position] = {}

    def record(self, scanner_id: int, position: Sequence[int]) -> None:
        if scanner_id in self._positions:
            raise ValueError(f"Position of scanner {scanner_id} already recorded")
        x, y, z = (int(v) for v in position)
        self._positions[scanner_id] = (x, y, z)

    def __contains__(self, scanner_id: int) -> bool:
        return scanner_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def position(self, scanner_id: int) -> Position:
        return self._positions[scanner_id]

    def ordered(self, scanner_ids: Iterable[int]) -> List[Position]:
        """Positions in the given id order (typically input order)."""
        return [self._positions[i] for i in scanner_ids]

    @property
    def positions(self) -> Dict[int, Position]:
        """Positions in the order scanners were resolved."""
        return dict(self._positions)

    def max_manhattan_distance(self) -> int:
        """Largest Manhattan distance between any two resolved scanners (0 for fewer than two)."""
        return max_pairwise_manhattan(self._positions.values())
