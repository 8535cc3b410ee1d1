from __future__ import annotations

from collections import Counter
from typing import Dict

import numpy as np


def state_key(board: np.ndarray, side_to_move: int) -> bytes:
    """Canonical serialisation of (side to move, board occupancy)."""
    cells = np.ascontiguousarray(board, dtype=np.int8)
    return bytes((int(side_to_move),)) + cells.tobytes()


class RepetitionTable:
    """Occurrence count per position key for a single game."""

    def __init__(self) -> None:
        self._counts: Counter[bytes] = Counter()

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: bytes) -> bool:
        return key in self._counts

    def record(self, key: bytes) -> int:
        self._counts[key] += 1
        return self._counts[key]

    def count(self, key: bytes) -> int:
        return self._counts.get(key, 0)

    def clear(self) -> None:
        self._counts.clear()

    def copy(self) -> "RepetitionTable":
        table = RepetitionTable()
        table._counts = Counter(self._counts)
        return table

    def as_dict(self) -> Dict[bytes, int]:
        return dict(self._counts)
