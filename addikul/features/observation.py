from __future__ import annotations

from functools import lru_cache
from typing import Optional

import numpy as np
import torch

from addikul.core import GameState, Player

from .symmetry import Rotation, inverse_rotation, rotate_position

# side-to-move stones, opponent stones, first-to-move flag, second-to-move flag
NUM_INPUT_CHANNELS = 4


@lru_cache(maxsize=None)
def _source_cells(rotation: Rotation, board_size: int) -> np.ndarray:
    """Board cell read for each output cell under ``rotation``."""
    reverse = inverse_rotation(rotation)
    area = board_size * board_size
    return np.array([rotate_position(pos, reverse, board_size) for pos in range(area)], dtype=np.int64)


def build_features(state: GameState, rotation: Rotation = Rotation.IDENTITY) -> np.ndarray:
    """Return the flat (channels * N * N,) float32 input for ``state``."""
    area = state.config.board_area
    cells = state.board.reshape(-1)[_source_cells(rotation, state.board_size)]
    mover = state.current_player

    features = np.zeros((NUM_INPUT_CHANNELS, area), dtype=np.float32)
    features[0] = cells == int(mover)
    features[1] = cells == int(mover.opponent)
    features[2] = 1.0 if mover == Player.FIRST else 0.0
    features[3] = 1.0 if mover == Player.SECOND else 0.0
    return features.reshape(-1)


def features_to_torch(
    features: np.ndarray,
    board_size: int,
    *,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    tensor = torch.from_numpy(np.ascontiguousarray(features, dtype=np.float32))
    tensor = tensor.reshape(-1, board_size, board_size)
    return tensor.to(device=device, dtype=dtype)


def state_to_torch(
    state: GameState,
    rotation: Rotation = Rotation.IDENTITY,
    *,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    return features_to_torch(build_features(state, rotation), state.board_size, device=device, dtype=dtype)
