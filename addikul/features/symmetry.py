from __future__ import annotations

from enum import Enum, auto
from functools import lru_cache
from typing import Callable, Dict, Iterable

import numpy as np

from addikul.core import ActionEncoding, RulesConfig, decode_action, encode_action, rotate_index_180


class Rotation(Enum):
    IDENTITY = auto()
    ROT180 = auto()


def _identity(index: int, board_size: int) -> int:
    return index


_POSITION_FNS: Dict[Rotation, Callable[[int, int], int]] = {
    Rotation.IDENTITY: _identity,
    Rotation.ROT180: rotate_index_180,
}

_INVERSES: Dict[Rotation, Rotation] = {
    Rotation.IDENTITY: Rotation.IDENTITY,
    Rotation.ROT180: Rotation.ROT180,
}


def all_rotations() -> Iterable[Rotation]:
    return list(_POSITION_FNS.keys())


def inverse_rotation(rotation: Rotation) -> Rotation:
    return _INVERSES[rotation]


def rotate_position(index: int, rotation: Rotation, board_size: int) -> int:
    if not 0 <= index < board_size * board_size:
        raise ValueError(f"Cell index {index} out of range.")
    return _POSITION_FNS[rotation](index, board_size)


def rotate_action_id(action_id: int, rotation: Rotation, config: RulesConfig) -> int:
    """Rotate both endpoints of a move; the pass id is a fixed point."""
    if action_id == config.pass_action_id:
        return action_id
    origin, destination = decode_action(action_id, config.board_size)
    return encode_action(
        rotate_position(origin, rotation, config.board_size),
        rotate_position(destination, rotation, config.board_size),
        config.board_size,
    )


def action_feature_size(config: RulesConfig) -> int:
    if config.action_encoding == ActionEncoding.SPLIT:
        return 2 * config.board_area
    return config.policy_size


def build_action_features(action_id: int, rotation: Rotation, config: RulesConfig) -> np.ndarray:
    """One-hot policy target for ``action_id`` seen under ``rotation``.

    JOINT encoding sets a single entry of the full policy vector. SPLIT
    encoding emits an origin plane followed by a destination plane, and a
    pass has no cells so it leaves both planes empty.
    """
    features = np.zeros((action_feature_size(config),), dtype=np.float32)
    rotated = rotate_action_id(action_id, rotation, config)
    if config.action_encoding == ActionEncoding.JOINT:
        features[rotated] = 1.0
        return features
    if rotated == config.pass_action_id:
        return features
    origin, destination = decode_action(rotated, config.board_size)
    features[origin] = 1.0
    features[config.board_area + destination] = 1.0
    return features


@lru_cache(maxsize=None)
def _policy_permutation_cached(rotation: Rotation, config: RulesConfig) -> np.ndarray:
    perm = np.zeros(config.policy_size, dtype=np.int32)
    for idx in range(config.policy_size):
        perm[rotate_action_id(idx, rotation, config)] = idx
    return perm


def policy_permutation(rotation: Rotation, config: RulesConfig) -> np.ndarray:
    """Return permutation array P such that new_policy = old_policy[P]."""
    return _policy_permutation_cached(rotation, config)


def apply_policy_rotation(policy: np.ndarray, rotation: Rotation, config: RulesConfig) -> np.ndarray:
    return policy[policy_permutation(rotation, config)]
