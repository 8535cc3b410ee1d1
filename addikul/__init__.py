"""AddiKul rules engine and feature encoders."""

from . import core, env, features, replay, validation
from .core import (
    Action,
    ActionEncoding,
    GameState,
    NoMovePolicy,
    Player,
    RulesConfig,
)
from .env import AddiKulEnv, AddiKulGymEnv
from .features import (
    NUM_INPUT_CHANNELS,
    Rotation,
    all_rotations,
    apply_policy_rotation,
    build_action_features,
    build_features,
    features_to_torch,
    policy_permutation,
    rotate_action_id,
    state_to_torch,
)
from .replay import GameRecord, GameRecordLoader
from .validation import ReplayDataError, validate_batch

__all__ = [
    "core",
    "env",
    "features",
    "replay",
    "validation",
    "Action",
    "ActionEncoding",
    "GameState",
    "NoMovePolicy",
    "Player",
    "RulesConfig",
    "AddiKulEnv",
    "AddiKulGymEnv",
    "NUM_INPUT_CHANNELS",
    "Rotation",
    "all_rotations",
    "apply_policy_rotation",
    "build_action_features",
    "build_features",
    "features_to_torch",
    "policy_permutation",
    "rotate_action_id",
    "state_to_torch",
    "GameRecord",
    "GameRecordLoader",
    "ReplayDataError",
    "validate_batch",
]
