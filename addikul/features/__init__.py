"""Feature extraction helpers for AddiKul."""

from .observation import (
    NUM_INPUT_CHANNELS,
    build_features,
    features_to_torch,
    state_to_torch,
)
from .symmetry import (
    Rotation,
    action_feature_size,
    all_rotations,
    apply_policy_rotation,
    build_action_features,
    inverse_rotation,
    policy_permutation,
    rotate_action_id,
    rotate_position,
)

__all__ = [
    "NUM_INPUT_CHANNELS",
    "build_features",
    "features_to_torch",
    "state_to_torch",
    "Rotation",
    "action_feature_size",
    "all_rotations",
    "apply_policy_rotation",
    "build_action_features",
    "inverse_rotation",
    "policy_permutation",
    "rotate_action_id",
    "rotate_position",
]
