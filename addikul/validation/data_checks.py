from __future__ import annotations

from typing import Optional

import numpy as np

from addikul.core import ActionEncoding, RulesConfig


class ReplayDataError(ValueError):
    pass


def validate_batch(
    action_targets: np.ndarray,
    values: np.ndarray,
    config: RulesConfig,
    features: Optional[np.ndarray] = None,
) -> None:
    if features is not None and not np.isfinite(features).all():
        raise ReplayDataError("features contain non-finite values")
    if not np.isfinite(action_targets).all():
        raise ReplayDataError("action targets contain non-finite values")
    if not np.isfinite(values).all():
        raise ReplayDataError("values contain non-finite values")
    if (values < -1.0).any() or (values > 1.0).any():
        raise ReplayDataError("values out of [-1,1] range")
    if (action_targets < 0).any():
        raise ReplayDataError("action targets contain negative entries")

    if config.action_encoding == ActionEncoding.JOINT:
        if not np.allclose(action_targets.sum(axis=-1), 1.0):
            raise ReplayDataError("joint action targets must be one-hot")
        return

    # origin plane then destination plane; a pass leaves both empty
    area = config.board_area
    origins = action_targets[..., :area].sum(axis=-1)
    destinations = action_targets[..., area:].sum(axis=-1)
    marked = np.isclose(origins, 1.0) & np.isclose(destinations, 1.0)
    empty = np.isclose(origins, 0.0) & np.isclose(destinations, 0.0)
    if not np.all(marked | empty):
        raise ReplayDataError("split action targets must mark one origin and one destination")
