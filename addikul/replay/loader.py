from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from addikul.core import Action, RulesConfig, parse_action
from addikul.features import Rotation, build_action_features, rotate_action_id
from addikul.validation import ReplayDataError, validate_batch

logger = logging.getLogger(__name__)

RecordedAction = Union[Action, int, str, Sequence[str]]


@dataclass
class GameRecord:
    actions: List[Action] = field(default_factory=list)
    result: float = 0.0  # first player's perspective


class GameRecordLoader:
    """Training targets rebuilt from the action sequence of a finished game.

    Recorded moves are trusted as played; they are never replayed through
    the rules. Positions past the end of the record return an arbitrary
    action target so fixed-length batches can be padded. Those targets
    carry no meaning and the consumer is expected to mask them out.
    """

    def __init__(self, config: Optional[RulesConfig] = None, *, seed: Optional[int] = None) -> None:
        self.config = config or RulesConfig()
        self.rng = np.random.default_rng(seed)
        self._record = GameRecord()

    def __len__(self) -> int:
        return len(self._record.actions)

    @property
    def actions(self) -> List[Action]:
        return list(self._record.actions)

    def load(self, actions: Iterable[RecordedAction], result: float = 0.0) -> None:
        parsed = [self._coerce(action) for action in actions]
        for index, action in enumerate(parsed):
            if not 0 <= action.action_id < self.config.policy_size:
                raise ReplayDataError(f"Recorded action {index} has invalid id {action.action_id}.")
        if not -1.0 <= result <= 1.0:
            raise ReplayDataError(f"Game result {result} out of [-1,1] range.")
        self._record = GameRecord(actions=parsed, result=float(result))

    def load_record(self, record: GameRecord) -> None:
        self.load(record.actions, record.result)

    def get_action(self, pos: int) -> Optional[Action]:
        if 0 <= pos < len(self):
            return self._record.actions[pos]
        return None

    def get_action_features(self, pos: int, rotation: Rotation = Rotation.IDENTITY) -> np.ndarray:
        if 0 <= pos < len(self):
            action_id = self._record.actions[pos].action_id
        else:
            action_id = int(self.rng.integers(0, self.config.move_action_count))
            logger.debug("Padding target for position %d (record length %d)", pos, len(self))
        return build_action_features(action_id, rotation, self.config)

    def get_value(self, pos: int) -> np.ndarray:
        return np.array([self.get_return()], dtype=np.float32)

    def get_return(self) -> float:
        return self._record.result

    def get_rotate_action(self, action_id: int, rotation: Rotation) -> int:
        return rotate_action_id(action_id, rotation, self.config)

    def build_targets(
        self,
        positions: Sequence[int],
        rotation: Rotation = Rotation.IDENTITY,
    ) -> Tuple[np.ndarray, np.ndarray]:
        targets = np.stack([self.get_action_features(pos, rotation) for pos in positions], axis=0)
        values = np.concatenate([self.get_value(pos) for pos in positions]).astype(np.float32)
        validate_batch(targets, values, self.config)
        return targets, values

    def _coerce(self, action: RecordedAction) -> Action:
        if isinstance(action, Action):
            return action
        if isinstance(action, (int, np.integer)):
            return Action(int(action))
        return parse_action(action, self.config)
