from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from addikul.core import (
    Action,
    GameState,
    Outcome,
    Player,
    RulesConfig,
    action_to_string,
    apply_action,
    enumerate_legal_actions,
    evaluate_outcome,
    initialize_game_state,
    is_legal_action,
    parse_action,
    score_for_winner,
    validate_action,
)
from addikul.core.notation import column_letter
from addikul.features import (
    NUM_INPUT_CHANNELS,
    Rotation,
    action_feature_size,
    build_action_features,
    build_features,
    rotate_action_id,
    rotate_position,
)

logger = logging.getLogger(__name__)

ActionLike = Union[Action, int, str, Sequence[str]]

_GLYPHS = {Player.NONE: " . ", Player.FIRST: " O ", Player.SECOND: " X "}


class AddiKulEnv:
    """Synchronous game instance consumed by search and training code.

    Every query leaves the game untouched and no entry point raises on a
    bad action: rejected moves report ``False`` and the state stays as it
    was. One instance must not be shared between threads.
    """

    name = "addikul"
    num_players = 2
    num_input_channels = NUM_INPUT_CHANNELS

    def __init__(self, config: Optional[RulesConfig] = None) -> None:
        self.config = config or RulesConfig()
        self._state = initialize_game_state(self.config)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board_size(self) -> int:
        return self.config.board_size

    @property
    def policy_size(self) -> int:
        return self.config.policy_size

    @property
    def turn(self) -> Player:
        return self._state.current_player

    @property
    def actions(self) -> List[Action]:
        return list(self._state.history)

    # ------------------------------------------------------------------
    # Game flow
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._state = initialize_game_state(self.config)

    def act(self, action: ActionLike) -> bool:
        candidate = self._coerce(action)
        canonical = validate_action(self._state, candidate)
        if canonical is None:
            logger.debug(
                "Rejected action %s for %s at ply %d",
                candidate.action_id,
                self._state.current_player.name,
                self._state.ply_count,
            )
            return False
        apply_action(self._state, canonical, in_place=True)
        if logger.isEnabledFor(logging.DEBUG):
            outcome = evaluate_outcome(self._state)
            if outcome.terminal:
                logger.debug(
                    "Game over at ply %d: %s, winner %s",
                    self._state.ply_count,
                    outcome.reason.value,
                    outcome.winner.name,
                )
        return True

    def get_legal_actions(self) -> List[Action]:
        return enumerate_legal_actions(self._state)

    def is_legal_action(self, action: ActionLike) -> bool:
        return is_legal_action(self._state, self._coerce(action))

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.policy_size, dtype=np.int8)
        for action in self.get_legal_actions():
            mask[action.action_id] = 1
        return mask

    # ------------------------------------------------------------------
    # Outcome
    # ------------------------------------------------------------------
    def outcome(self) -> Outcome:
        return evaluate_outcome(self._state)

    def is_terminal(self) -> bool:
        return self.outcome().terminal

    def get_eval_score(self, is_resign: bool = False) -> float:
        """Result in the first player's perspective: +1, -1 or 0."""
        if is_resign:
            return score_for_winner(self._state.current_player.opponent)
        return self.outcome().score

    def get_reward(self) -> float:
        """Result in the perspective of the side to move."""
        outcome = self.outcome()
        if not outcome.terminal:
            return 0.0
        sign = 1.0 if self._state.current_player == Player.FIRST else -1.0
        return outcome.score * sign

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------
    def get_features(self, rotation: Rotation = Rotation.IDENTITY) -> np.ndarray:
        return build_features(self._state, rotation)

    def get_action_features(self, action: ActionLike, rotation: Rotation = Rotation.IDENTITY) -> np.ndarray:
        action_id = self._coerce(action).action_id
        if not self._is_known_action(action_id):
            return np.zeros((action_feature_size(self.config),), dtype=np.float32)
        return build_action_features(action_id, rotation, self.config)

    def get_rotate_action(self, action_id: int, rotation: Rotation) -> int:
        if not self._is_known_action(action_id):
            return action_id
        return rotate_action_id(action_id, rotation, self.config)

    def get_rotate_position(self, position: int, rotation: Rotation) -> int:
        if not 0 <= position < self.config.board_area:
            return position
        return rotate_position(position, rotation, self.board_size)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def to_string(self) -> str:
        width = len(str(self.board_size))
        header = " " * (width + 2) + "  ".join(column_letter(col) for col in range(self.board_size))
        lines = [header]
        for row in range(self.board_size - 1, -1, -1):
            cells = "".join(_GLYPHS[Player(int(value))] for value in self._state.board[row])
            lines.append(f"{row + 1:>{width}} {cells} {row + 1}")
        lines.append(header)
        return "\n".join(lines) + "\n"

    def to_console_string(self, action: ActionLike) -> str:
        return action_to_string(self._coerce(action).action_id, self.config)

    def __str__(self) -> str:
        return self.to_string()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _coerce(self, action: ActionLike) -> Action:
        if isinstance(action, Action):
            return action
        if isinstance(action, (int, np.integer)):
            return Action(int(action))
        return parse_action(action, self.config)

    def _is_known_action(self, action_id: int) -> bool:
        return 0 <= action_id < self.config.policy_size
