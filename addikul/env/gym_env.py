from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from addikul.core import Action, RulesConfig
from addikul.features import NUM_INPUT_CHANNELS, Rotation, inverse_rotation

from .game_env import AddiKulEnv


class AddiKulGymEnv(gym.Env):
    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        config: Optional[RulesConfig] = None,
        enforce_legal_actions: bool = True,
        rotation: Rotation = Rotation.IDENTITY,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.game = AddiKulEnv(config)
        self._enforce_legal = enforce_legal_actions
        self._rotation = rotation
        self.render_mode = render_mode

        n = self.game.board_size
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(NUM_INPUT_CHANNELS, n, n), dtype=np.float32
        )
        self.action_space = spaces.Discrete(self.game.policy_size)

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self.game.reset()
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        action = Action(self.game.get_rotate_action(int(action_index), inverse_rotation(self._rotation)))
        accepted = self.game.act(action)
        if not accepted and self._enforce_legal:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        info = self._build_info()
        if not accepted:
            info["illegal_action"] = True
        terminated = self.game.is_terminal()
        reward = self.game.get_eval_score() if terminated else 0.0
        return self._build_observation(), reward, terminated, False, info

    def legal_action_mask(self) -> np.ndarray:
        mask = self.game.legal_action_mask()
        if self._rotation == Rotation.IDENTITY:
            return mask
        rotated = np.zeros_like(mask)
        for index in np.flatnonzero(mask):
            rotated[self.game.get_rotate_action(int(index), self._rotation)] = 1
        return rotated

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self.game.to_string()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> np.ndarray:
        return self.game.get_features(self._rotation).reshape(self.observation_space.shape)

    def _build_info(self) -> Dict[str, np.ndarray]:
        return {"legal_action_mask": self.legal_action_mask()}
