import numpy as np
import pytest

from addikul import AddiKulGymEnv
from addikul.core import encode_action
from addikul.features import Rotation


def test_reset_returns_valid_observation():
    env = AddiKulGymEnv()
    obs, info = env.reset()

    assert obs.shape == (4, 7, 7)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["legal_action_mask"].shape == (49 * 49 + 1,)


def test_step_advances_state_and_returns_reward():
    env = AddiKulGymEnv()
    obs, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])

    next_obs, reward, terminated, truncated, next_info = env.step(action)

    assert reward == 0.0
    assert not terminated
    assert not truncated
    assert np.any(next_obs != obs)
    assert next_info["legal_action_mask"].sum() > 0


def test_illegal_step_raises_when_enforced():
    env = AddiKulGymEnv()
    env.reset()
    with pytest.raises(ValueError):
        env.step(encode_action(0, 48, 7))
    with pytest.raises(ValueError):
        env.step(10**7)


def test_illegal_step_is_flagged_when_not_enforced():
    env = AddiKulGymEnv(enforce_legal_actions=False)
    obs, _ = env.reset()
    next_obs, reward, terminated, _, info = env.step(encode_action(0, 48, 7))
    assert info["illegal_action"]
    np.testing.assert_array_equal(next_obs, obs)
    assert not terminated


def test_rotated_env_uses_rotated_action_space():
    env = AddiKulGymEnv(rotation=Rotation.ROT180)
    _, info = env.reset()
    mask = info["legal_action_mask"]
    # c3c4 (16 -> 23) is seen as e5e4 (32 -> 25) in the rotated frame
    assert mask[encode_action(32, 25, 7)] == 1
    assert mask[encode_action(16, 23, 7)] == 0

    env.step(encode_action(32, 25, 7))
    assert env.game.to_console_string(env.game.actions[-1]) == "c3c4"


def test_render_ansi():
    env = AddiKulGymEnv(render_mode="ansi")
    env.reset()
    assert env.render().startswith("   A  B")
