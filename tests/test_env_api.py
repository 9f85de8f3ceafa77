"""
Tests for the Gymnasium environment wrapper.
"""

import os

import numpy as np
import pytest
import yaml

import pixel_rush

from pixel_rush.rush_core.env_gym import ACTION_KEYS, AGENT_NAME, PixelRushEnv


@pytest.fixture
def env():
    env = PixelRushEnv(seed=0)
    yield env
    env.close()


@pytest.fixture
def short_config_path(tmp_path):
    path = os.path.join(os.path.dirname(pixel_rush.__file__), "game_config.yaml")
    with open(path) as f:
        raw = yaml.safe_load(f)
    raw["caps"]["max_frames"] = 5
    out = tmp_path / "game_config.yaml"
    with open(out, "w") as f:
        yaml.safe_dump(raw, f)
    return str(out)


class TestEnvApi:
    """Test the reset/step contract."""

    def test_reset_returns_obs_and_info(self, env):
        obs, info = env.reset(seed=1)
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["phase"] == "playing"
        assert env.game.is_playing

    def test_observation_keys_and_shapes(self, env):
        obs, _ = env.reset(seed=1)
        n = env.config.spawn.max_coins
        assert set(obs.keys()) == set(env.observation_space.spaces.keys())
        for key in ("coin_x", "coin_y", "coin_size", "coin_value", "coin_type", "coin_mask"):
            assert obs[key].shape == (n,)
        assert obs["score"].shape == ()
        assert int(obs["coins_count"]) == 0

    def test_action_space(self, env):
        assert env.action_space.n == len(ACTION_KEYS)

    def test_step_tuple(self, env):
        env.reset(seed=1)
        obs, reward, terminated, truncated, info = env.step(0)
        assert isinstance(obs, dict)
        assert reward == 0.0
        assert terminated is False
        assert truncated is False
        assert info["delta_score"] == 0

    def test_movement_action(self, env):
        obs, _ = env.reset(seed=1)
        x0 = float(obs["player_x"])
        obs, *_ = env.step(ACTION_KEYS.index("right"))
        assert float(obs["player_x"]) == pytest.approx(x0 + env.config.player.speed)

    def test_reward_is_score_delta(self, env):
        env.reset(seed=1)
        game = env.game
        player = game.player
        game.add_coin(game.make_coin("sol", player.x + 4, player.y + 4))
        _, reward, *_ = env.step(0)
        assert reward == 30.0

    def test_coins_appear_in_observation(self, env):
        env.reset(seed=3)
        steps = int(np.ceil(env.config.spawn.initial_interval_ms / env.config.caps.frame_ms)) + 1
        for _ in range(steps):
            obs, _, _, _, info = env.step(0)
        assert int(obs["coins_count"]) + info["collections"] >= 1
        assert obs["coin_mask"].sum() == int(obs["coins_count"])

    def test_reset_mid_round(self, env):
        env.reset(seed=1)
        env.step(1)
        env.reset(seed=2)
        assert env.game.is_playing
        assert env.game.leaderboard_entries[0].name == AGENT_NAME


class TestTruncation:
    """Test the frame cap."""

    def test_frame_cap_truncates(self, short_config_path):
        env = PixelRushEnv(config_path=short_config_path, seed=0)
        env.reset()
        for i in range(4):
            _, _, terminated, truncated, _ = env.step(0)
            assert not terminated and not truncated
        _, _, terminated, truncated, info = env.step(0)
        assert truncated
        assert not terminated
        assert info["terminated_reason"] == "frame_cap"
        assert not env.game.is_playing

        # Stepping a finished round is inert
        _, reward, terminated, _, _ = env.step(0)
        assert terminated
        assert reward == 0.0
        env.close()
