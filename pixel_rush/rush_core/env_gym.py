"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to Pixel Rush so agents can play.
One env step = one movement key event followed by one display frame.
Reward is the score gained during the step.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from pixel_rush.rush_core.config_loader import load_config
from pixel_rush.rush_core.game import CoreGame
from pixel_rush.rush_core.rules import TerminationRules
from pixel_rush.rush_core.state_snapshot import GameSnapshot


# Discrete action -> key name (None = no key this frame)
ACTION_KEYS = (None, "up", "down", "left", "right")

AGENT_NAME = "agent"


class PixelRushEnv(gym.Env):
    """
    Pixel Rush coin collection as a Gymnasium environment.

    Action Space:
        Discrete(5): 0 noop, 1 up, 2 down, 3 left, 4 right.

    Observation Space:
        Dict with player position, HUD scalars and padded coin arrays.

    Reward:
        Score delta of the step.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        seed: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            seed: Spawn seed for the first episode.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        self._config = load_config(config_path)
        self._debug = debug
        self._game = CoreGame(
            config=self._config,
            seed=seed,
            name_prompt=lambda: AGENT_NAME
        )
        self._frame_ms = self._config.caps.frame_ms
        self._termination = TerminationRules(self._config)
        self._episode_frames = 0

        self.action_space = spaces.Discrete(len(ACTION_KEYS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] PixelRushEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Max coins: {self._config.spawn.max_coins}")

    @property
    def config(self):
        return self._config

    @property
    def game(self) -> CoreGame:
        return self._game

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        board = self._config.board
        n = self._config.spawn.max_coins
        max_size = self._config.spawn.size_max + 1000.0
        num_types = self._config.num_coin_types
        big = np.iinfo(np.int32).max

        return spaces.Dict({
            "player_x": spaces.Box(low=0, high=board.width, shape=(), dtype=np.float32),
            "player_y": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "prize_pool": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "coins_count": spaces.Box(low=0, high=n, shape=(), dtype=np.int32),
            "spawn_interval_ms": spaces.Box(low=0, high=big, shape=(), dtype=np.int32),
            "last_collected_type": spaces.Box(low=-1, high=num_types - 1, shape=(), dtype=np.int32),
            "last_collected_value": spaces.Box(low=0, high=big, shape=(), dtype=np.int32),
            "coin_x": spaces.Box(low=0, high=board.width, shape=(n,), dtype=np.float32),
            "coin_y": spaces.Box(low=0, high=board.height, shape=(n,), dtype=np.float32),
            "coin_size": spaces.Box(low=0, high=max_size, shape=(n,), dtype=np.float32),
            "coin_value": spaces.Box(low=0, high=big, shape=(n,), dtype=np.int32),
            "coin_type": spaces.Box(low=-1, high=num_types - 1, shape=(n,), dtype=np.int32),
            "coin_mask": spaces.MultiBinary(n),
        })

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, Any]:
        """Convert snapshot to observation dict."""
        return {
            "player_x": np.array(snapshot.player_x, dtype=np.float32),
            "player_y": np.array(snapshot.player_y, dtype=np.float32),
            "score": np.array(snapshot.score, dtype=np.int64),
            "prize_pool": np.array(snapshot.prize_pool, dtype=np.int64),
            "coins_count": np.array(snapshot.coins_count, dtype=np.int32),
            "spawn_interval_ms": np.array(snapshot.spawn_interval_ms, dtype=np.int32),
            "last_collected_type": np.array(snapshot.last_collected_type_index, dtype=np.int32),
            "last_collected_value": np.array(snapshot.last_collected_value, dtype=np.int32),
            "coin_x": snapshot.coin_x,
            "coin_y": snapshot.coin_y,
            "coin_size": snapshot.coin_size,
            "coin_value": snapshot.coin_value,
            "coin_type": snapshot.coin_type_index,
            "coin_mask": snapshot.coin_mask.astype(np.int8),
        }

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Start a fresh round.

        Args:
            seed: Spawn seed for this episode.
            options: Unused.

        Returns:
            Initial observation and info dict.
        """
        super().reset(seed=seed)

        if self._game.is_playing:
            self._game.end("reset")
        self._game.start(seed=seed)
        self._episode_frames = 0

        return self._snapshot_to_obs(self._game.snapshot()), self._game.get_info()

    def step(self, action) -> Tuple[Dict[str, Any], float, bool, bool, Dict[str, Any]]:
        """
        Apply one action and advance one frame.

        Args:
            action: Index into ACTION_KEYS.

        Returns:
            (observation, reward, terminated, truncated, info)
        """
        if not self._game.is_playing:
            obs = self._snapshot_to_obs(self._game.snapshot())
            return obs, 0.0, True, False, self._game.get_info()

        key = ACTION_KEYS[int(action)]
        if key is not None:
            self._game.handle_key(key)

        score_before = self._game.score
        self._game.tick(self._frame_ms)
        self._episode_frames += 1
        delta_score = self._game.score - score_before

        terminated = not self._game.is_playing
        truncated = False
        if not terminated:
            cap = self._termination.check_frame_cap(self._episode_frames)
            truncated = cap.truncated
            if truncated:
                self._game.end(cap.reason)

        info = self._game.get_info()
        info["delta_score"] = delta_score

        if self._debug and delta_score:
            print(f"[DEBUG] Step {self._episode_frames}: +{delta_score} (score={self._game.score})")
        if self._debug and terminated:
            print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        obs = self._snapshot_to_obs(self._game.snapshot())
        return obs, float(delta_score), terminated, truncated, info

    def close(self) -> None:
        """Cancel any pending timers."""
        self._game.scheduler.cancel_all()
