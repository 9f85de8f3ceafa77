"""
Game Rules
==========

Collision predicate and termination conditions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import Coin
from pixel_rush.rush_core.input_controller import Player


def center_distance(coin: Coin, player: Player) -> float:
    """Euclidean distance between coin and player centres."""
    cx, cy = coin.center
    px, py = player.center
    return math.hypot(cx - px, cy - py)


def collides(coin: Coin, player: Player) -> bool:
    """
    Circle-circle proximity test.

    The player square is treated as a circle with diameter player.size.
    """
    return center_distance(coin, player) < (coin.size + player.size) / 2


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)

    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)

    @property
    def is_over(self) -> bool:
        return self.terminated or self.truncated


class TerminationRules:
    """
    Handles round termination conditions.

    - Coin overflow: more live coins at step entry than the spawn cap allows.
      The spawner enforces the cap, so this only fires on transient overshoot.
    - Frame cap: agent episodes are truncated after caps.max_frames steps.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._max_coins = config.spawn.max_coins
        self._max_frames = config.caps.max_frames

    @property
    def max_coins(self) -> int:
        return self._max_coins

    def check(self, pre_step_coin_count: int) -> TerminationResult:
        """
        Check termination against the coin count taken at step entry.

        Args:
            pre_step_coin_count: Live coins before this step's removals.

        Returns:
            TerminationResult indicating round state.
        """
        if pre_step_coin_count > self._max_coins:
            return TerminationResult.game_over("coin_overflow")
        return TerminationResult.none()

    def check_frame_cap(self, frames: int) -> TerminationResult:
        """Truncate once an episode has run max_frames steps."""
        if frames >= self._max_frames:
            return TerminationResult.truncation("frame_cap")
        return TerminationResult.none()
