"""
Difficulty Governor
===================

Maps cumulative score to the spawn interval.
"""

from __future__ import annotations

from typing import Optional

from pixel_rush.rush_core.config_loader import GameConfig, get_config


def spawn_interval_for(score: int, config: Optional[GameConfig] = None) -> int:
    """
    Spawn interval for a score.

    Thresholds are checked highest first; the first one the score strictly
    exceeds wins. Below every threshold the initial interval applies.

    Args:
        score: Cumulative score.
        config: Game configuration. Uses default if None.

    Returns:
        Interval in milliseconds.
    """
    if config is None:
        config = get_config()

    for min_score, interval_ms in config.difficulty.thresholds:
        if score > min_score:
            return interval_ms
    return config.spawn.initial_interval_ms


class DifficultyGovernor:
    """
    Tracks the current spawn interval for a round.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._interval_ms: int = config.spawn.initial_interval_ms

    @property
    def interval_ms(self) -> int:
        """Current spawn interval."""
        return self._interval_ms

    def update(self, score: int) -> bool:
        """
        Re-evaluate the interval after a score change.

        Returns:
            True if the interval changed and the spawn timer needs re-arming.
        """
        interval = spawn_interval_for(score, self._config)
        if interval == self._interval_ms:
            return False
        self._interval_ms = interval
        return True

    def reset(self) -> None:
        """Back to the initial interval."""
        self._interval_ms = self._config.spawn.initial_interval_ms
