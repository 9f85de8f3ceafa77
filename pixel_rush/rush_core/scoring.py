"""
Scoring System
==============

Awards points and prize pool for collected coins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import Coin


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    coin_type_id: str
    coin_value: int

    def __repr__(self) -> str:
        return f"ScoreEvent({self.coin_type_id} x{self.coin_value}={self.points})"


class ScoreTracker:
    """
    Tracks score and prize pool for one round.

    Both totals grow by coin.value * score_multiplier per collection and
    never decrease within a round.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._multiplier = config.scoring.score_multiplier
        self._score: int = 0
        self._prize_pool: int = 0
        self._collections: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def prize_pool(self) -> int:
        """Accumulated prize pool."""
        return self._prize_pool

    @property
    def collections(self) -> int:
        """Number of coins collected this round."""
        return self._collections

    @property
    def multiplier(self) -> int:
        return self._multiplier

    def points_for(self, coin: Coin) -> int:
        """Points a coin is worth when collected."""
        return int(coin.value * self._multiplier)

    def apply_collection(self, coin: Coin) -> ScoreEvent:
        """
        Apply score and prize for a collected coin.

        Args:
            coin: The coin that was collected.

        Returns:
            ScoreEvent describing the points awarded.
        """
        points = self.points_for(coin)
        self._score += points
        self._prize_pool += points
        self._collections += 1
        return ScoreEvent(points=points, coin_type_id=coin.type_id, coin_value=coin.value)

    def reset(self) -> None:
        """Reset totals to zero."""
        self._score = 0
        self._prize_pool = 0
        self._collections = 0
