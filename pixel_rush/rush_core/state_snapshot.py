"""
State Snapshot
==============

Fixed-shape numeric view of the game for renderers and agents.

Coin arrays are padded to spawn.max_coins; coin_mask marks the used slots.
If the live set ever overshoots the cap, the extra coins are left out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import get_catalog

if TYPE_CHECKING:
    from pixel_rush.rush_core.game import CoreGame


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable game state at one instant."""
    player_x: float
    player_y: float
    player_size: float
    score: int
    prize_pool: int
    phase: str
    spawn_interval_ms: int
    merge_flash: bool
    coins_count: int
    coin_x: np.ndarray           # float32 [max_coins]
    coin_y: np.ndarray           # float32 [max_coins]
    coin_size: np.ndarray        # float32 [max_coins]
    coin_value: np.ndarray       # int32 [max_coins]
    coin_type_index: np.ndarray  # int32 [max_coins], -1 for empty slots
    coin_mask: np.ndarray        # bool [max_coins]
    last_collected_type_index: int  # -1 if none
    last_collected_value: int

    def nearest_coin(self) -> Optional[int]:
        """Slot index of the coin closest to the player, or None."""
        if not self.coin_mask.any():
            return None
        px = self.player_x + self.player_size / 2
        py = self.player_y + self.player_size / 2
        cx = self.coin_x + self.coin_size / 2
        cy = self.coin_y + self.coin_size / 2
        dist = np.hypot(cx - px, cy - py)
        dist = np.where(self.coin_mask, dist, np.inf)
        return int(np.argmin(dist))


class SnapshotBuilder:
    """Builds GameSnapshot instances from a CoreGame."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = get_catalog(config)
        self._max_coins = config.spawn.max_coins

    @property
    def max_coins(self) -> int:
        return self._max_coins

    def build(self, game: "CoreGame") -> GameSnapshot:
        """
        Snapshot the current state of a game.

        Args:
            game: Game to read.

        Returns:
            GameSnapshot with padded coin arrays.
        """
        n = self._max_coins
        coin_x = np.zeros(n, dtype=np.float32)
        coin_y = np.zeros(n, dtype=np.float32)
        coin_size = np.zeros(n, dtype=np.float32)
        coin_value = np.zeros(n, dtype=np.int32)
        coin_type_index = np.full(n, -1, dtype=np.int32)
        coin_mask = np.zeros(n, dtype=bool)

        coins = game.coins[:n]
        for i, coin in enumerate(coins):
            coin_x[i] = coin.x
            coin_y[i] = coin.y
            coin_size[i] = coin.size
            coin_value[i] = coin.value
            coin_type_index[i] = self._catalog.index_of(coin.type_id)
            coin_mask[i] = True

        last = game.last_collected
        player = game.player
        return GameSnapshot(
            player_x=float(player.x),
            player_y=float(player.y),
            player_size=float(player.size),
            score=game.score,
            prize_pool=game.prize_pool,
            phase=game.phase.value,
            spawn_interval_ms=game.spawn_interval_ms,
            merge_flash=game.merge_flash,
            coins_count=len(coins),
            coin_x=coin_x,
            coin_y=coin_y,
            coin_size=coin_size,
            coin_value=coin_value,
            coin_type_index=coin_type_index,
            coin_mask=coin_mask,
            last_collected_type_index=-1 if last is None else self._catalog.index_of(last.type_id),
            last_collected_value=0 if last is None else last.value,
        )
