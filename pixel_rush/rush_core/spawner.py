"""
Coin Spawner
============

Creates coins at randomized positions and sizes. The cadence is owned by
the game (a repeating scheduler timer); the spawner only decides what, if
anything, a single spawn tick produces.
"""

from __future__ import annotations

import itertools
import random
from typing import Optional, Sequence

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import Coin, CoinCatalog, get_catalog


class CoinSpawner:
    """
    Uniform random coin factory with a hard cap on live coins.

    Seeded spawners are reproducible.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        catalog: Optional[CoinCatalog] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            catalog: Coin catalog. Built from config if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = catalog if catalog is not None else get_catalog(config)
        self._rng = random.Random(seed)
        self._serial = itertools.count()

        self._max_coins = config.spawn.max_coins
        self._size_min = config.spawn.size_min
        self._size_max = config.spawn.size_max
        self._board_width = config.board.width
        self._board_height = config.board.height

    @property
    def max_coins(self) -> int:
        """Maximum number of live coins."""
        return self._max_coins

    def can_spawn(self, coins: Sequence[Coin]) -> bool:
        """True if the live set has room for another coin."""
        return len(coins) < self._max_coins

    def make_coin(self, now_ms: float = 0.0) -> Coin:
        """
        Build a random coin without checking the cap.

        Args:
            now_ms: Spawn timestamp, folded into the coin id.

        Returns:
            New coin carrying its type's base value.
        """
        coin_type = self._rng.choice(self._catalog.all_types)
        size = self._rng.uniform(self._size_min, self._size_max)
        x = self._rng.uniform(0.0, self._board_width - size)
        y = self._rng.uniform(0.0, self._board_height - size)
        return Coin(
            id=self.next_id(coin_type.id, now_ms),
            type_id=coin_type.id,
            x=x,
            y=y,
            size=size,
            value=coin_type.base_value
        )

    def spawn(self, coins: Sequence[Coin], now_ms: float = 0.0) -> Optional[Coin]:
        """
        Attempt one spawn.

        Args:
            coins: Current live coins.
            now_ms: Spawn timestamp.

        Returns:
            The new coin for the caller to append, or None when the cap is
            reached (the tick is skipped, not queued).
        """
        if not self.can_spawn(coins):
            return None
        return self.make_coin(now_ms)

    def next_id(self, type_id: str, now_ms: float) -> str:
        """Unique instance id: type, timestamp, serial and a random suffix."""
        return f"{type_id}-{int(now_ms)}-{next(self._serial)}-{self._rng.getrandbits(24):06x}"

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawner with optional new seed.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
