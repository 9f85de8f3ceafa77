"""
Coin Catalog
============

Provides convenient access to coin type definitions loaded from config,
plus the live Coin entity produced by the spawner and merge system.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from pixel_rush.rush_core.config_loader import (
    GameConfig,
    CoinConfig,
    get_config
)


@dataclass(frozen=True)
class CoinType:
    """
    Runtime representation of a coin type.

    Wraps CoinConfig with computed properties.
    """
    config: CoinConfig

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def color(self) -> str:
        return self.config.color

    @property
    def base_value(self) -> int:
        return self.config.base_value

    @property
    def rgb(self) -> Tuple[int, int, int]:
        """Colour as an (R, G, B) tuple for renderers."""
        hex_digits = self.config.color.lstrip("#")
        return (
            int(hex_digits[0:2], 16),
            int(hex_digits[2:4], 16),
            int(hex_digits[4:6], 16),
        )

    def __repr__(self) -> str:
        return f"CoinType({self.id}: {self.display_name})"


@dataclass(frozen=True)
class Coin:
    """
    A collectible coin on the board.

    Position is the top-left corner of the coin's bounding box; size is its
    diameter. Coins are immutable: a merge produces a new Coin.
    """
    id: str
    type_id: str
    x: float
    y: float
    size: float
    value: int

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class CoinCatalog:
    """
    Collection of all coin types, looked up by string id.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._types: Tuple[CoinType, ...] = tuple(
            CoinType(coin_config) for coin_config in config.coins
        )
        self._by_id: Dict[str, CoinType] = {t.id: t for t in self._types}
        self._index: Dict[str, int] = {t.id: i for i, t in enumerate(self._types)}

    def __len__(self) -> int:
        """Total number of coin types."""
        return len(self._types)

    def __getitem__(self, coin_id: str) -> CoinType:
        """Get coin type by id."""
        try:
            return self._by_id[coin_id]
        except KeyError:
            raise KeyError(f"Unknown coin type {coin_id!r}, expected one of {self.ids}") from None

    def __contains__(self, coin_id: object) -> bool:
        return coin_id in self._by_id

    def __iter__(self):
        """Iterate over all coin types."""
        return iter(self._types)

    @property
    def all_types(self) -> Tuple[CoinType, ...]:
        """All coin types in config order."""
        return self._types

    @property
    def ids(self) -> Tuple[str, ...]:
        """All coin type ids in config order."""
        return tuple(t.id for t in self._types)

    def index_of(self, coin_id: str) -> int:
        """Position of a type in config order (used for numeric observations)."""
        return self._index[coin_id]

    def get_by_name(self, name: str) -> Optional[CoinType]:
        """Get coin type by display name (case-insensitive)."""
        name_lower = name.lower()
        for coin_type in self._types:
            if coin_type.display_name.lower() == name_lower:
                return coin_type
        return None


# Module-level singleton
_cached_catalog: Optional[CoinCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> CoinCatalog:
    """
    Get the coin catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        CoinCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = CoinCatalog(config)
    return _cached_catalog
