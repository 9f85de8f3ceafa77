"""
Merge System
============

Merges sequentially collected coins of the same type.

The system remembers the most recently collected coin. When the next
collected coin has the same type, the two combine into a merged coin whose
value is their sum and whose size is the new coin's size plus a fixed delta.
The merged coin becomes the remembered one, so a run of same-type
collections keeps growing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import Coin


@dataclass
class MergeResult:
    """Result of resolving one collected coin."""
    collected: Coin
    merged: Optional[Coin]        # None when no merge happened
    remaining: Tuple[Coin, ...]   # Surviving coins after stale removal

    @property
    def is_merge(self) -> bool:
        return self.merged is not None


class MergeSystem:
    """
    Tracks the last collected coin and resolves merges.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize merge system.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._size_delta = config.merge.size_delta
        self._last_collected: Optional[Coin] = None
        self._merges: int = 0

    @property
    def last_collected(self) -> Optional[Coin]:
        """Most recently collected (or merged) coin."""
        return self._last_collected

    @property
    def merges(self) -> int:
        """Number of merges this round."""
        return self._merges

    def resolve(
        self,
        coin: Coin,
        remaining: Sequence[Coin],
        merged_id: Optional[str] = None
    ) -> MergeResult:
        """
        Resolve a collected coin against the last collected one.

        Args:
            coin: Coin collected this frame.
            remaining: Coins that survive the frame so far.
            merged_id: Id for the merged coin. Derived from the collected
                coin's id if None.

        Returns:
            MergeResult with the merged coin (if any) and the remaining coins
            with any stale copy of the previous coin removed.
        """
        previous = self._last_collected

        if previous is None or previous.type_id != coin.type_id:
            self._last_collected = coin
            return MergeResult(collected=coin, merged=None, remaining=tuple(remaining))

        merged = Coin(
            id=merged_id if merged_id is not None else f"{coin.id}+m",
            type_id=coin.type_id,
            x=coin.x,
            y=coin.y,
            size=coin.size + self._size_delta,
            value=previous.value + coin.value
        )
        survivors: List[Coin] = [c for c in remaining if c.id != previous.id]

        self._last_collected = merged
        self._merges += 1
        return MergeResult(collected=coin, merged=merged, remaining=tuple(survivors))

    def reset(self) -> None:
        """Forget the last collected coin."""
        self._last_collected = None
        self._merges = 0
