"""
Input Controller
================

Translates keyboard events and touch-drag deltas into player movement.
Every mutation is followed by a clamp to the board.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from pixel_rush.rush_core.config_loader import GameConfig, get_config


# Key name (lower-case) -> unit direction. Covers DOM-style names
# ("ArrowUp") and pygame.key.name() output ("up").
KEY_DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "arrowup": (0, -1),
    "up": (0, -1),
    "w": (0, -1),
    "arrowdown": (0, 1),
    "down": (0, 1),
    "s": (0, 1),
    "arrowleft": (-1, 0),
    "left": (-1, 0),
    "a": (-1, 0),
    "arrowright": (1, 0),
    "right": (1, 0),
    "d": (1, 0),
}


@dataclass
class Player:
    """The player square. (x, y) is the top-left corner."""
    x: float
    y: float
    size: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def centered(cls, config: GameConfig) -> "Player":
        """Player placed in the middle of the board."""
        size = config.player.size
        return cls(
            x=(config.board.width - size) / 2,
            y=(config.board.height - size) / 2,
            size=size
        )


class InputController:
    """
    Applies input events to a Player.

    Handlers are synchronous and never block.
    """

    def __init__(self, player: Player, config: Optional[GameConfig] = None):
        """
        Initialize controller.

        Args:
            player: Player to move.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._player = player
        self._speed = config.player.speed
        self._board_width = config.board.width
        self._board_height = config.board.height
        self._last_touch: Optional[Tuple[float, float]] = None

    @property
    def player(self) -> Player:
        return self._player

    @player.setter
    def player(self, player: Player) -> None:
        self._player = player
        self.clamp()

    @property
    def dragging(self) -> bool:
        """True while a touch drag is being tracked."""
        return self._last_touch is not None

    def handle_key(self, key: str) -> bool:
        """
        Nudge the player for one keydown event.

        Args:
            key: Key name, e.g. "ArrowUp", "up" or "w". Case-insensitive.

        Returns:
            True if the key is a movement key.
        """
        direction = KEY_DIRECTIONS.get(key.lower())
        if direction is None:
            return False
        dx, dy = direction
        self.move_by(dx * self._speed, dy * self._speed)
        return True

    def touch_start(self, x: float, y: float) -> None:
        """Begin a drag at (x, y)."""
        self._last_touch = (x, y)

    def touch_move(self, x: float, y: float) -> None:
        """Apply the delta from the previous touch point, 1:1."""
        if self._last_touch is None:
            return
        last_x, last_y = self._last_touch
        self._last_touch = (x, y)
        self.move_by(x - last_x, y - last_y)

    def touch_end(self) -> None:
        """Forget the drag so the next one starts fresh."""
        self._last_touch = None

    def move_by(self, dx: float, dy: float) -> None:
        """Translate the player and clamp."""
        self._player.x += dx
        self._player.y += dy
        self.clamp()

    def clamp(self) -> None:
        """Keep the player inside [0, W-size] x [0, H-size]."""
        player = self._player
        max_x = self._board_width - player.size
        max_y = self._board_height - player.size
        player.x = max(0.0, min(max_x, player.x))
        player.y = max(0.0, min(max_y, player.y))

    def reset(self) -> None:
        """Clear touch tracking."""
        self._last_touch = None
