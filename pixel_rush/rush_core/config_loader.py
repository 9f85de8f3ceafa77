"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Playfield geometry."""
    width: int    # Canvas width in pixels
    height: int   # Canvas height in pixels


@dataclass(frozen=True)
class PlayerConfig:
    """Player square settings."""
    size: float   # Side length (also the effective collision diameter)
    speed: float  # Pixels moved per directional key event


@dataclass(frozen=True)
class CoinConfig:
    """Configuration for a single coin type."""
    id: str
    display_name: str
    color: str        # "#rrggbb"
    base_value: int


@dataclass(frozen=True)
class SpawnConfig:
    """Spawner parameters."""
    max_coins: int
    size_min: float
    size_max: float
    initial_interval_ms: int


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    score_multiplier: int


@dataclass(frozen=True)
class MergeConfig:
    """Merge behavior parameters."""
    size_delta: float  # Added to the collected coin's size on merge
    flash_ms: int      # Duration of the merge pulse


@dataclass(frozen=True)
class DifficultyConfig:
    """Score thresholds, highest first: ((min_score, interval_ms), ...)."""
    thresholds: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class LeaderboardConfig:
    """Leaderboard persistence parameters."""
    key: str
    max_entries: int
    default_name: str
    path: str

    @property
    def resolved_path(self) -> Path:
        """Leaderboard file path with ~ expanded."""
        return Path(os.path.expanduser(self.path))


@dataclass(frozen=True)
class CapsConfig:
    """Loop limits."""
    max_frames: int   # Truncation for agent episodes
    frame_ms: float   # Virtual duration of one display frame


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    player: PlayerConfig
    coins: Tuple[CoinConfig, ...]
    spawn: SpawnConfig
    scoring: ScoringConfig
    merge: MergeConfig
    difficulty: DifficultyConfig
    leaderboard: LeaderboardConfig
    caps: CapsConfig

    @property
    def num_coin_types(self) -> int:
        """Number of coin types in the catalog."""
        return len(self.coins)


def _parse_coin(coin_data: dict) -> CoinConfig:
    """Parse a single coin configuration from YAML."""
    color = str(coin_data["color"])
    if not (len(color) == 7 and color.startswith("#")):
        raise ValueError(f"Coin color must look like '#rrggbb', got {color!r}")
    int(color[1:], 16)
    return CoinConfig(
        id=str(coin_data["id"]),
        display_name=str(coin_data.get("display_name", coin_data["id"])),
        color=color,
        base_value=int(coin_data["base_value"])
    )


def _parse_thresholds(thresholds_data: List) -> Tuple[Tuple[int, int], ...]:
    """Parse difficulty thresholds from YAML."""
    thresholds = []
    for entry in thresholds_data:
        if len(entry) != 2:
            raise ValueError(f"Threshold must have 2 values [min_score, interval_ms], got {entry}")
        thresholds.append((int(entry[0]), int(entry[1])))
    return tuple(thresholds)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.board.width <= 0 or config.board.height <= 0:
        raise ValueError(
            f"Board must have positive size, got {config.board.width}x{config.board.height}"
        )

    if not config.coins:
        raise ValueError("Coin catalog is empty")

    ids = [coin.id for coin in config.coins]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate coin ids: {ids}")

    spawn = config.spawn
    if spawn.max_coins <= 0:
        raise ValueError(f"max_coins must be positive, got {spawn.max_coins}")
    if not 0 < spawn.size_min <= spawn.size_max:
        raise ValueError(f"Invalid coin size range [{spawn.size_min}, {spawn.size_max}]")
    if spawn.size_max > min(config.board.width, config.board.height):
        raise ValueError(f"Coin size_max ({spawn.size_max}) does not fit on the board")
    if spawn.initial_interval_ms <= 0:
        raise ValueError(f"initial_interval_ms must be positive, got {spawn.initial_interval_ms}")

    if config.player.size > min(config.board.width, config.board.height):
        raise ValueError(f"Player size ({config.player.size}) does not fit on the board")

    # Thresholds are checked highest first, so they must be strictly descending
    scores = [min_score for min_score, _ in config.difficulty.thresholds]
    if scores != sorted(scores, reverse=True) or len(set(scores)) != len(scores):
        raise ValueError(f"Difficulty thresholds must be strictly descending, got {scores}")
    for _, interval in config.difficulty.thresholds:
        if interval <= 0:
            raise ValueError(f"Spawn interval must be positive, got {interval}")

    if config.leaderboard.max_entries <= 0:
        raise ValueError(f"leaderboard.max_entries must be positive, got {config.leaderboard.max_entries}")

    if config.caps.frame_ms <= 0:
        raise ValueError(f"frame_ms must be positive, got {config.caps.frame_ms}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        size=float(player_data["size"]),
        speed=float(player_data["speed"])
    )

    coins = tuple(_parse_coin(c) for c in raw["coins"])

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        max_coins=int(spawn_data["max_coins"]),
        size_min=float(spawn_data["size_min"]),
        size_max=float(spawn_data["size_max"]),
        initial_interval_ms=int(spawn_data["initial_interval_ms"])
    )

    scoring_data = raw.get("scoring", {})
    scoring = ScoringConfig(
        score_multiplier=int(scoring_data.get("score_multiplier", 10))
    )

    merge_data = raw.get("merge", {})
    merge = MergeConfig(
        size_delta=float(merge_data.get("size_delta", 2)),
        flash_ms=int(merge_data.get("flash_ms", 200))
    )

    difficulty_data = raw.get("difficulty", {})
    difficulty = DifficultyConfig(
        thresholds=_parse_thresholds(difficulty_data.get("thresholds", []))
    )

    lb_data = raw.get("leaderboard", {})
    leaderboard = LeaderboardConfig(
        key=str(lb_data.get("key", "pixelRushLeaderboard")),
        max_entries=int(lb_data.get("max_entries", 5)),
        default_name=str(lb_data.get("default_name", "Anonymous")),
        path=str(lb_data.get("path", "~/.pixel_rush/leaderboard.json"))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_frames=int(caps_data.get("max_frames", 36000)),
        frame_ms=float(caps_data.get("frame_ms", 1000.0 / 60.0))
    )

    config = GameConfig(
        board=board,
        player=player,
        coins=coins,
        spawn=spawn,
        scoring=scoring,
        merge=merge,
        difficulty=difficulty,
        leaderboard=leaderboard,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
