"""
Rush Core - The simulation behind Pixel Rush.

Main exports:
- CoreGame: Round lifecycle and per-frame simulation
- Phase: Round phase enum (idle / playing / ended)
- Scheduler: Virtual-time timers and frame callbacks
- Leaderboard, JsonFileStore, MemoryStore: Top-N result persistence
- PixelRushEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from pixel_rush.rush_core.config_loader import GameConfig, load_config
from pixel_rush.rush_core.coin_catalog import Coin, CoinType, CoinCatalog
from pixel_rush.rush_core.scheduler import Scheduler, TimerHandle
from pixel_rush.rush_core.leaderboard import (
    Leaderboard,
    LeaderboardRecord,
    JsonFileStore,
    MemoryStore,
)
from pixel_rush.rush_core.game import CoreGame, Phase, InvalidTransition
from pixel_rush.rush_core.env_gym import PixelRushEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Coin",
    "CoinType",
    "CoinCatalog",
    "Scheduler",
    "TimerHandle",
    "Leaderboard",
    "LeaderboardRecord",
    "JsonFileStore",
    "MemoryStore",
    "CoreGame",
    "Phase",
    "InvalidTransition",
    "PixelRushEnv",
]
