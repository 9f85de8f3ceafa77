"""
Shared fixtures.
"""

import pytest

from pixel_rush.rush_core.config_loader import load_config
from pixel_rush.rush_core.game import CoreGame
from pixel_rush.rush_core.scheduler import Scheduler


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def game(config, scheduler):
    return CoreGame(config=config, seed=42, scheduler=scheduler)


@pytest.fixture
def on_player(game):
    """Factory for coins whose centre coincides with the player's centre."""
    def make(type_id="btc", size=12.0, value=None):
        player = game.player
        offset = (player.size - size) / 2
        return game.make_coin(type_id, player.x + offset, player.y + offset, size=size, value=value)
    return make


@pytest.fixture
def far_away(game):
    """Factory for coins in the top-left corner, away from the centred player."""
    def make(type_id="eth", size=12.0):
        return game.make_coin(type_id, 0.0, 0.0, size=size)
    return make
