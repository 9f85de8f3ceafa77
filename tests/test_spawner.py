"""
Tests for the coin spawner.
"""

import pytest

from pixel_rush.rush_core.coin_catalog import CoinCatalog
from pixel_rush.rush_core.spawner import CoinSpawner


class TestCoinSpawner:
    """Test coin creation."""

    def test_coins_fit_on_board(self, config):
        """Every coin's bounding box stays inside the board."""
        spawner = CoinSpawner(config, seed=1)
        for _ in range(500):
            coin = spawner.make_coin()
            assert config.spawn.size_min <= coin.size <= config.spawn.size_max
            assert 0 <= coin.x <= config.board.width - coin.size
            assert 0 <= coin.y <= config.board.height - coin.size

    def test_value_is_type_base_value(self, config):
        catalog = CoinCatalog(config)
        spawner = CoinSpawner(config, seed=2)
        for _ in range(100):
            coin = spawner.make_coin()
            assert coin.value == catalog[coin.type_id].base_value

    def test_all_types_appear(self, config):
        spawner = CoinSpawner(config, seed=3)
        seen = {spawner.make_coin().type_id for _ in range(400)}
        assert seen == set(CoinCatalog(config).ids)

    def test_ids_unique(self, config):
        """Ids stay unique even with identical timestamps."""
        spawner = CoinSpawner(config, seed=4)
        ids = [spawner.make_coin(now_ms=1000.0).id for _ in range(1000)]
        assert len(set(ids)) == len(ids)

    def test_deterministic_with_seed(self, config):
        s1 = CoinSpawner(config, seed=42)
        s2 = CoinSpawner(config, seed=42)
        seq1 = [s1.make_coin() for _ in range(50)]
        seq2 = [s2.make_coin() for _ in range(50)]
        assert seq1 == seq2

    def test_different_seeds_differ(self, config):
        s1 = CoinSpawner(config, seed=42)
        s2 = CoinSpawner(config, seed=123)
        assert [s1.make_coin() for _ in range(20)] != [s2.make_coin() for _ in range(20)]


class TestSpawnCap:
    """Test the live coin cap."""

    def test_spawn_skips_at_cap(self, config):
        spawner = CoinSpawner(config, seed=5)
        coins = []
        for _ in range(config.spawn.max_coins * 3):
            coin = spawner.spawn(coins)
            if coin is not None:
                coins.append(coin)
            assert len(coins) <= config.spawn.max_coins
        assert len(coins) == config.spawn.max_coins
        assert spawner.spawn(coins) is None

    def test_spawn_timer_respects_cap(self, game, config):
        """Any number of spawn ticks never exceeds the cap."""
        game.start()
        for _ in range(40):
            game.scheduler.advance(config.spawn.initial_interval_ms)
            assert game.coin_count <= config.spawn.max_coins
        assert game.coin_count == config.spawn.max_coins

    def test_spawn_tick_noop_when_idle(self, game):
        assert game.spawn_tick() is None
        assert game.coin_count == 0

    def test_spawn_cadence(self, game, config):
        """One coin per interval while playing."""
        game.start()
        interval = config.spawn.initial_interval_ms
        game.scheduler.advance(interval - 1)
        assert game.coin_count == 0
        game.scheduler.advance(1)
        assert game.coin_count == 1
        game.scheduler.advance(interval * 2)
        assert game.coin_count == 3
