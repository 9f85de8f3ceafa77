"""
Tests for configuration loading and the coin catalog.
"""

import os

import pytest
import yaml

import pixel_rush

from pixel_rush.rush_core.config_loader import load_config, reload_config, get_config
from pixel_rush.rush_core.coin_catalog import CoinCatalog, get_catalog


@pytest.fixture
def raw_config():
    path = os.path.join(os.path.dirname(pixel_rush.__file__), "game_config.yaml")
    with open(path) as f:
        return yaml.safe_load(f)


def write_config(tmp_path, raw):
    path = tmp_path / "game_config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(raw, f)
    return str(path)


class TestConfigLoader:
    """Test YAML loading and validation."""

    def test_default_values(self, config):
        """Packaged config carries the documented constants."""
        assert config.board.width == 800
        assert config.board.height == 600
        assert config.spawn.max_coins == 12
        assert config.spawn.initial_interval_ms == 2000
        assert config.scoring.score_multiplier == 10
        assert config.merge.size_delta == 2
        assert config.merge.flash_ms == 200
        assert config.leaderboard.max_entries == 5
        assert config.difficulty.thresholds == ((300, 800), (200, 1000), (100, 1200))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_duplicate_coin_ids_rejected(self, tmp_path, raw_config):
        raw_config["coins"].append(dict(raw_config["coins"][0]))
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw_config))

    def test_inverted_size_range_rejected(self, tmp_path, raw_config):
        raw_config["spawn"]["size_min"] = 30
        raw_config["spawn"]["size_max"] = 10
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw_config))

    def test_unsorted_thresholds_rejected(self, tmp_path, raw_config):
        raw_config["difficulty"]["thresholds"] = [[100, 1200], [300, 800]]
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw_config))

    def test_bad_color_rejected(self, tmp_path, raw_config):
        raw_config["coins"][0]["color"] = "orange"
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw_config))

    def test_reload_replaces_cache(self, tmp_path, raw_config):
        raw_config["spawn"]["max_coins"] = 3
        custom = reload_config(write_config(tmp_path, raw_config))
        try:
            assert get_config() is custom
            assert get_config().spawn.max_coins == 3
        finally:
            reload_config()


class TestCoinCatalog:
    """Test catalog lookup."""

    def test_lookup_by_id(self, config):
        catalog = CoinCatalog(config)
        btc = catalog["btc"]
        assert btc.base_value == 1
        assert btc.display_name == "Bitcoin"
        assert btc.color == "#f7931a"
        assert btc.rgb == (0xF7, 0x93, 0x1A)

    def test_unknown_id_raises(self, config):
        catalog = CoinCatalog(config)
        with pytest.raises(KeyError):
            catalog["xyz"]

    def test_ids_follow_config_order(self, config):
        catalog = CoinCatalog(config)
        assert catalog.ids == tuple(c.id for c in config.coins)
        assert len(catalog) == config.num_coin_types
        assert "eth" in catalog
        assert catalog.index_of(catalog.ids[-1]) == len(catalog) - 1

    def test_get_by_name(self, config):
        catalog = get_catalog(config)
        assert catalog.get_by_name("ethereum").id == "eth"
        assert catalog.get_by_name("nothing") is None
