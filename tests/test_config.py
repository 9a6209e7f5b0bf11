"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from bitprofile.config.settings import BitProfileConfig, get_config, reload_config


class TestBitProfileConfig:
    """Tests for BitProfileConfig defaults and overrides."""

    def test_defaults(self, clean_env):
        """Test defaults when no environment variable is set."""
        config = BitProfileConfig()

        assert config.store_path == Path("data/models/model.json")
        assert config.fragment_paths == [Path("data/models")]
        assert config.backup_dir == Path("data/backups")
        assert config.max_records == 1000
        assert config.identity_prefix_length == 100
        assert config.merge_decay == 0.8
        assert config.prediction_length == 8
        assert config.consolidation_min_interval == 60
        assert config.consolidation_max_interval == 300
        assert config.log_level == "INFO"
        assert config.log_mode == "development"

    def test_environment_overrides(self, clean_env):
        """Test every store setting can come from the environment."""
        clean_env.setenv("BITPROFILE_STORE_PATH", "/tmp/store.json")
        clean_env.setenv("BITPROFILE_FRAGMENT_PATHS", "a, b/c ,")
        clean_env.setenv("BITPROFILE_MAX_RECORDS", "50")
        clean_env.setenv("BITPROFILE_MERGE_DECAY", "0.5")
        clean_env.setenv("BITPROFILE_CONSOLIDATION_MIN_INTERVAL", "5")

        config = BitProfileConfig()

        assert config.store_path == Path("/tmp/store.json")
        assert config.fragment_paths == [Path("a"), Path("b/c")]
        assert config.max_records == 50
        assert config.merge_decay == 0.5
        assert config.consolidation_min_interval == 5.0

    def test_string_paths_coerced(self, clean_env):
        config = BitProfileConfig(store_path="x/y.json", fragment_paths=["f"])

        assert config.store_path == Path("x/y.json")
        assert config.fragment_paths == [Path("f")]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_records": 0},
            {"identity_prefix_length": 0},
            {"merge_decay": 0.0},
            {"merge_decay": 1.1},
            {"prediction_length": 0},
            {"consolidation_min_interval": 0},
            {"consolidation_min_interval": 100, "consolidation_max_interval": 50},
            {"log_mode": "verbose"},
        ],
    )
    def test_validation(self, clean_env, kwargs):
        """Test invalid values are rejected in __post_init__."""
        with pytest.raises(ValueError):
            BitProfileConfig(**kwargs)

    def test_invalid_number_in_environment(self, clean_env):
        clean_env.setenv("BITPROFILE_MAX_RECORDS", "many")
        with pytest.raises(ValueError):
            BitProfileConfig()

    def test_to_dict(self, clean_env):
        data = BitProfileConfig().to_dict()

        assert data["max_records"] == 1000
        assert "store_path" in data
        assert "log_dir" in data


class TestGetConfig:
    """Tests for the cached accessor."""

    def test_cached_instance(self, clean_env):
        assert get_config() is get_config()

    def test_reload_picks_up_environment(self, clean_env):
        first = get_config()
        clean_env.setenv("BITPROFILE_MAX_RECORDS", "7")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.max_records == 7
        assert get_config() is reloaded
