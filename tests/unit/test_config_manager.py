"""
Tests for the configuration management system.
"""
import os
import tempfile
import pytest
import json
import yaml
from pathlib import Path
from unittest.mock import patch

from similarity_core.config.config_manager import (
    ConfigManager,
    AppConfig,
    SearchConfig,
    Environment,
    LogLevel,
    ConfigValidationError,
    get_config,
    init_config,
)
from similarity_core.interfaces import MismatchPolicy, TieBreak


class TestConfigManager:
    """Test the ConfigManager class."""

    def test_singleton_pattern(self):
        """Test that ConfigManager follows singleton pattern."""
        with patch.dict(os.environ, {}, clear=True):
            config1 = ConfigManager()
            config2 = ConfigManager()
        assert config1 is config2

    def test_default_configuration(self):
        """Test that default configuration is properly loaded."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.DEVELOPMENT
            assert config.config.debug is False
            assert config.config.search.dtype == "float64"
            assert config.config.search.mismatch_policy == MismatchPolicy.SKIP
            assert config.config.search.tie_break == TieBreak.IDENTIFIER
            assert config.config.search.fixed_dimension is None
            assert config.config.search.search_workers == 4
            assert config.config.logging.level == LogLevel.INFO
            assert config.loaded_files == []

    def test_yaml_config_loading(self):
        """Test loading configuration from YAML file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            test_config = {
                "environment": "testing",
                "debug": True,
                "search": {
                    "dtype": "float32",
                    "mismatch_policy": "error",
                    "tie_break": "none",
                    "fixed_dimension": 3,
                },
            }

            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump(test_config, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.TESTING
            assert config.config.debug is True
            assert config.config.search.dtype == "float32"
            assert config.config.search.mismatch_policy == MismatchPolicy.ERROR
            assert config.config.search.tie_break == TieBreak.NONE
            assert config.config.search.fixed_dimension == 3
            assert len(config.loaded_files) == 1

    def test_json_config_loading(self):
        """Test loading configuration from JSON file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            test_config = {
                "environment": "staging",
                "search": {"search_workers": 8, "parallel_search_threshold": 1000},
                "logging": {"level": "debug", "json_format": True},
            }

            with open(Path(temp_dir) / "config.json", "w") as f:
                json.dump(test_config, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.STAGING
            assert config.config.search.search_workers == 8
            assert config.config.search.parallel_search_threshold == 1000
            assert config.config.logging.level == LogLevel.DEBUG
            assert config.config.logging.json_format is True

    def test_environment_specific_config(self):
        """Test loading environment-specific configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            environments_dir = Path(temp_dir) / "environments"
            environments_dir.mkdir()

            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"search": {"search_workers": 2}}, f)

            with open(environments_dir / "config.production.yaml", "w") as f:
                yaml.dump({"search": {"search_workers": 16}}, f)

            with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
                config = ConfigManager(temp_dir)

            # Environment-specific config should override base config
            assert config.config.search.search_workers == 16
            assert config.config.environment == Environment.PRODUCTION

    def test_environment_variable_override(self):
        """Test that environment variables override file configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"search": {"tie_break": "identifier", "search_workers": 2}}, f)

            env_vars = {
                "SEARCH_TIE_BREAK": "none",
                "SEARCH_WORKERS": "6",
                "SEARCH_MISMATCH_POLICY": "error",
                "COLLECTION_DIMENSION": "128",
                "DEBUG": "true",
                "LOG_JSON": "yes",
            }

            with patch.dict(os.environ, env_vars, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.search.tie_break == TieBreak.NONE
            assert config.config.search.search_workers == 6
            assert config.config.search.mismatch_policy == MismatchPolicy.ERROR
            assert config.config.search.fixed_dimension == 128
            assert config.config.debug is True
            assert config.config.logging.json_format is True

    def test_invalid_environment_value_is_ignored(self):
        """Invalid environment values are logged and the default kept."""
        with tempfile.TemporaryDirectory() as temp_dir:
            env_vars = {"SEARCH_WORKERS": "many", "SEARCH_TIE_BREAK": "random"}
            with patch.dict(os.environ, env_vars, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.search.search_workers == 4
            assert config.config.search.tie_break == TieBreak.IDENTIFIER

    def test_unknown_file_key_is_ignored(self):
        """Unknown keys in configuration files do not break loading."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"search": {"unknown_option": 1, "search_workers": 3}}, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.search.search_workers == 3
            assert not hasattr(config.config.search, "unknown_option")

    def test_configuration_validation_failure(self):
        """Test configuration validation failures."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"search": {"dtype": "int8", "search_workers": 0}}, f)

            with patch.dict(os.environ, {}, clear=True):
                with pytest.raises(ConfigValidationError) as exc_info:
                    ConfigManager(temp_dir)

            message = str(exc_info.value)
            assert "dtype" in message
            assert "Search workers must be at least 1" in message

    def test_fixed_dimension_must_be_positive(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"COLLECTION_DIMENSION": "0"}, clear=True):
                with pytest.raises(ConfigValidationError):
                    ConfigManager(temp_dir)

    def test_get_and_set_methods(self):
        """Test the get and set methods for configuration values."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.get("search.dtype") == "float64"
            assert config.get("nonexistent.key", "default") == "default"

            config.set("search.tie_break", "none")
            assert config.get("search.tie_break") == TieBreak.NONE

            config.set("search.search_workers", 2)
            assert config.config.search.search_workers == 2

            with pytest.raises(ConfigValidationError):
                config.set("search.search_workers", 0)

    def test_failed_set_keeps_previous_value(self):
        """Test that a value rejected by validation is not left in the config."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            with pytest.raises(ConfigValidationError):
                config.set("search.search_workers", 0)
            assert config.config.search.search_workers == 4

            with pytest.raises(ConfigValidationError):
                config.set("search.dtype", "int8")
            assert config.get("search.dtype") == "float64"

    def test_to_dict_method(self):
        """Test converting configuration to dictionary."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)
            config_dict = config.to_dict()

            assert isinstance(config_dict, dict)
            assert config_dict["environment"] == "development"
            assert config_dict["search"]["mismatch_policy"] == "skip"
            assert config_dict["search"]["tie_break"] == "identifier"
            assert config_dict["logging"]["level"] == "INFO"

    def test_save_to_file(self):
        """Test saving configuration to file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            config.save_to_file("test_config.yaml", "yaml")
            with open(Path(temp_dir) / "test_config.yaml", "r") as f:
                saved_config = yaml.safe_load(f)
            assert saved_config["environment"] == "development"
            assert saved_config["search"]["dtype"] == "float64"

            config.save_to_file("test_config.json", "json")
            with open(Path(temp_dir) / "test_config.json", "r") as f:
                saved_config = json.load(f)
            assert saved_config["search"]["search_workers"] == 4

    def test_saved_file_round_trips_through_loader(self):
        """A saved configuration loads back with the same values."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)
                config.set("search.mismatch_policy", "error")
                config.save_to_file("config.yaml")

                reloaded = init_config(temp_dir)

            assert reloaded is not config
            assert reloaded.config.search.mismatch_policy == MismatchPolicy.ERROR

    def test_global_config_functions(self):
        """Test global configuration functions."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config1 = init_config(temp_dir)
                assert isinstance(config1, ConfigManager)

                config2 = get_config()
                assert config1 is config2


class TestConfigDataClasses:
    """Test the configuration data classes."""

    def test_search_config_defaults(self):
        config = SearchConfig()
        assert config.dtype == "float64"
        assert config.parallel_search_threshold == 50000
        assert config.intra_parallel_min_dimension == 1024 * 1024

    def test_app_config_sections_are_independent(self):
        first = AppConfig()
        second = AppConfig()
        first.search.search_workers = 1
        assert second.search.search_workers == 4

    def test_enum_values(self):
        """Test enum value conversions."""
        assert Environment.DEVELOPMENT.value == "development"
        assert LogLevel.INFO.value == "INFO"
        assert MismatchPolicy("skip") is MismatchPolicy.SKIP
        assert TieBreak("none") is TieBreak.NONE
