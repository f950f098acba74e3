"""
Centralized Configuration Management System

This module provides the configuration system for the similarity engine:
- Centralizes search and logging settings
- Supports environment-specific overrides
- Validates configuration on startup
- Provides type-safe access to configuration values
"""

import os
import json
import yaml
import logging
from typing import Any, Dict, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum
import threading

from similarity_core.interfaces import MismatchPolicy, TieBreak


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


SUPPORTED_DTYPES = ("float64", "float32")


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _parse_optional_int(value: str) -> Optional[int]:
    if value.strip().lower() in ("", "none", "null"):
        return None
    return int(value)


@dataclass
class SearchConfig:
    """Collection storage and search configuration"""

    dtype: str = "float64"
    mismatch_policy: MismatchPolicy = MismatchPolicy.SKIP
    tie_break: TieBreak = TieBreak.IDENTIFIER
    fixed_dimension: Optional[int] = None
    search_workers: int = 4
    parallel_search_threshold: int = 50000
    intra_parallel_min_dimension: int = 1024 * 1024


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_format: bool = False
    enable_console: bool = True


@dataclass
class AppConfig:
    """Main application configuration"""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""

    pass


# Enum-typed settings, converted when loaded from files
_ENUM_FIELDS = {
    "environment": lambda x: Environment(x.lower()),
    "logging.level": lambda x: LogLevel(x.upper()),
    "search.mismatch_policy": lambda x: MismatchPolicy(x.lower()),
    "search.tie_break": lambda x: TieBreak(x.lower()),
}


class ConfigManager:
    """
    Centralized configuration manager with support for:
    - Environment-specific configurations
    - Configuration validation
    - Dynamic configuration updates
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        """Singleton pattern implementation"""
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        # Avoid re-initialization in singleton
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            # Look for config directory relative to project root
            project_root = Path(__file__).parent.parent.parent
            self.config_dir = project_root / "config"

        self.config: AppConfig = AppConfig()
        self.loaded_files = []
        self.logger = logging.getLogger(__name__)

        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from multiple sources in priority order"""
        # 1. Defaults
        self.config = AppConfig()
        self.loaded_files = []

        # 2. Base configuration file
        self._load_from_file("config.yaml")
        self._load_from_file("config.json")

        # 3. Environment-specific configuration
        env = os.getenv("ENVIRONMENT", "development").lower()
        self._load_from_file(f"environments/config.{env}.yaml")
        self._load_from_file(f"environments/config.{env}.json")

        # 4. Environment variables (highest priority)
        self._load_from_environment()

        # 5. Validate
        self._validate_configuration()

    def _load_from_file(self, filename: str):
        """Load configuration from YAML/JSON file"""
        file_path = self.config_dir / filename
        if not file_path.exists():
            return

        try:
            with open(file_path, "r") as f:
                if filename.endswith(".yaml") or filename.endswith(".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            self.logger.warning(f"Failed to load configuration from {filename}: {e}")
            return

        if data:
            self._update_config_from_dict(data)
            self.loaded_files.append(str(file_path))
            self.logger.info(f"Loaded configuration from {filename}")

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        env_mappings = {
            "ENVIRONMENT": ("environment", lambda x: Environment(x.lower())),
            "DEBUG": ("debug", _parse_bool),
            # Logging
            "LOG_LEVEL": ("logging.level", lambda x: LogLevel(x.upper())),
            "LOG_FORMAT": ("logging.format", str),
            "LOG_JSON": ("logging.json_format", _parse_bool),
            # Search
            "SEARCH_DTYPE": ("search.dtype", lambda x: x.lower()),
            "SEARCH_MISMATCH_POLICY": (
                "search.mismatch_policy",
                lambda x: MismatchPolicy(x.lower()),
            ),
            "SEARCH_TIE_BREAK": ("search.tie_break", lambda x: TieBreak(x.lower())),
            "COLLECTION_DIMENSION": ("search.fixed_dimension", _parse_optional_int),
            "SEARCH_WORKERS": ("search.search_workers", int),
            "SEARCH_PARALLEL_THRESHOLD": ("search.parallel_search_threshold", int),
            "SIMILARITY_PARALLEL_MIN_DIMENSION": ("search.intra_parallel_min_dimension", int),
        }

        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self._set_nested_attr(self.config, config_path, converter(value))
                except (ValueError, TypeError) as e:
                    self.logger.warning(f"Invalid value for {env_var}: {value}, error: {e}")

    def _update_config_from_dict(self, data: Dict[str, Any], prefix: str = ""):
        """Update configuration from dictionary recursively"""
        for key, value in data.items():
            config_path = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                self._update_config_from_dict(value, config_path)
                continue

            try:
                if config_path in _ENUM_FIELDS and isinstance(value, str):
                    value = _ENUM_FIELDS[config_path](value)

                self._set_nested_attr(self.config, config_path, value)

            except AttributeError:
                self.logger.warning(f"Unknown configuration key: {config_path}")
            except ValueError as e:
                self.logger.warning(f"Invalid value for {config_path}: {value}, error: {e}")

    def _set_nested_attr(self, obj: Any, path: str, value: Any):
        """Set nested attribute using dot notation"""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        if not hasattr(obj, parts[-1]):
            raise AttributeError(path)
        setattr(obj, parts[-1], value)

    def _validate_configuration(self):
        """Validate configuration settings"""
        errors = []
        search = self.config.search

        if search.dtype not in SUPPORTED_DTYPES:
            errors.append(
                f"Search dtype must be one of {', '.join(SUPPORTED_DTYPES)}, got {search.dtype}"
            )

        if not isinstance(search.mismatch_policy, MismatchPolicy):
            errors.append(f"Invalid mismatch policy: {search.mismatch_policy}")

        if not isinstance(search.tie_break, TieBreak):
            errors.append(f"Invalid tie break: {search.tie_break}")

        if search.fixed_dimension is not None and search.fixed_dimension <= 0:
            errors.append("Fixed collection dimension must be positive")

        if search.search_workers < 1:
            errors.append("Search workers must be at least 1")

        if search.parallel_search_threshold < 1:
            errors.append("Parallel search threshold must be at least 1")

        if search.intra_parallel_min_dimension < 1:
            errors.append("Intra-comparison parallel dimension must be at least 1")

        if not isinstance(self.config.logging.level, LogLevel):
            errors.append(f"Invalid log level: {self.config.logging.level}")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.info("Configuration validation passed")

    def reload_configuration(self):
        """Reload configuration from all sources"""
        try:
            self._load_configuration()
            self.logger.info("Configuration reloaded successfully")
        except ConfigValidationError as e:
            self.logger.error(f"Failed to reload configuration: {e}")
            raise

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        try:
            obj = self.config
            for part in path.split("."):
                obj = getattr(obj, part)
            return obj
        except AttributeError:
            return default

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation"""
        if path in _ENUM_FIELDS and isinstance(value, str):
            value = _ENUM_FIELDS[path](value)
        previous = self.get(path)
        self._set_nested_attr(self.config, path, value)
        try:
            self._validate_configuration()
        except ConfigValidationError:
            self._set_nested_attr(self.config, path, previous)
            raise

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""

        def _asdict_recursive(obj):
            if hasattr(obj, "__dict__"):
                result = {}
                for key, value in obj.__dict__.items():
                    if isinstance(value, Enum):
                        result[key] = value.value
                    elif hasattr(value, "__dict__"):
                        result[key] = _asdict_recursive(value)
                    else:
                        result[key] = value
                return result
            return obj

        return _asdict_recursive(self.config)

    def save_to_file(self, filename: str, format: str = "yaml"):
        """Save current configuration to file"""
        file_path = self.config_dir / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self.to_dict()

        with open(file_path, "w") as f:
            if format.lower() == "yaml":
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {filename}")


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def init_config(config_dir: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    ConfigManager._instance = None
    _config_manager = ConfigManager(config_dir)
    return _config_manager
