from .config_manager import (
    ConfigManager,
    get_config,
    init_config,
    ConfigValidationError,
    Environment,
    AppConfig,
    SearchConfig,
    LoggingConfig,
)

__all__ = [
    "ConfigManager",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "Environment",
    "AppConfig",
    "SearchConfig",
    "LoggingConfig",
]
