"""Core infrastructure: configuration, errors and logging."""

from .config_manager import AppConfig, ConfigManager, Preferences
from .error_handler import ChronoTalkError, ConfigurationError, LanguagePackError
from .logging_manager import LoggingManager

__all__ = [
    "AppConfig",
    "ConfigManager",
    "Preferences",
    "ChronoTalkError",
    "ConfigurationError",
    "LanguagePackError",
    "LoggingManager",
]
