"""Configuration Management for ChronoTalk

Loads the resolver configuration from a YAML hierarchy with environment
variable overrides and validates it with pydantic models.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil import tz
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..processors.tokens import PartOfDay
from .error_handler import ConfigurationError
from .logging_manager import LoggingManager


DEFAULT_ANCHORS: Dict[PartOfDay, int] = {
    PartOfDay.MORNING: 9,
    PartOfDay.AFTERNOON: 15,
    PartOfDay.EVENING: 19,
    PartOfDay.NIGHT: 20,
    PartOfDay.NOON: 12,
    PartOfDay.MIDNIGHT: 0,
}


class Preferences(BaseModel):
    """Calendar and anchor preferences used when resolving tokens."""
    model_config = ConfigDict(frozen=True)

    timezone: str = Field(default="UTC")
    start_of_week: int = Field(default=2, ge=1, le=7)  # 1=Sunday ... 7=Saturday
    anchors: Dict[PartOfDay, int] = Field(default_factory=lambda: dict(DEFAULT_ANCHORS))
    weekend_anchor_hour: int = Field(default=10, ge=0, le=23)
    next_week_calendar_week: bool = Field(default=True)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Validate the IANA timezone name"""
        if tz.gettz(v) is None:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator('anchors', mode='before')
    @classmethod
    def merge_default_anchors(cls, v):
        """Fill anchors missing from partial overrides"""
        if v is None:
            v = {}
        if not isinstance(v, dict):
            raise ValueError("anchors must be a mapping of part of day to hour")
        merged = {part.value: hour for part, hour in DEFAULT_ANCHORS.items()}
        for key, hour in v.items():
            merged[key.value if isinstance(key, PartOfDay) else str(key).lower()] = hour
        return merged

    @field_validator('anchors')
    @classmethod
    def validate_anchor_hours(cls, v):
        """Validate anchor hours are clock hours"""
        for part, hour in v.items():
            if not 0 <= hour <= 23:
                raise ValueError(f"Anchor hour for {part.value} must be between 0 and 23")
        return v

    @property
    def tzinfo(self):
        return tz.gettz(self.timezone)

    def anchor_hour(self, part: PartOfDay) -> int:
        return self.anchors[part]


class FallbackConfig(BaseModel):
    """Configuration for the generic date recognizer."""
    enabled: bool = Field(default=False)
    prefer_dates_from: str = Field(default="future", pattern="^(future|past|current_period)$")


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_to_console: bool = Field(default=False)
    file_path: Optional[str] = None
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)

    @field_validator('max_file_size')
    @classmethod
    def validate_file_size(cls, v):
        """Validate file size format"""
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v


class AppConfig(BaseModel):
    """Main configuration."""
    model_config = ConfigDict(validate_assignment=True)

    language: str = Field(default="en")
    preferences: Preferences = Field(default_factory=Preferences)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages configuration loading and validation."""

    ENV_PREFIX = "CHRONOTALK_"
    SECTIONS = ('preferences', 'fallback', 'logging')

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.
        
        Args:
            config_path: Optional configuration directory
            environment: Environment name selecting ``<environment>.yaml``
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('CHRONOTALK_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self.logger = LoggingManager.get_logger(__name__)
        
        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".chronotalk",
        ]
        
        for location in config_locations:
            if location.is_dir():
                return location
        
        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path
        
        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'user': base_dir / 'user_preferences.yaml',
            'local': base_dir / 'local.yaml'
        }

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            return self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.
        
        Returns:
            Validated configuration
            
        Raises:
            ConfigurationError: If a file is not valid YAML or validation fails
        """
        config_data: Dict[str, Any] = {}
        
        for config_type, config_file in self.config_files.items():
            if config_file.exists():
                self.logger.info(f"Loading {config_type} config from {config_file}")
                self._deep_merge(config_data, self._load_yaml_file(config_file))
        
        env_overrides = self._get_env_overrides()
        if env_overrides:
            self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
            self._deep_merge(config_data, env_overrides)
        
        try:
            self._config = AppConfig(**config_data)
        except ValidationError as e:
            self.logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        
        return self._config

    def update_config(self, updates: Dict[str, Any]) -> AppConfig:
        """Apply in-memory updates on top of the loaded configuration."""
        config_dict = self.config.model_dump(mode='json')
        self._deep_merge(config_dict, updates)
        try:
            self._config = AppConfig(**config_dict)
        except ValidationError as e:
            self.logger.error(f"Configuration update rejected: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        return self._config

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.
        
        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {file_path} must be a mapping")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.
        
        Environment variables follow pattern: CHRONOTALK_<SECTION>_<KEY>
        Example: CHRONOTALK_PREFERENCES_WEEKEND_ANCHOR_HOUR -> preferences.weekend_anchor_hour
        Top-level keys skip the section: CHRONOTALK_LANGUAGE -> language
        """
        overrides: Dict[str, Any] = {}
        
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'CHRONOTALK_ENV':
                continue
            name = key[len(self.ENV_PREFIX):].lower()
            section, _, field_name = name.partition('_')
            if section in self.SECTIONS and field_name:
                overrides.setdefault(section, {})[field_name] = self._convert_env_value(value)
            else:
                overrides[name] = self._convert_env_value(value)
        
        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass
        
        return value

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value

    def configure_logging(self) -> LoggingManager:
        """Install log handlers described by the logging section."""
        settings = self.config.logging
        return LoggingManager.configure(
            level=settings.level,
            log_to_console=settings.log_to_console,
            file_path=settings.file_path,
            max_file_size=settings.max_file_size,
            backup_count=settings.backup_count,
        )
