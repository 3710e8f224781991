"""Configuration management with YAML and environment variable support"""

import os
import re
from typing import Any, Dict, List, Optional, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ISO_DURATION_PATTERN = re.compile(r"^PT(?:\d+H)?(?:\d+M)?(?:\d+(?:\.\d+)?S)?$")


class BaseConfigSection(BaseSettings):
    """Base class for all config sections with correct environment variable precedence.

    Environment variables override init kwargs (YAML data), which override
    default values.
    """

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings source priority: env vars > init kwargs > defaults."""
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


class ServerConfig(BaseConfigSection):
    """Server configuration"""

    host: str = (
        "0.0.0.0"  # nosec B104 - Intentional binding to all interfaces for containerized deployment
    )
    port: int = 8000

    model_config = SettingsConfigDict(env_prefix="APP_SERVER_")


class TimeoutsConfig(BaseConfigSection):
    """Operation timeout configuration"""

    metadata: int = 30  # seconds per yt-dlp attempt
    health_check: int = 5

    model_config = SettingsConfigDict(env_prefix="APP_TIMEOUTS_")

    @field_validator("metadata", "health_check")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v


class ExtractorConfig(BaseConfigSection):
    """yt-dlp extractor configuration"""

    binary: str = "yt-dlp"
    player_client: str = "web"
    retry_attempts: int = 3
    retry_backoff: List[int] = Field(default_factory=lambda: [2, 4, 8])

    model_config = SettingsConfigDict(env_prefix="APP_EXTRACTOR_")

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v


class ManifestSettings(BaseConfigSection):
    """DASH manifest generation configuration"""

    select_streams: bool = True
    min_buffer_time: Optional[str] = None  # e.g., "PT1.5S"

    model_config = SettingsConfigDict(env_prefix="APP_MANIFEST_")

    @field_validator("min_buffer_time")
    @classmethod
    def validate_min_buffer_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and (v == "PT" or not ISO_DURATION_PATTERN.match(v)):
            raise ValueError("min_buffer_time must be an ISO 8601 duration such as PT2S")
        return v


class LoggingConfig(BaseConfigSection):
    """Logging configuration"""

    level: str = "INFO"
    format: str = "json"

    model_config = SettingsConfigDict(env_prefix="APP_LOGGING_")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("format must be 'json' or 'console'")
        return v


class SecurityConfig(BaseConfigSection):
    """Security configuration"""

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_prefix="APP_SECURITY_")


class Config(BaseSettings):
    """Main application configuration"""

    server: ServerConfig = Field(default_factory=ServerConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = SettingsConfigDict(env_prefix="APP_")


class ConfigService:
    """Service for loading and managing configuration"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "config.yaml"
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """Load configuration from YAML file with environment variable overrides."""
        config_data: Dict[str, Any] = {}

        if os.path.exists(self.config_path):
            with open(self.config_path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f)
                if yaml_data:
                    config_data = yaml_data

        self._config = Config(
            server=ServerConfig(**config_data.get("server", {})),
            timeouts=TimeoutsConfig(**config_data.get("timeouts", {})),
            extractor=ExtractorConfig(**config_data.get("extractor", {})),
            manifest=ManifestSettings(**config_data.get("manifest", {})),
            logging=LoggingConfig(**config_data.get("logging", {})),
            security=SecurityConfig(**config_data.get("security", {})),
        )

        return self._config

    def validate(self) -> bool:
        """Validate the loaded configuration"""
        if self._config is None:
            raise ValueError("Configuration not loaded. Call load() first.")

        extractor = self._config.extractor
        if extractor.retry_attempts > 1 and not extractor.retry_backoff:
            raise ValueError("retry_backoff must not be empty when retries are enabled")

        return True

    @property
    def config(self) -> Config:
        """Get the loaded configuration"""
        if self._config is None:
            raise ValueError("Configuration not loaded. Call load() first.")
        return self._config
