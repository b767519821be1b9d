"""
Configuration Loader
Loads engine settings from a YAML file and environment variables
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .matcher import DEFAULT_TOLERANCE_DAYS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES = {
    "METER_TOLERANCE_DAYS": (None, "tolerance_days"),
    "METER_INCLUDE_YEAR_BOUNDARIES": (None, "include_year_boundaries"),
    "METER_TIMEZONE": (None, "timezone"),
    "METER_LOG_LEVEL": ("logging", "level"),
    "METER_LOG_FORMAT": ("logging", "format"),
    "METER_LOG_FILE": ("logging", "file"),
}


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    format: str = Field(default="json", pattern="^(json|text)$")
    file: Optional[str] = Field(default=None, description="Optional log file path")
    max_bytes: int = Field(default=10485760, gt=0)
    backup_count: int = Field(default=5, ge=0)


class EngineSettings(BaseModel):
    """Validated settings for monthly reconstruction"""

    tolerance_days: int = Field(
        default=DEFAULT_TOLERANCE_DAYS,
        ge=0,
        description="Days around a month end within which a reading counts as actual",
    )
    include_year_boundaries: bool = Field(
        default=True,
        description="Reconstruct previous December / next January for year boundaries",
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone for month ends of timezone-aware readings, e.g. Europe/Berlin",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value

    def zone(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.timezone) if self.timezone else None


class ConfigLoader:
    """Loads and validates configuration from YAML files and environment variables"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load main configuration from YAML and apply environment overrides"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        logger.info(f"Loading configuration from {self.config_path}")
        with self.config_path.open() as f:
            config = yaml.safe_load(f) or {}

        # Variables already in the environment take precedence over .env
        load_dotenv(override=False)
        self._apply_env_overrides(config)

        return config

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any]) -> None:
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value is None or value == "":
                continue
            target = config if section is None else config.setdefault(section, {})
            target[key] = value
            logger.info(f"Configuration override from {env_var}")

    def get_settings(self) -> EngineSettings:
        """Validated settings; raises pydantic.ValidationError on bad values"""
        return EngineSettings(**self.config)

    def get_full_config(self) -> Dict[str, Any]:
        """Settings as a plain dict, e.g. for setup_logging"""
        return self.get_settings().model_dump()


# Singleton instance
_config_loader_instance = None


def get_config_loader(config_path: str = DEFAULT_CONFIG_PATH) -> ConfigLoader:
    """Get or create the singleton ConfigLoader instance"""
    global _config_loader_instance
    if _config_loader_instance is None:
        _config_loader_instance = ConfigLoader(config_path)
    return _config_loader_instance
