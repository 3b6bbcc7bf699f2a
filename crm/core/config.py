"""
Application configuration management using Pydantic settings.
Handles environment variables and configuration validation.
"""

import os
from typing import List, Optional
from pathlib import Path

from loguru import logger
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    app_name: str = "Customer Relations Manager"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "data/crm.log"

    # Reminder Settings
    notifications_enabled: bool = True
    reminder_check_interval: int = 60  # seconds

    # Data Settings
    date_format: str = "%Y-%m-%d %H:%M"
    load_sample_data: bool = True
    customer_roles: List[str] = ["Client", "Prospect", "Partner"]

    # GUI Settings
    theme: str = "dark"
    color_theme: str = "blue"
    window_width: int = 1100
    window_height: int = 750

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('reminder_check_interval')
    @classmethod
    def validate_reminder_check_interval(cls, v):
        if v <= 0:
            raise ValueError("Reminder check interval must be positive")
        return v

    @field_validator('log_file')
    @classmethod
    def ensure_log_directory_exists(cls, v):
        """Ensure the log directory exists."""
        log_path = Path(v)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return str(log_path)


# Global settings instance
settings = None

def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global settings
    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            logger.warning(f"Could not load settings from environment: {e}")
            logger.warning("Using default settings")
            settings = Settings.model_construct()
    return settings

def initialize_settings(env_file: Optional[str] = None) -> Settings:
    """Initialize settings with optional custom env file."""
    global settings
    if env_file and os.path.exists(env_file):
        settings = Settings(_env_file=env_file)
    else:
        settings = Settings()
    return settings
