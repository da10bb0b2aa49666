"""
Configuration management for the timesheet engine.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timesheet_engine.config.effort_policy import EffortPolicy


class TimesheetEngineConfig(BaseSettings):
    """Configuration settings for the timesheet engine."""

    # Timesheet rules
    daily_efforts_limit: int = Field(default=12, alias="DAILY_EFFORTS_LIMIT")
    weekly_efforts_limit: int = Field(default=44, alias="WEEKLY_EFFORTS_LIMIT")
    timesheet_freeze_day_of_month: int = Field(
        default=12, alias="TIMESHEET_FREEZE_DAY_OF_MONTH"
    )
    week_starts_on: str = Field(default="sunday", alias="WEEK_STARTS_ON")

    # Storage used by the CLI
    data_file: str = Field(default="timesheets.json", alias="TIMESHEET_DATA_FILE")

    # Notification delivery
    bot_access_token: Optional[str] = Field(default=None, alias="BOT_ACCESS_TOKEN")
    notification_timeout: float = Field(default=10.0, alias="NOTIFICATION_TIMEOUT")
    teams_manifest_id: Optional[str] = Field(default=None, alias="TEAMS_APP_MANIFEST_ID")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
    )

    @field_validator("timesheet_freeze_day_of_month")
    @classmethod
    def validate_freeze_day(cls, v):
        """Ensure the freeze day is a day that can exist in a month."""
        if not 1 <= v <= 31:
            raise ValueError("Timesheet freeze day of month must be between 1 and 31")
        return v

    @field_validator("daily_efforts_limit", "weekly_efforts_limit")
    @classmethod
    def validate_limits(cls, v, info):
        """Ensure effort limits are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    def effort_policy(self) -> EffortPolicy:
        """Build the immutable policy handed to the timesheet service."""
        return EffortPolicy(
            daily_efforts_limit=self.daily_efforts_limit,
            weekly_efforts_limit=self.weekly_efforts_limit,
            freeze_day_of_month=self.timesheet_freeze_day_of_month,
            week_starts_on=self.week_starts_on,
        )


def load_config(env_file: Optional[str] = None) -> TimesheetEngineConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return TimesheetEngineConfig()


# Global configuration instance
_config: Optional[TimesheetEngineConfig] = None


def get_config() -> TimesheetEngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> TimesheetEngineConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
