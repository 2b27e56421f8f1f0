"""Logging configuration using Pydantic settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLATFORM_LEVEL_ALIASES: dict[str, str] = {"TRACE": "DEBUG", "FATAL": "CRITICAL"}


class LogLevel(StrEnum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    """Valid log formats.

    Matches the values the platform places in ``AWS_LAMBDA_LOG_FORMAT``.
    """

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseSettings):
    """Logging configuration loaded from environment variables.

    Attributes:
        log_level: Minimum log level to output.
        log_format: Output format - json for CloudWatch Insights, text for local runs.
        service_name: Service identifier for log aggregation.
        include_timestamp: Whether to include timestamp.
        include_location: Whether to include file/function/line info.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        validation_alias=AliasChoices("aws_lambda_log_level", "log_level"),
    )
    log_format: LogFormat = Field(
        default=LogFormat.JSON,
        validation_alias=AliasChoices("aws_lambda_log_format", "log_format"),
    )
    service_name: str = Field(default="lambda-runtime")
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=False)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Map platform-only levels onto the standard library ones."""
        if isinstance(value, str):
            upper_value = value.upper()
            return _PLATFORM_LEVEL_ALIASES.get(upper_value, upper_value)
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, value: object) -> object:
        """Accept the capitalised values the platform uses."""
        if isinstance(value, str):
            return value.lower()
        return value


@lru_cache
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()
