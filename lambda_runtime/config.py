"""Runtime configuration using Pydantic BaseSettings.

All settings are loaded from the environment the platform prepares for the
execution environment. The settings are read once at process start and are
never re-resolved per invocation.

Usage:
    from lambda_runtime.config import get_settings

    settings = get_settings()
    print(settings.runtime_api_base_url)
"""

from functools import lru_cache

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RUNTIME_API_VERSION = "2018-06-01"


class RuntimeSettings(BaseSettings):
    """Execution environment settings loaded from environment variables.

    Attributes:
        aws_lambda_runtime_api: host:port of the Runtime API control endpoint.
        aws_lambda_function_name: Name of the function being executed.
        aws_lambda_function_version: Version of the function being executed.
        aws_lambda_function_memory_size: Memory configured for the function, in MB.
        aws_lambda_log_group_name: Log group the platform routes stdout to.
        aws_lambda_log_stream_name: Log stream of this execution environment.
        fetch_retry_base_delay_ms: First backoff delay for retryable fetch errors.
        fetch_retry_max_delay_ms: Upper bound for a single backoff delay.
        fetch_retry_max_attempts: Fetch attempts before a retryable error is fatal.
    """

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
        frozen=True,
    )

    # Control endpoint
    aws_lambda_runtime_api: str = Field(min_length=1)

    # Function metadata
    aws_lambda_function_name: str = Field(default="")
    aws_lambda_function_version: str = Field(default="$LATEST")
    aws_lambda_function_memory_size: int = Field(default=128, ge=0)
    aws_lambda_log_group_name: str = Field(default="")
    aws_lambda_log_stream_name: str = Field(default="")

    # Fetch backoff
    fetch_retry_base_delay_ms: int = Field(default=100, ge=1, le=60_000)
    fetch_retry_max_delay_ms: int = Field(default=2_000, ge=1, le=300_000)
    fetch_retry_max_attempts: int = Field(default=5, ge=1, le=50)

    @field_validator("aws_lambda_runtime_api")
    @classmethod
    def validate_runtime_api(cls, value: str) -> str:
        """Strip any scheme and trailing slash and reject unusable addresses."""
        endpoint = value
        for scheme in ("http://", "https://"):
            if endpoint.startswith(scheme):
                endpoint = endpoint[len(scheme) :]
        endpoint = endpoint.rstrip("/")
        error_message = f"aws_lambda_runtime_api must be host[:port], got '{value}'"
        if not endpoint:
            raise ValueError(error_message)
        try:
            url = httpx.URL(f"http://{endpoint}/")
        except httpx.InvalidURL as error:
            raise ValueError(error_message) from error
        if not url.host or url.path != "/":
            raise ValueError(error_message)
        return endpoint

    @property
    def runtime_api_base_url(self) -> str:
        """Base URL of the versioned Runtime API."""
        return f"http://{self.aws_lambda_runtime_api}/{RUNTIME_API_VERSION}"


@lru_cache
def get_settings() -> RuntimeSettings:
    """Get cached settings instance.

    Returns:
        Cached RuntimeSettings instance.
    """
    return RuntimeSettings()


def validate_startup_config() -> RuntimeSettings:
    """Validate configuration on runtime startup.

    Returns:
        Validated RuntimeSettings instance.

    Raises:
        pydantic.ValidationError: If configuration is invalid.
    """
    return get_settings()
