"""Shared test fixtures."""

import pytest

from lambda_runtime.config import get_settings
from lambda_runtime.logging.config import get_logging_config
from lambda_runtime.logging.context import clear_context


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "AWS_LAMBDA_RUNTIME_API",
        "AWS_LAMBDA_FUNCTION_NAME",
        "AWS_LAMBDA_FUNCTION_VERSION",
        "AWS_LAMBDA_FUNCTION_MEMORY_SIZE",
        "AWS_LAMBDA_LOG_GROUP_NAME",
        "AWS_LAMBDA_LOG_STREAM_NAME",
        "AWS_LAMBDA_LOG_LEVEL",
        "AWS_LAMBDA_LOG_FORMAT",
        "FETCH_RETRY_BASE_DELAY_MS",
        "FETCH_RETRY_MAX_DELAY_MS",
        "FETCH_RETRY_MAX_ATTEMPTS",
        "SERVICE_NAME",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "INCLUDE_TIMESTAMP",
        "INCLUDE_LOCATION",
        "_X_AMZN_TRACE_ID",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    clear_context()
