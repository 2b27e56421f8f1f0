"""Tests for logging configuration."""

import pytest
from pydantic import ValidationError

from lambda_runtime.logging.config import LogFormat, LoggingConfig, LogLevel, get_logging_config


class TestLoggingConfigDefaults:
    def test_default_level(self):
        assert LoggingConfig().log_level == LogLevel.INFO

    def test_default_format(self):
        assert LoggingConfig().log_format == LogFormat.JSON

    def test_default_service_name(self):
        assert LoggingConfig().service_name == "lambda-runtime"

    def test_timestamp_on_location_off(self):
        config = LoggingConfig()
        assert config.include_timestamp is True
        assert config.include_location is False


class TestLoggingConfigFromEnvironment:
    def test_platform_log_level(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_LOG_LEVEL", "WARNING")
        assert LoggingConfig().log_level == LogLevel.WARNING

    def test_platform_trace_maps_to_debug(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_LOG_LEVEL", "TRACE")
        assert LoggingConfig().log_level == LogLevel.DEBUG

    def test_platform_fatal_maps_to_critical(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_LOG_LEVEL", "FATAL")
        assert LoggingConfig().log_level == LogLevel.CRITICAL

    def test_platform_format_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_LOG_FORMAT", "Text")
        assert LoggingConfig().log_format == LogFormat.TEXT

    def test_generic_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert LoggingConfig().log_level == LogLevel.ERROR

    def test_invalid_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            LoggingConfig()


class TestGetLoggingConfig:
    def test_is_cached(self):
        assert get_logging_config() is get_logging_config()
