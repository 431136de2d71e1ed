"""
Unit tests for AppConfig, RequestLog and logging setup.
"""

import logging

import pytest

from reqflow.access_log import RequestLog, setup_logging
from reqflow.config import AppConfig


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()
        assert config.base_headers == {"Connection": "keep-alive"}
        assert config.log_level == "INFO"
        assert config.log_format == "text"
        assert config.access_log is True
        config.validate()

    def test_base_headers_not_shared(self):
        """Test each config gets its own base_headers dict."""
        a, b = AppConfig(), AppConfig()
        a.base_headers["x"] = "1"
        assert "x" not in b.base_headers

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("REQFLOW_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("REQFLOW_LOG_FORMAT", "json")
        monkeypatch.setenv("REQFLOW_ACCESS_LOG", "0")

        config = AppConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.access_log is False

    def test_from_env_defaults(self, monkeypatch):
        for name in ("REQFLOW_LOG_LEVEL", "REQFLOW_LOG_FORMAT", "REQFLOW_ACCESS_LOG"):
            monkeypatch.delenv(name, raising=False)

        assert AppConfig.from_env() == AppConfig()

    @pytest.mark.parametrize("kwargs", [
        {"log_level": "LOUD"},
        {"log_format": "xml"},
        {"base_headers": [("Connection", "close")]},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            AppConfig(**kwargs).validate()

    def test_level(self):
        assert AppConfig(log_level="debug").level == logging.DEBUG


class TestRequestLog:
    """Tests for RequestLog formatting."""

    @pytest.fixture
    def entry(self) -> RequestLog:
        return RequestLog(
            request_id="a1b2c3d4",
            method="GET",
            url="/hello/world",
            client_ip="10.0.0.7",
            status=200,
            duration_ms=4.2071,
            timestamp="19/Oct/2026:10:01:02 +0000",
        )

    def test_to_dict(self, entry: RequestLog):
        data = entry.to_dict()
        assert data["duration_ms"] == 4.21
        assert data["status"] == 200
        assert data["url"] == "/hello/world"

    def test_to_text(self, entry: RequestLog):
        assert entry.to_text() == (
            '10.0.0.7 - - [19/Oct/2026:10:01:02 +0000] '
            '"GET /hello/world" 200 4.21ms a1b2c3d4'
        )


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_sets_package_level(self):
        setup_logging(AppConfig(log_level="DEBUG"))
        try:
            assert logging.getLogger("reqflow").level == logging.DEBUG
        finally:
            logging.getLogger("reqflow").setLevel(logging.NOTSET)
