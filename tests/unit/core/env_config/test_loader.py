"""
Tests for load_from_env().
"""

import os
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from request_wrapper.core.env_config import load_from_env, RequestWrapperSettings
from request_wrapper.core.exceptions import ConfigurationError
from request_wrapper.core.config import RequestWrapperConfig, TimeoutConfig
from request_wrapper.core.logging.config import LogFormat, LogLevel


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove REQUEST_WRAPPER_* variables leaking from the shell."""
    for key in list(os.environ):
        if key.startswith("REQUEST_WRAPPER_"):
            monkeypatch.delenv(key)


def write_env(directory: str, content: str) -> str:
    path = Path(directory) / ".env"
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestLoadFromEnv:
    """Test load_from_env function."""

    def test_defaults(self, tmp_path):
        config = load_from_env(env_file=str(tmp_path / "missing.env"))

        assert isinstance(config, RequestWrapperConfig)
        assert config.base_url is None
        assert config.timeout == TimeoutConfig(connect=5.0, read=10.0)
        assert config.retry.retry == 0
        assert config.retry.retry_delay == 0.05
        assert config.retry.blocklisted_codes == frozenset({"417"})
        assert config.with_credentials is False
        assert config.logging is not None
        assert config.logging.enable_console is True

    def test_load_from_env_file(self):
        """Load configuration from .env file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = write_env(tmpdir, "\n".join([
                "REQUEST_WRAPPER_BASE_URL=https://api.example.com",
                "REQUEST_WRAPPER_TIMEOUT_CONNECT=3",
                "REQUEST_WRAPPER_TIMEOUT_READ=30",
                "REQUEST_WRAPPER_RETRY=2",
                "REQUEST_WRAPPER_RETRY_DELAY=1.0",
                "REQUEST_WRAPPER_RETRY_BLOCKLISTED_CODES=417, 404",
                "REQUEST_WRAPPER_WITH_CREDENTIALS=true",
                "REQUEST_WRAPPER_LOG_LEVEL=DEBUG",
                "REQUEST_WRAPPER_LOG_FORMAT=json",
            ]))

            config = load_from_env(env_file=env_file)

        assert config.base_url == "https://api.example.com"
        assert config.timeout == TimeoutConfig(connect=3, read=30)
        assert config.retry.retry == 2
        assert config.retry.retry_delay == 1.0
        assert config.retry.blocklisted_codes == frozenset({"417", "404"})
        assert config.with_credentials is True
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        env_file = write_env(str(tmp_path), "REQUEST_WRAPPER_RETRY=2\n")
        monkeypatch.setenv("REQUEST_WRAPPER_RETRY", "4")

        config = load_from_env(env_file=env_file)
        assert config.retry.retry == 4

    def test_explicit_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_RETRY", "4")

        config = load_from_env(
            env_file=str(tmp_path / "missing.env"),
            retry=1,
            base_url="https://custom.api.com",
            retry_blocklisted_codes=["500"],
        )
        assert config.retry.retry == 1
        assert config.base_url == "https://custom.api.com"
        assert config.retry.blocklisted_codes == frozenset({"500"})

    def test_logging_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_LOG_ENABLE_CONSOLE", "false")

        config = load_from_env(env_file=str(tmp_path / "missing.env"))
        assert config.logging is None

    def test_file_logging(self, tmp_path, monkeypatch):
        log_file = tmp_path / "logs" / "app.log"
        monkeypatch.setenv("REQUEST_WRAPPER_LOG_ENABLE_FILE", "true")
        monkeypatch.setenv("REQUEST_WRAPPER_LOG_FILE_PATH", str(log_file))

        config = load_from_env(env_file=str(tmp_path / "missing.env"))
        assert config.logging.enable_file is True
        assert config.logging.file_path == str(log_file)


    def test_string_blocklist_override_parsed(self, tmp_path):
        config = load_from_env(
            env_file=str(tmp_path / "missing.env"),
            retry_blocklisted_codes="417, 404",
        )
        assert config.retry.blocklisted_codes == frozenset({"417", "404"})

    def test_unknown_override_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="headers"):
            load_from_env(env_file=str(tmp_path / "missing.env"), headers={"X": "1"})

    def test_invalid_override_value(self, tmp_path):
        with pytest.raises(ValidationError):
            load_from_env(env_file=str(tmp_path / "missing.env"), retry=-1)


class TestSettingsValidation:

    def test_retry_out_of_range(self, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_RETRY", "11")
        with pytest.raises(ValidationError):
            RequestWrapperSettings(_env_file=None)

    def test_negative_timeout(self, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_TIMEOUT_READ", "-1")
        with pytest.raises(ValidationError):
            RequestWrapperSettings(_env_file=None)

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            RequestWrapperSettings(_env_file=None)

    def test_file_logging_without_path(self, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_LOG_ENABLE_FILE", "true")
        settings = RequestWrapperSettings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.to_logging_settings()

    def test_blocklist_parsing(self, monkeypatch):
        monkeypatch.setenv("REQUEST_WRAPPER_RETRY_BLOCKLISTED_CODES", " 417,,ETIMEDOUT ")
        settings = RequestWrapperSettings(_env_file=None)
        assert settings.blocklisted_codes() == frozenset({"417", "ETIMEDOUT"})
