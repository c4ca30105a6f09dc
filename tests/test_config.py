"""Tests for settings loading."""

import logging

import pytest

from taskai.client import DEFAULT_MODEL, GeminiClient
from taskai.config import Settings, build_client, configure_logging, load_settings
from taskai.errors import ConfigError


def test_defaults():
    """Test settings defaults with an empty environment."""
    settings = load_settings(environ={})

    assert settings.api_key is None
    assert settings.model == DEFAULT_MODEL
    assert settings.timeout == 30.0
    assert settings.log_level == "INFO"


def test_api_key_precedence():
    """Test TASKAI_API_KEY wins over the legacy ApiKey variable."""
    assert load_settings(environ={"ApiKey": "legacy"}).api_key == "legacy"
    assert load_settings(environ={"ApiKey": "legacy", "TASKAI_API_KEY": "new"}).api_key == "new"


def test_overrides():
    """Test every variable is read."""
    settings = load_settings(
        environ={
            "TASKAI_MODEL": "gemini-pro",
            "TASKAI_ENDPOINT": "http://localhost:8080/models",
            "TASKAI_TIMEOUT": "2.5",
            "TASKAI_LOG_FILE": "/tmp/x.log",
            "TASKAI_LOG_LEVEL": "debug",
        }
    )

    assert settings.model == "gemini-pro"
    assert settings.endpoint == "http://localhost:8080/models"
    assert settings.timeout == 2.5
    assert settings.log_file == "/tmp/x.log"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("env", [{"TASKAI_TIMEOUT": "soon"}, {"TASKAI_TIMEOUT": "-1"}, {"TASKAI_LOG_LEVEL": "LOUD"}])
def test_invalid_values(env):
    """Test bad values raise ConfigError."""
    with pytest.raises(ConfigError):
        load_settings(environ=env)


def test_dotenv_file(tmp_path, monkeypatch):
    """Test values are picked up from a .env file."""
    for var in ("TASKAI_API_KEY", "ApiKey", "GEMINI_API_KEY", "TASKAI_MODEL"):
        monkeypatch.delenv(var, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("ApiKey=from-file\nTASKAI_MODEL=gemini-file\n")

    settings = load_settings(str(env_file))

    assert settings.api_key == "from-file"
    assert settings.model == "gemini-file"
    monkeypatch.delenv("ApiKey")
    monkeypatch.delenv("TASKAI_MODEL")


def test_build_client_requires_key():
    """Test a missing key is a configuration error."""
    with pytest.raises(ConfigError):
        build_client(Settings(api_key=None))

    assert isinstance(build_client(Settings(api_key="k")), GeminiClient)


def test_configure_logging_writes_file(tmp_path):
    """Test log records end up in the log file."""
    log_file = tmp_path / "taskai.log"

    configure_logging(str(log_file), "INFO")
    logging.getLogger("taskai.test").info("hello log")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello log" in log_file.read_text()
    logging.basicConfig(force=True, handlers=[logging.NullHandler()])
