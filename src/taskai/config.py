"""Settings loaded from the environment and an optional .env file."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from taskai.client import DEFAULT_ENDPOINT, DEFAULT_MODEL, GeminiClient
from taskai.errors import ConfigError

API_KEY_VARS = ("TASKAI_API_KEY", "ApiKey", "GEMINI_API_KEY")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime configuration."""

    api_key: str | None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 30.0
    log_file: str = "taskai.log"
    log_level: str = "INFO"


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigError(f"TASKAI_TIMEOUT must be a number, got {raw!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"TASKAI_TIMEOUT must be positive, got {raw!r}")
    return timeout


def _parse_level(raw: str) -> str:
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level {raw!r}")
    return level


def load_settings(env_file: str | None = None, environ=None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env_file: .env file to load first; the default lookup is used if None.
            Variables already present in the environment win.
        environ: Mapping to read instead of os.environ (used by tests).
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ

    api_key = next((environ[var] for var in API_KEY_VARS if environ.get(var)), None)

    return Settings(
        api_key=api_key,
        model=environ.get("TASKAI_MODEL") or DEFAULT_MODEL,
        endpoint=environ.get("TASKAI_ENDPOINT") or DEFAULT_ENDPOINT,
        timeout=_parse_timeout(environ.get("TASKAI_TIMEOUT") or "30"),
        log_file=environ.get("TASKAI_LOG_FILE") or "taskai.log",
        log_level=_parse_level(environ.get("TASKAI_LOG_LEVEL") or "INFO"),
    )


def build_client(settings: Settings) -> GeminiClient:
    """Create the model client from settings."""
    if not settings.api_key:
        raise ConfigError(
            "No API key configured. Set TASKAI_API_KEY (or ApiKey) in the environment or a .env file."
        )
    return GeminiClient(
        api_key=settings.api_key,
        model=settings.model,
        endpoint=settings.endpoint,
        timeout=settings.timeout,
    )


def configure_logging(log_file: str, level: str = "INFO") -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_file, mode="a", encoding="utf-8")],
        force=True,
    )
