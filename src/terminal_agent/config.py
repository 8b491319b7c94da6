# config.py
# Runtime configuration, read once from the environment (and .env) at startup.

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class ConfigError(Exception):
    """Raised when startup configuration is missing or invalid. Always fatal."""


def _positive(name: str, raw: str | None, cast: type) -> int | float | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}.") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}.")
    return value


@dataclass(frozen=True)
class AgentConfig:
    """Oracle credentials, endpoint and loop limits."""

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    max_steps: int | None = None
    timeout: float | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AgentConfig":
        load_dotenv()

        api_key = os.getenv("GEMINI_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("GEMINI_API_KEY environment variable is not set.")

        log_level = os.getenv("AGENT_LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"AGENT_LOG_LEVEL is not a logging level: {log_level!r}.")

        return cls(
            api_key=api_key,
            model=os.getenv("AGENT_MODEL") or DEFAULT_MODEL,
            base_url=os.getenv("AGENT_BASE_URL") or DEFAULT_BASE_URL,
            max_steps=_positive("AGENT_MAX_STEPS", os.getenv("AGENT_MAX_STEPS"), int),
            timeout=_positive("AGENT_TIMEOUT", os.getenv("AGENT_TIMEOUT"), float),
            log_level=log_level,
        )
