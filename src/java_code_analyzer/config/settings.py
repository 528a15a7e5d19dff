"""Runtime settings loaded from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from ..core.exceptions import ConfigError
from . import defaults


@dataclass(frozen=True)
class AnalyzerSettings:
    """Settings for the analyzer service.

    Attributes:
        api_key: DeepSeek API key (None when not configured)
        api_url: Chat-completion endpoint
        model: Model identifier sent upstream
        max_tokens: Completion token budget
        temperature: Sampling temperature
        max_retries: Attempts per upstream call sequence
        demo_fallback: Serve demo data from /api/analyze when no key is set
        environment: "production" hides internal error details from clients
        host: Bind address for ``serve``
        port: Bind port for ``serve``
        log_level: loguru level name
    """

    api_key: str | None = None
    api_url: str = defaults.DEFAULT_API_URL
    model: str = defaults.DEFAULT_MODEL
    max_tokens: int = defaults.DEFAULT_MAX_TOKENS
    temperature: float = defaults.DEFAULT_TEMPERATURE
    max_retries: int = defaults.DEFAULT_MAX_RETRIES
    demo_fallback: bool = True
    environment: str = "production"
    host: str = defaults.DEFAULT_HOST
    port: int = defaults.DEFAULT_PORT
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @property
    def api_key_configured(self) -> bool:
        """True when the key looks like a real credential."""
        return is_usable_api_key(self.api_key)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


def is_usable_api_key(api_key: str | None) -> bool:
    """Return False for missing, blank or template placeholder keys."""
    if not api_key or not api_key.strip():
        return False
    return api_key.strip().lower() not in defaults.PLACEHOLDER_API_KEYS


def _load_env_files(project_root: Path) -> None:
    """Load environment variables from .env and .env.local files.

    Priority (later files override earlier):
    1. .env (base config)
    2. .env.local (local overrides, gitignored)
    """
    for name in defaults.ENV_FILES:
        env_file = project_root / name
        if env_file.exists():
            load_dotenv(env_file, override=True)
            logger.debug(f"Loaded environment from {env_file}")


def _parse_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _parse_float(
    env: Mapping[str, str], name: str, default: float, low: float, high: float
) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if not low <= value <= high:
        raise ConfigError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def load_settings(
    env: Mapping[str, str] | None = None,
    project_root: Path | None = None,
) -> AnalyzerSettings:
    """Build settings from environment variables.

    When ``env`` is None, ``.env`` files under ``project_root`` (default: the
    current directory) are loaded first and ``os.environ`` is read.

    Raises:
        ConfigError: If a numeric or boolean variable cannot be parsed
    """
    if env is None:
        _load_env_files(project_root or Path.cwd())
        env = os.environ

    api_key = env.get("DEEPSEEK_API_KEY") or None

    settings = AnalyzerSettings(
        api_key=api_key.strip() if api_key else None,
        api_url=env.get("DEEPSEEK_API_URL") or defaults.DEFAULT_API_URL,
        model=env.get("DEEPSEEK_MODEL") or defaults.DEFAULT_MODEL,
        max_tokens=_parse_int(
            env, "DEEPSEEK_MAX_TOKENS", defaults.DEFAULT_MAX_TOKENS, minimum=1
        ),
        temperature=_parse_float(
            env, "DEEPSEEK_TEMPERATURE", defaults.DEFAULT_TEMPERATURE, 0.0, 2.0
        ),
        max_retries=_parse_int(
            env, "DEEPSEEK_MAX_RETRIES", defaults.DEFAULT_MAX_RETRIES, minimum=1
        ),
        demo_fallback=_parse_bool(env, "ANALYZER_DEMO_FALLBACK", True),
        environment=env.get("ANALYZER_ENV") or "production",
        host=env.get("HOST") or defaults.DEFAULT_HOST,
        port=_parse_int(env, "PORT", defaults.DEFAULT_PORT, minimum=1),
        log_level=(env.get("LOG_LEVEL") or defaults.DEFAULT_LOG_LEVEL).upper(),
    )

    logger.debug(
        f"Loaded settings: model={settings.model}, "
        f"api_key_configured={settings.api_key_configured}, "
        f"max_retries={settings.max_retries}"
    )
    return settings
