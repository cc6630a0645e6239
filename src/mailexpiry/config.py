"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .types import ExpirationSettings

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MAILEXPIRY_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/mailexpiry/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/mailexpiry")
DEFAULT_LOG_LEVEL = "info"

_SETTINGS_FIELDS = tuple(item.name for item in fields(ExpirationSettings))


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path = field(default_factory=DEFAULT_ROOT_DIR.expanduser)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    expiration: ExpirationSettings = field(default_factory=ExpirationSettings)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    A missing file is an error when it was named explicitly (argument or
    ``$MAILEXPIRY_CONFIG``); a missing default file yields built-in defaults.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config at %s; using defaults", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def parse_expiration_settings(value: Any) -> ExpirationSettings:
    """Build :class:`ExpirationSettings` from a mapping of overrides.

    Keys may use ``marketing_days`` or ``marketingDays`` spelling. ``None``
    values leave the corresponding category unset.
    """

    if value is None:
        return ExpirationSettings()
    if not isinstance(value, Mapping):
        raise ConfigError("expiration must be a mapping.")

    overrides: dict[str, Any] = {}
    for key, raw_days in value.items():
        name = _snake_case(str(key))
        if name not in _SETTINGS_FIELDS:
            raise ConfigError(
                f"Unknown expiration setting '{key}'; expected one of {', '.join(_SETTINGS_FIELDS)}."
            )
        if name in overrides:
            raise ConfigError(f"Expiration setting '{name}' is defined more than once.")
        overrides[name] = raw_days

    try:
        return ExpirationSettings(**overrides)
    except ValueError as exc:
        raise ConfigError(f"expiration: {exc}") from exc


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = Path(raw.get("rootdir") or raw.get("root_dir") or DEFAULT_ROOT_DIR).expanduser()
    return Config(
        root_dir=root_dir,
        logging=_parse_logging(raw.get("logging")),
        expiration=parse_expiration_settings(raw.get("expiration")),
    )


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


def _snake_case(name: str) -> str:
    chars: list[str] = []
    for char in name.strip():
        if char.isupper():
            chars.append("_")
            chars.append(char.lower())
        else:
            chars.append(char)
    return "".join(chars).lstrip("_")


__all__ = [
    "Config",
    "LoggingConfig",
    "ConfigError",
    "CONFIG_ENV_VAR",
    "load_config",
    "parse_expiration_settings",
]
