from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from mailexpiry.config import (
    CONFIG_ENV_VAR,
    Config,
    ConfigError,
    load_config,
    parse_expiration_settings,
)
from mailexpiry.types import ExpirationSettings


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent(content), encoding="utf-8")
    return config_path


def test_load_config_success(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        f"""
        rootdir: {tmp_path}/state
        logging:
          level: DEBUG
          debug_file: true
        expiration:
          marketing_days: 3
          calendar_days: 2
        """,
    )

    config = load_config(config_path)

    assert config.root_dir == tmp_path / "state"
    assert config.logging.level == "debug"
    assert config.logging.debug_file is True
    assert config.expiration == ExpirationSettings(marketing_days=3, calendar_days=2)


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        """
        expiration:
          socialDays: 4
        """,
    )

    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    config = load_config()

    assert config.expiration.social_days == 4
    assert config.logging.level == "info"


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path, ""))
    assert config.expiration == ExpirationSettings()


def test_missing_default_config_uses_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert load_config() == Config()


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "absent.yaml")


def test_missing_env_config_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config()


@pytest.mark.parametrize(
    "bad_content, expected_message",
    [
        ("- just\n- a list\n", "root must be a mapping"),
        ("logging: verbose\n", "logging must be a mapping"),
        ("expiration: 5\n", "expiration must be a mapping"),
        ("expiration:\n  archive_days: 5\n", "Unknown expiration setting 'archive_days'"),
        ("expiration:\n  newsletter_days: 0\n", "must be positive"),
        ("expiration:\n  newsletter_days: soon\n", "must be an integer"),
        ("expiration:\n  socialDays: 1\n  social_days: 2\n", "defined more than once"),
        ("expiration: [\n", "Invalid YAML"),
    ],
)
def test_invalid_config(tmp_path: Path, bad_content: str, expected_message: str) -> None:
    config_path = _write_config(tmp_path, bad_content)
    with pytest.raises(ConfigError, match=expected_message):
        load_config(config_path)


def test_parse_expiration_settings_accepts_camel_case() -> None:
    settings = parse_expiration_settings({"marketingDays": 3, "notificationDays": None})
    assert settings == ExpirationSettings(marketing_days=3)


def test_parse_expiration_settings_none() -> None:
    assert parse_expiration_settings(None) == ExpirationSettings()
