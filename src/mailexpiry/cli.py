"""mailexpiry command-line interface."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .categories import classify_expiration, default_expiration_days
from .config import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH, Config, ConfigError, load_config
from .logging import configure_logging
from .message import MessageError, read_message
from .types import ExpirableCategory

app = typer.Typer(help="Classify mail into expirable categories.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    verbose: bool = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mailexpiry {__version__}")
        raise typer.Exit()


@app.callback()
def _mailexpiry(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help=f"Path to config (env {CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH}).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show debug logging on stderr."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Print the version and exit.",
        ),
    ] = False,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved, verbose=verbose)


@app.command()
def classify(
    ctx: typer.Context,
    messages: Annotated[
        list[Path],
        typer.Argument(..., help="Paths to RFC822 message files."),
    ],
    labels: Annotated[
        list[str] | None,
        typer.Option(
            "-l",
            "--label",
            help="Label applied by an earlier rule pass (repeatable).",
        ),
    ] = None,
) -> None:
    """Print the expirable category and expiration days of each message."""

    config = _load_environment(_state(ctx))
    applied = list(labels or [])
    failures = 0
    for path in messages:
        message_path = path.expanduser()
        try:
            parsed = read_message(message_path)
        except MessageError as exc:
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            failures += 1
            continue
        except Exception as exc:
            typer.secho(
                f"Failed to parse message {message_path}: {exc}", fg=typer.colors.RED, err=True
            )
            failures += 1
            continue

        decision = classify_expiration(parsed, applied, config.expiration)
        category = decision.category.value if decision.category else "none"
        LOGGER.info("Classified %s as %s (%s days)", message_path, category, decision.days)
        typer.echo(f"Message: {message_path}")
        if parsed.message_id:
            typer.echo(f"Message-ID: {parsed.message_id}")
        typer.echo(f"  category: {category}")
        typer.echo(f"  expires after: {decision.days} day(s)")

    if failures:
        raise typer.Exit(1)


@app.command()
def defaults(ctx: typer.Context) -> None:
    """Show the effective expiration days per category."""

    config = _load_environment(_state(ctx))
    typer.echo("Expiration days:")
    for category in ExpirableCategory:
        days = default_expiration_days(category, config.expiration)
        overridden = config.expiration.override_for(category) is not None
        marker = " (override)" if overridden else ""
        typer.echo(f"  {category.value.lower()}: {days}{marker}")
    typer.echo(f"  none: {default_expiration_days(None)}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging, config.root_dir, verbose=state.verbose)
    except ConfigError as exc:
        _config_failure(exc)
    LOGGER.debug("Loaded config from %s", _resolved_config_path(state.config_path))
    return config


def _resolved_config_path(path: Path | None) -> Path:
    if path:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


__all__ = ["app"]
