"""Entry point for ``python -m mailexpiry``."""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Run the Typer application."""
    app(prog_name="mailexpiry")


if __name__ == "__main__":  # pragma: no cover - module execution guard
    main()
