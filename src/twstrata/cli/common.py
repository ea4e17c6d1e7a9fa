"""Shared CLI plumbing: console logging, config loading, common options."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

import click

from twstrata.config import TwStrataConfig, load_config
from twstrata.errors import ConfigurationError
from twstrata.expansion import ENGINES

_LEVEL_STYLES: dict[int, dict[str, object]] = {
    logging.DEBUG: {"dim": True},
    logging.INFO: {},
    logging.WARNING: {"fg": "yellow"},
    logging.ERROR: {"fg": "red"},
    logging.CRITICAL: {"fg": "red", "bold": True},
}


class ClickHandler(logging.Handler):
    """Writes log records through click, coloured by level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            style = _LEVEL_STYLES.get(record.levelno, {})
            click.secho(message, err=record.levelno >= logging.WARNING, **style)  # type: ignore[arg-type]
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> None:
    """Route the ``twstrata`` loggers to the console."""
    logger = logging.getLogger("twstrata")
    for handler in list(logger.handlers):
        if isinstance(handler, ClickHandler):
            logger.removeHandler(handler)
    handler = ClickHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@dataclass
class CliState:
    """Global options, resolved into a config on first use."""

    config_path: str | None = None
    cwd: str | None = None

    def load(self) -> TwStrataConfig:
        try:
            return load_config(self.config_path, cwd=self.cwd)
        except ConfigurationError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)


engine_option = click.option(
    "--engine",
    type=click.Choice(ENGINES),
    default="tailwind",
    show_default=True,
    help="Expansion engine; 'passthrough' treats sources as already expanded",
)
