"""CLI command: twstrata watch -- rebuild whenever sources or views change."""

from __future__ import annotations

import click

from twstrata.builder import build_all, make_engine
from twstrata.cli.common import CliState, engine_option
from twstrata.watch import Watcher


@click.command()
@engine_option
@click.option("--interval", type=float, default=None, help="Seconds between polls")
@click.pass_obj
def watch(state: CliState, engine: str, interval: float | None) -> None:
    """Build once, then rebuild on every change until interrupted.

    New view files matching the configured globs are picked up on the next
    poll. A failed build is reported and watching continues.
    """
    config = state.load()
    expansion = make_engine(engine, config)
    watcher = Watcher(config, lambda: build_all(config, expansion), interval=interval)

    click.secho("Starting watch mode...", fg="green")
    watcher.rebuild()
    try:
        watcher.run()
    except KeyboardInterrupt:
        watcher.stop()
        click.echo("Stopped watching.")
