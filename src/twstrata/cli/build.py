"""CLI command: twstrata build -- build every stylesheet once."""

from __future__ import annotations

import sys

import click

from twstrata.builder import build_all, format_duration, make_engine
from twstrata.cli.common import CliState, engine_option
from twstrata.errors import TwStrataError


@click.command()
@engine_option
@click.pass_obj
def build(state: CliState, engine: str) -> None:
    """Build the critical, global and page stylesheets.

    Exits with code 1 when the build cannot complete, for example when the
    global stylesheet fails to expand. A failing page group is reported but
    does not fail the build.
    """
    config = state.load()
    click.secho("Running build command...", fg="green")

    try:
        report = build_all(config, make_engine(engine, config))
    except TwStrataError as exc:
        click.secho(f"Build failed: {exc}", fg="red", err=True)
        sys.exit(1)

    click.secho(
        f"Build time: {format_duration(report.duration)} "
        f"({len(report.written)} stylesheet(s) in {config.out_path})",
        fg="green",
    )
