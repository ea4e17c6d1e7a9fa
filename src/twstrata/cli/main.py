"""twstrata CLI entry point: Click group with subcommands."""

from __future__ import annotations

import click

from twstrata import __version__
from twstrata.cli.common import CliState, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="twstrata")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Config file (default: twstrata.yaml in the project root)",
)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Project root (default: current directory)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, cwd: str | None, verbose: bool) -> None:
    """twstrata - tiered Tailwind CSS builds: critical, global and per-page.

    Runs 'build' when no command is given.
    """
    setup_logging(verbose)
    ctx.obj = CliState(config_path=config_path, cwd=cwd)
    if ctx.invoked_subcommand is None:
        ctx.invoke(build)


# Import and register subcommands
from twstrata.cli.build import build  # noqa: E402
from twstrata.cli.vscode import vscode  # noqa: E402
from twstrata.cli.watch import watch  # noqa: E402

cli.add_command(build)
cli.add_command(watch)
cli.add_command(vscode)
