"""CLI command: twstrata vscode -- export Tailwind IntelliSense settings."""

from __future__ import annotations

import sys

import click

from twstrata.builder import resolve_source_groups
from twstrata.cli.common import CliState
from twstrata.errors import TwStrataError
from twstrata.groups.resolver import ensure_source_stubs
from twstrata.vscode import build_vscode_settings, find_settings_file, update_vscode_settings


@click.command()
@click.pass_obj
def vscode(state: CliState) -> None:
    """Point the Tailwind CSS IntelliSense extension at each group's source.

    Updates ``.vscode/settings.json`` in the nearest directory that has a
    ``.vscode`` folder, or creates one in the project root.
    """
    config = state.load()
    settings_path = find_settings_file(config.root)

    try:
        group_map = resolve_source_groups(config)
        ensure_source_stubs(group_map, config.source_path, stub_import=config.stub_import)
        settings = build_vscode_settings(
            group_map, config.source_path, settings_path.parent.parent
        )
        update_vscode_settings(settings_path, settings)
    except TwStrataError as exc:
        click.secho(f"Cannot update VS Code settings: {exc}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"Updated {settings_path} ({len(group_map)} group(s))", fg="green")
