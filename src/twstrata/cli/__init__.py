"""twstrata command-line interface."""

from twstrata.cli.main import cli

__all__ = ["cli"]
