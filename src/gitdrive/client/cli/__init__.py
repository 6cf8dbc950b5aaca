"""Command-line interface for gitdrive.

This module provides the main CLI entry point and assembles all commands.

Commands:
- sync: Keep a working tree in sync with its remote
- check: Validate that a working tree can be synced
- config: Show or set persistent defaults
"""

from __future__ import annotations

import click

from gitdrive.client.cli.check import check
from gitdrive.client.cli.config import (
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
)
from gitdrive.client.cli.settings import config_cmd
from gitdrive.client.cli.sync import sync


@click.group()
@click.version_option()
def cli() -> None:
    """gitdrive - a poor man's Google Docs on top of git."""


cli.add_command(sync)
cli.add_command(check)
cli.add_command(config_cmd)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
]
