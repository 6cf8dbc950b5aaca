"""Config commands for gitdrive CLI.

Commands:
- config show: Print the effective defaults
- config set: Persist a default
"""

from __future__ import annotations

import sys

import click

from gitdrive.client.cli.config import (
    CONFIG_KEYS,
    ConfigError,
    get_config_file,
    load_config,
    set_config_value,
)


@click.group("config")
def config_cmd() -> None:
    """Manage persistent defaults for gitdrive commands."""


@config_cmd.command("show")
def show() -> None:
    """Show the effective defaults and where they come from."""
    config = load_config()
    click.echo(f"Config file: {get_config_file()}")
    for key, default in CONFIG_KEYS.items():
        if key in config:
            click.echo(f"  {key} = {config[key]}")
        else:
            click.echo(f"  {key} = {default or '(unset)'} (default)")


@config_cmd.command("set")
@click.argument("key")
@click.argument("value")
def set_value(key: str, value: str) -> None:
    """Set KEY to VALUE in the config file."""
    try:
        set_config_value(key, value)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"{key} = {value}")
