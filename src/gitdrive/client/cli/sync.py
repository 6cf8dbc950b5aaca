"""Sync command for gitdrive CLI.

Commands:
- sync: Keep a git working tree in sync with its remote
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from gitdrive.client.cli.config import (
    ConfigError,
    load_config,
    parse_bool,
    parse_seconds,
    resolve_setting,
)
from gitdrive.client.cli.log import setup_logging


@click.command()
@click.argument(
    "watch_dir",
    type=click.Path(path_type=Path),
    default=".",
    required=False,
)
@click.option("--remote", default=None, help="Remote sync repository (default: origin).")
@click.option("--branch", default=None, help="Local branch to sync with remote (default: master).")
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds between successive sync attempts (default: 60).",
)
@click.option("--once", is_flag=True, help="Sync once, without entering watch mode.")
@click.option("--identity", default=None, help="Label used in commit messages (default: hostname).")
@click.option("--keep-going", is_flag=True, help="Keep watching after a failed sync.")
@click.option(
    "--notify/--no-notify",
    default=None,
    help="Show desktop notifications on errors and resolved conflicts.",
)
@click.option(
    "--notify-dedup-interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds during which duplicate notifications are suppressed (default: 3600).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up on a single git command after this many seconds (default: never).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every git command.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Also write logs to this file.",
)
def sync(
    watch_dir: Path,
    remote: str | None,
    branch: str | None,
    interval: float | None,
    once: bool,
    identity: str | None,
    keep_going: bool,
    notify: bool | None,
    notify_dedup_interval: float | None,
    timeout: float | None,
    verbose: bool,
    log_file: Path | None,
) -> None:
    """Continuously sync modifications to git-tracked files.

    Changes to tracked files in WATCH_DIR are periodically committed and
    synced with the remote: remote changes are rebased onto, conflicts are
    resolved in favor of local changes, and the result is pushed.
    The remote needs to be set up for password-less push.
    """
    from gitdrive.client.notifications import build_notifier
    from gitdrive.client.shell import CommandRunner
    from gitdrive.client.sync import SyncCycleError, SyncEngine, SyncScheduler
    from gitdrive.core.config import ReplicaConfig
    from gitdrive.core.errors import PreconditionError

    setup_logging(verbose=verbose, log_path=log_file)

    config = load_config()
    try:
        replica = ReplicaConfig(
            watch_dir=watch_dir,
            remote=resolve_setting(remote, "remote", config, str),
            branch=resolve_setting(branch, "branch", config, str),
            identity=resolve_setting(identity, "identity", config, str),
        )
        engine = SyncEngine(replica, runner=CommandRunner(replica.watch_dir, timeout=timeout))
        notifier = build_notifier(
            use_desktop=resolve_setting(notify, "notify", config, parse_bool),
            dedup_interval=resolve_setting(
                notify_dedup_interval, "notify_dedup_interval", config, parse_seconds
            ),
        )
        interval = resolve_setting(interval, "interval", config, parse_seconds)
    except (PreconditionError, ConfigError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    scheduler = SyncScheduler(
        engine,
        interval=interval,
        notifier=notifier,
        keep_going=keep_going,
    )

    try:
        if once:
            result = scheduler.run_once()
            if not result.reachable:
                click.echo("Remote unreachable, local changes kept for the next sync.")
            elif not result.changed:
                click.echo("Everything is up to date.")
        else:
            scheduler.run_forever()
    except SyncCycleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nStopping...")
