"""Check command for gitdrive CLI.

Commands:
- check: Validate that a working tree can be synced
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from gitdrive.client.cli.config import load_config, resolve_setting


@click.command()
@click.argument(
    "watch_dir",
    type=click.Path(path_type=Path),
    default=".",
    required=False,
)
@click.option("--remote", default=None, help="Remote sync repository (default: origin).")
@click.option("--branch", default=None, help="Local branch to sync (default: master).")
def check(watch_dir: Path, remote: str | None, branch: str | None) -> None:
    """Check that WATCH_DIR can be synced.

    Verifies the directory is a git working tree with the remote and
    branch present, without touching the repository.
    """
    from gitdrive.core.config import ReplicaConfig
    from gitdrive.core.errors import PreconditionError

    config = load_config()
    replica = ReplicaConfig(
        watch_dir=watch_dir,
        remote=resolve_setting(remote, "remote", config, str),
        branch=resolve_setting(branch, "branch", config, str),
    )

    try:
        replica.validate()
    except PreconditionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"OK: {replica.watch_dir} syncs {replica.branch} with {replica.upstream_ref}")
