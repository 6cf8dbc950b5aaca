"""Sync engine keeping a git working tree converged with its remote.

This module provides:
- SyncEngine: runs one synchronization cycle (commit, probe, integrate, publish)

A cycle commits modified tracked files, checks that the remote is reachable,
rebases onto new remote commits (resolving conflicts in favor of the local
side) and pushes whatever the remote does not have yet.
"""

from __future__ import annotations

import contextlib
import logging
import shlex
from collections.abc import Iterator
from datetime import UTC, datetime

from gitdrive.client.shell import CommandError, CommandRunner, Runner
from gitdrive.client.sync.conflict import (
    DEFAULT_MAX_ITERATIONS,
    ConflictResolver,
    list_conflicts,
)
from gitdrive.client.sync.types import (
    RevisionCountParseError,
    SyncCycleError,
    SyncCycleResult,
)
from gitdrive.core.config import ReplicaConfig
from gitdrive.core.errors import SyncError
from gitdrive.core.types import SyncStage

logger = logging.getLogger(__name__)


def timestamp(now: datetime | None = None) -> str:
    """Format a UTC timestamp as ISO-8601 with offset, e.g. 2024-01-31T12:00:00+00:00."""
    if now is None:
        now = datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="seconds")


class SyncEngine:
    """Synchronizes a local branch with the same branch on a remote."""

    def __init__(
        self,
        config: ReplicaConfig,
        runner: Runner | None = None,
        max_resolve_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        """Validate the configuration and initialize the engine.

        Args:
            config: Replica configuration, validated once here.
            runner: Command runner (defaults to a CommandRunner in watch_dir).
            max_resolve_iterations: Guard on conflict resolution rounds.

        Raises:
            PreconditionError: The configuration cannot be synced.
        """
        config.validate()
        self._config = config
        self._runner = runner if runner is not None else CommandRunner(config.watch_dir)
        self._resolver = ConflictResolver(
            self._runner, config.watch_dir, max_iterations=max_resolve_iterations
        )
        logger.debug(
            "sync engine ready: dir=%s remote=%s branch=%s identity=%s",
            config.watch_dir,
            config.remote,
            config.branch,
            config.identity,
        )

    @property
    def config(self) -> ReplicaConfig:
        """Replica configuration."""
        return self._config

    def sync(self) -> SyncCycleResult:
        """Perform one synchronization cycle.

        Returns:
            SyncCycleResult describing what the cycle did.

        Raises:
            SyncCycleError: A stage failed; the remaining stages were skipped.
        """
        logger.info("syncing %s ...", self._config.watch_dir)
        result = SyncCycleResult()

        with self._stage(SyncStage.COMMIT):
            result.committed = self.commit_local_changes()

        with self._stage(SyncStage.PROBE):
            result.reachable = self.has_connectivity()
        if not result.reachable:
            logger.info("remote unreachable, cannot rebase local changes ...")
            return result

        with self._stage(SyncStage.INTEGRATE):
            result.remote_commits, result.conflicts_resolved = self.integrate_remote_changes()

        with self._stage(SyncStage.PUBLISH):
            result.local_commits, result.pushed = self.publish_local_changes()

        return result

    def commit_local_changes(self) -> bool:
        """Commit modified tracked files on the configured branch.

        Returns:
            True if a commit was created.
        """
        self._run(f"git checkout {shlex.quote(self._config.branch)}")

        modified = self.modified_files()
        if not modified:
            logger.info("no local changes")
            return False

        logger.info("committing local changes (%d file(s)) ...", len(modified))
        self._run("git add -- " + " ".join(shlex.quote(path) for path in modified))
        self._run(f"git commit -m {shlex.quote(self.commit_message())}")
        return True

    def modified_files(self) -> list[str]:
        """List tracked files with uncommitted modifications."""
        output = self._run("git ls-files -z --modified")
        # unmerged entries are listed once per stage
        return list(dict.fromkeys(path for path in output.split("\0") if path))

    def commit_message(self, now: datetime | None = None) -> str:
        """Build the message for an automatic commit."""
        return f"{self._config.identity}: {timestamp(now)}"

    def has_connectivity(self) -> bool:
        """Check if the remote is reachable.

        Checked fresh on every call; a failing probe means unreachable.
        """
        try:
            self._run(f"git ls-remote --exit-code --heads {shlex.quote(self._config.remote)}")
        except CommandError as e:
            logger.debug("connectivity probe failed: %s", e)
            return False
        return True

    def integrate_remote_changes(self) -> tuple[int, list[str]]:
        """Fetch the remote branch and rebase local commits onto it.

        Returns:
            Tuple of (new remote commits, paths resolved in favor of local).
        """
        logger.debug("fetching remote changes ...")
        self._run(
            f"git fetch {shlex.quote(self._config.remote)} {shlex.quote(self._config.branch)}"
        )

        remote_commits = self._count_commits(self._config.branch, self._config.upstream_ref)
        if remote_commits == 0:
            logger.info("no remote changes")
            return 0, []

        logger.info("rebasing onto %d remote commit(s) ...", remote_commits)
        try:
            self._run(f"git rebase {shlex.quote(self._config.upstream_ref)}")
        except CommandError as e:
            # a conflicted rebase pauses with a non-zero exit
            if not list_conflicts(self._runner):
                raise
            logger.debug("rebase paused on conflicts: %s", e)

        try:
            resolved = self._resolver.resolve()
        except (CommandError, SyncError):
            self._abort_rebase()
            raise

        if resolved:
            logger.info("resolved %d conflict(s) in favor of local changes", len(resolved))
        return remote_commits, resolved

    def publish_local_changes(self) -> tuple[int, bool]:
        """Push the branch if it has commits the remote does not.

        Returns:
            Tuple of (local commits ahead of the remote, whether a push ran).
        """
        local_commits = self._count_commits(self._config.upstream_ref, self._config.branch)
        if local_commits == 0:
            logger.info("no local changes to push")
            return 0, False

        logger.info("pushing %d local commit(s) ...", local_commits)
        self._run(
            f"git push {shlex.quote(self._config.remote)} {shlex.quote(self._config.branch)}"
        )
        return local_commits, True

    def _count_commits(self, since: str, until: str) -> int:
        """Count commits reachable from ``until`` but not from ``since``."""
        output = self._run(f"git rev-list --count {shlex.quote(f'{since}..{until}')}")
        try:
            return int(output.strip())
        except ValueError as e:
            raise RevisionCountParseError(output) from e

    def _abort_rebase(self) -> None:
        """Abort an in-progress rebase after failed conflict resolution."""
        logger.error("aborting rebase after failure to resolve conflicts")
        try:
            self._run("git rebase --abort")
        except CommandError as e:
            logger.error("git rebase --abort failed: %s", e)

    def _run(self, command: str) -> str:
        return self._runner.run(command)

    @contextlib.contextmanager
    def _stage(self, stage: SyncStage) -> Iterator[None]:
        """Wrap failures raised inside a stage in SyncCycleError."""
        logger.debug("stage: %s", stage.value)
        try:
            yield
        except (CommandError, SyncError) as e:
            raise SyncCycleError(stage, e) from e
