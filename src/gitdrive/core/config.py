"""Replica configuration for gitdrive.

This module defines the immutable per-process configuration of the replica
and the precondition checks that run before any sync cycle.
"""

from __future__ import annotations

import shutil
import socket
from dataclasses import dataclass
from pathlib import Path

from gitdrive.core.errors import (
    BranchNotFoundError,
    GitNotFoundError,
    NoSuchDirectoryError,
    NotARepositoryError,
    RemoteNotFoundError,
)

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"


def sanitize_identity(name: str) -> str:
    """Sanitize an identity label so it is safe inside a commit message.

    Only allows alphanumeric characters, hyphens, underscores and dots.
    Other characters are replaced with underscores.
    """
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name)


def default_identity() -> str:
    """Get the default identity label (the sanitized hostname)."""
    return sanitize_identity(socket.gethostname())


@dataclass(frozen=True)
class ReplicaConfig:
    """Configuration of the local replica.

    Attributes:
        watch_dir: Working tree to keep in sync.
        remote: Name of the remote to sync with.
        branch: Local branch to sync.
        identity: Label embedded in every automatic commit message.
    """

    watch_dir: Path
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    identity: str = ""

    def __post_init__(self) -> None:
        """Normalize the working directory and fill in the identity."""
        object.__setattr__(self, "watch_dir", Path(self.watch_dir).expanduser().absolute())
        if not self.identity:
            object.__setattr__(self, "identity", default_identity())

    @property
    def git_dir(self) -> Path:
        """Path to the repository metadata directory."""
        return self.watch_dir / ".git"

    @property
    def upstream_ref(self) -> str:
        """Remote-tracking ref of the synced branch, e.g. ``origin/master``."""
        return f"{self.remote}/{self.branch}"

    def validate(self) -> None:
        """Check that the replica can be synced.

        Checks run in order and stop at the first failure.

        Raises:
            NoSuchDirectoryError: watch_dir is missing or not a directory.
            GitNotFoundError: the git executable is not on PATH.
            NotARepositoryError: watch_dir has no .git directory.
            RemoteNotFoundError: the remote has no refs under .git/refs/remotes.
            BranchNotFoundError: the branch has no ref under .git/refs/heads.
        """
        if not self.watch_dir.is_dir():
            raise NoSuchDirectoryError(self.watch_dir)

        if shutil.which("git") is None:
            raise GitNotFoundError()

        if not self.git_dir.is_dir():
            raise NotARepositoryError(self.watch_dir)

        # remote must exist: .git/refs/remotes/<remote>
        if not (self.git_dir / "refs" / "remotes" / self.remote).is_dir():
            raise RemoteNotFoundError(self.remote)

        # branch must exist: .git/refs/heads/<branch>
        if not (self.git_dir / "refs" / "heads" / self.branch).is_file():
            raise BranchNotFoundError(self.branch)
