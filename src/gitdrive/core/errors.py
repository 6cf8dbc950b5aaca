"""Exception hierarchy shared by the engine and the CLI.

This module provides:
- SyncError: base class for every gitdrive failure
- PreconditionError and its subclasses: raised while validating a replica
"""

from __future__ import annotations

from pathlib import Path


class SyncError(Exception):
    """Base exception for sync errors."""


class PreconditionError(SyncError):
    """The replica cannot be synced as configured."""


class NoSuchDirectoryError(PreconditionError):
    """The working directory does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"no such directory: {path}")


class GitNotFoundError(PreconditionError):
    """The git executable is not on PATH."""

    def __init__(self) -> None:
        super().__init__("git executable not found on PATH")


class NotARepositoryError(PreconditionError):
    """The working directory is not a git working tree."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"not a git repository: {path}")


class RemoteNotFoundError(PreconditionError):
    """The remote has no tracking refs in the repository."""

    def __init__(self, remote: str) -> None:
        self.remote = remote
        super().__init__(f"remote does not exist: {remote}")


class BranchNotFoundError(PreconditionError):
    """The branch does not exist as a local ref."""

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(f"branch does not exist: {branch}")
