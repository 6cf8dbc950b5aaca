"""Core module - Replica configuration, errors and shared types."""

from gitdrive.core.config import (
    DEFAULT_BRANCH,
    DEFAULT_REMOTE,
    ReplicaConfig,
    default_identity,
    sanitize_identity,
)
from gitdrive.core.errors import (
    BranchNotFoundError,
    GitNotFoundError,
    NoSuchDirectoryError,
    NotARepositoryError,
    PreconditionError,
    RemoteNotFoundError,
    SyncError,
)
from gitdrive.core.types import SyncStage

__all__ = [
    # Config
    "DEFAULT_BRANCH",
    "DEFAULT_REMOTE",
    "ReplicaConfig",
    "default_identity",
    "sanitize_identity",
    # Errors
    "BranchNotFoundError",
    "GitNotFoundError",
    "NoSuchDirectoryError",
    "NotARepositoryError",
    "PreconditionError",
    "RemoteNotFoundError",
    "SyncError",
    # Types
    "SyncStage",
]
