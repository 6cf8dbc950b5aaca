"""Shared types and dataclasses for sync operations.

This module provides:
- RevisionCountParseError, ResolutionDidNotConvergeError, SyncCycleError:
  Exception classes raised during a cycle
- ConflictSet: Files currently unmerged during a paused rebase
- SyncCycleResult: Outcome of a successful cycle
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from gitdrive.core.errors import SyncError
from gitdrive.core.types import SyncStage


class RevisionCountParseError(SyncError):
    """A commit count query returned something that is not an integer."""

    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__(f"parse error: expected a commit count, got {output!r}")


class ResolutionDidNotConvergeError(SyncError):
    """The conflict resolution loop kept finding unmerged files.

    Attributes:
        iterations: Number of resolution rounds that ran.
        remaining: Paths still unmerged when the loop gave up.
    """

    def __init__(self, iterations: int, remaining: tuple[str, ...]) -> None:
        self.iterations = iterations
        self.remaining = remaining
        super().__init__(
            f"conflict resolution did not converge after {iterations} rounds; "
            f"still unmerged: {', '.join(remaining)}"
        )


class SyncCycleError(SyncError):
    """A sync cycle failed.

    The underlying failure is chained as ``__cause__``.

    Attributes:
        stage: Stage of the cycle that failed.
    """

    def __init__(self, stage: SyncStage, cause: Exception) -> None:
        self.stage = stage
        super().__init__(f"sync failed during {stage.value}: {cause}")


@dataclass(frozen=True)
class ConflictSet:
    """Paths marked unmerged in the index.

    Built fresh on every resolution round, never reused across rounds.
    """

    paths: tuple[str, ...] = ()

    @classmethod
    def parse(cls, output: str) -> ConflictSet:
        """Build a conflict set from NUL-separated ``git diff -z`` output."""
        seen: dict[str, None] = {}
        for path in output.split("\0"):
            if path:
                seen.setdefault(path, None)
        return cls(tuple(seen))

    def __bool__(self) -> bool:
        return bool(self.paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)


@dataclass
class SyncCycleResult:
    """Result of a successful sync cycle.

    Attributes:
        committed: A commit of local changes was created.
        reachable: The remote answered the connectivity probe.
        remote_commits: Commits on the remote branch missing locally.
        conflicts_resolved: Paths resolved in favor of the local side.
        local_commits: Commits on the local branch missing on the remote.
        pushed: The local branch was pushed.
    """

    committed: bool = False
    reachable: bool = False
    remote_commits: int = 0
    conflicts_resolved: list[str] = field(default_factory=list)
    local_commits: int = 0
    pushed: bool = False

    @property
    def changed(self) -> bool:
        """Check if the cycle did anything."""
        return self.committed or self.remote_commits > 0 or self.pushed

    @property
    def has_conflicts(self) -> bool:
        """Check if any conflicts were resolved."""
        return len(self.conflicts_resolved) > 0
