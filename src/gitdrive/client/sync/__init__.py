"""Git-backed synchronization of a working tree with its remote.

Architecture:
    SyncScheduler → SyncEngine → ConflictResolver → CommandRunner

Components:
- **SyncEngine**: Runs one cycle: commit, connectivity probe, fetch/rebase,
  conflict resolution, push
- **ConflictResolver**: Drives a paused rebase to completion with a
  local-wins three-way merge
- **SyncScheduler**: Runs cycles sequentially with a fixed delay

All public symbols are re-exported here.
"""

from gitdrive.client.sync.conflict import (
    DEFAULT_MAX_ITERATIONS,
    ConflictResolver,
    list_conflicts,
    list_stages,
)
from gitdrive.client.sync.engine import SyncEngine, timestamp
from gitdrive.client.sync.scheduler import DEFAULT_INTERVAL, SyncScheduler
from gitdrive.client.sync.types import (
    ConflictSet,
    ResolutionDidNotConvergeError,
    RevisionCountParseError,
    SyncCycleError,
    SyncCycleResult,
)

__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_MAX_ITERATIONS",
    "ConflictResolver",
    "ConflictSet",
    "ResolutionDidNotConvergeError",
    "RevisionCountParseError",
    "SyncCycleError",
    "SyncCycleResult",
    "SyncEngine",
    "SyncScheduler",
    "list_conflicts",
    "list_stages",
    "timestamp",
]
