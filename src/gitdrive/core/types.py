"""Shared types for gitdrive.

This module defines enums used by the sync engine and the CLI.
"""

from __future__ import annotations

from enum import Enum


class SyncStage(str, Enum):
    """Stage of a synchronization cycle.

    Used to tag cycle failures and log lines with where they happened.
    """

    COMMIT = "commit"
    PROBE = "probe"
    INTEGRATE = "integrate"
    PUBLISH = "publish"
