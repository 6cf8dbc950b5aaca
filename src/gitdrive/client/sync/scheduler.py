"""Scheduler running sync cycles one after another.

This module provides:
- SyncScheduler: runs a single cycle, or cycles forever with a fixed delay
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from gitdrive.client.notifications import NullNotifier, notify_conflict, notify_error
from gitdrive.client.sync.types import SyncCycleError, SyncCycleResult

if TYPE_CHECKING:
    from gitdrive.client.notifications import Notifier
    from gitdrive.client.sync.engine import SyncEngine

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60.0  # seconds


class SyncScheduler:
    """Runs sync cycles sequentially with a fixed delay in between.

    A cycle never starts before the previous one has finished.
    """

    def __init__(
        self,
        engine: SyncEngine,
        interval: float = DEFAULT_INTERVAL,
        notifier: Notifier | None = None,
        keep_going: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the scheduler.

        Args:
            engine: Engine that performs each cycle.
            interval: Seconds to wait between cycles.
            notifier: Notifier for failures and resolved conflicts.
            keep_going: Log failed cycles and continue instead of raising.
            sleep: Sleep function (injectable for tests).
        """
        self._engine = engine
        self._interval = interval
        self._notifier: Notifier = notifier if notifier is not None else NullNotifier()
        self._keep_going = keep_going
        self._sleep = sleep
        self._cycles = 0

    @property
    def cycles(self) -> int:
        """Number of cycles run so far."""
        return self._cycles

    def run_once(self) -> SyncCycleResult:
        """Run a single cycle.

        Returns:
            Result of the cycle.

        Raises:
            SyncCycleError: The cycle failed.
        """
        self._cycles += 1
        watch_dir = str(self._engine.config.watch_dir)
        try:
            result = self._engine.sync()
        except SyncCycleError as e:
            logger.error("sync of %s failed: %s", watch_dir, e)
            notify_error(self._notifier, f"{watch_dir}: {e}")
            raise

        if result.has_conflicts:
            notify_conflict(self._notifier, watch_dir, result.conflicts_resolved)
        logger.info("finished sync of %s", watch_dir)
        return result

    def run_forever(self, max_cycles: int | None = None) -> None:
        """Run cycles until interrupted.

        Args:
            max_cycles: Stop after this many cycles (None runs forever).

        Raises:
            SyncCycleError: A cycle failed and keep_going is off.
        """
        logger.info(
            "watching %s (every %.0fs)",
            self._engine.config.watch_dir,
            self._interval,
        )
        ran = 0
        while True:
            try:
                self.run_once()
            except SyncCycleError:
                if not self._keep_going:
                    raise
                logger.info("continuing after failed sync (retry in %.0fs)", self._interval)

            ran += 1
            if max_cycles is not None and ran >= max_cycles:
                return
            self._sleep(self._interval)
