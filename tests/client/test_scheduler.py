"""Tests for the sync scheduler."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitdrive.client.notifications import EVENT_CONFLICT, EVENT_SYNC_FAILED
from gitdrive.client.shell import NonZeroExitError
from gitdrive.client.sync.scheduler import SyncScheduler
from gitdrive.client.sync.types import SyncCycleError, SyncCycleResult
from gitdrive.core.types import SyncStage


def cycle_error() -> SyncCycleError:
    return SyncCycleError(SyncStage.PUBLISH, NonZeroExitError("git push", "rejected", 1))


@pytest.fixture
def engine(tmp_path: Path) -> MagicMock:
    """Create a mock engine whose cycles succeed."""
    engine = MagicMock()
    engine.config.watch_dir = tmp_path
    engine.sync.return_value = SyncCycleResult(reachable=True)
    return engine


@pytest.fixture
def notifier() -> MagicMock:
    notifier = MagicMock()
    notifier.notify.return_value = True
    return notifier


class TestRunOnce:
    """Tests for single-shot mode."""

    def test_returns_result(self, engine: MagicMock) -> None:
        scheduler = SyncScheduler(engine)
        assert scheduler.run_once().reachable is True
        assert scheduler.cycles == 1

    def test_failure_raises_and_notifies(self, engine: MagicMock, notifier: MagicMock) -> None:
        engine.sync.side_effect = cycle_error()
        scheduler = SyncScheduler(engine, notifier=notifier)

        with pytest.raises(SyncCycleError):
            scheduler.run_once()

        event, notification = notifier.notify.call_args[0]
        assert event == EVENT_SYNC_FAILED
        assert "publish" in notification.message

    def test_conflicts_notified(self, engine: MagicMock, notifier: MagicMock) -> None:
        engine.sync.return_value = SyncCycleResult(reachable=True, conflicts_resolved=["a.txt"])

        SyncScheduler(engine, notifier=notifier).run_once()

        event, notification = notifier.notify.call_args[0]
        assert event == EVENT_CONFLICT
        assert "a.txt" in notification.message

    def test_quiet_cycle_not_notified(self, engine: MagicMock, notifier: MagicMock) -> None:
        SyncScheduler(engine, notifier=notifier).run_once()
        notifier.notify.assert_not_called()


class TestRunForever:
    """Tests for watch mode."""

    def test_sleeps_between_cycles(self, engine: MagicMock) -> None:
        sleep = MagicMock()
        scheduler = SyncScheduler(engine, interval=30, sleep=sleep)

        scheduler.run_forever(max_cycles=3)

        assert engine.sync.call_count == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(30)

    def test_failure_stops_loop(self, engine: MagicMock) -> None:
        engine.sync.side_effect = [SyncCycleResult(), cycle_error(), SyncCycleResult()]
        sleep = MagicMock()
        scheduler = SyncScheduler(engine, sleep=sleep)

        with pytest.raises(SyncCycleError):
            scheduler.run_forever(max_cycles=3)

        assert engine.sync.call_count == 2

    def test_keep_going_continues_after_failure(self, engine: MagicMock) -> None:
        engine.sync.side_effect = [cycle_error(), SyncCycleResult(), SyncCycleResult()]
        scheduler = SyncScheduler(engine, keep_going=True, sleep=MagicMock())

        scheduler.run_forever(max_cycles=3)

        assert engine.sync.call_count == 3
        assert scheduler.cycles == 3
