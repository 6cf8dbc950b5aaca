"""Desktop notifications for gitdrive.

This module provides:
- Native OS notifications (macOS notification center, Linux notify-send)
- Notifier implementations: DesktopNotifier, NullNotifier and DedupNotifier,
  which suppresses repeats of the same event for a while
"""

from __future__ import annotations

import logging
import platform
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

logger = logging.getLogger(__name__)

APP_NAME = "gitdrive"

# Event codes, used for deduplication
EVENT_SYNC_FAILED = "sync-failed"
EVENT_CONFLICT = "conflict"


class NotificationType(Enum):
    """Type of notification."""

    ERROR = auto()
    CONFLICT = auto()


@dataclass
class Notification:
    """Represents a notification to display."""

    title: str
    message: str
    type: NotificationType


def _notify_macos(notification: Notification) -> bool:
    """Send notification on macOS using osascript.

    Args:
        notification: The notification to send.

    Returns:
        True if notification was sent successfully.
    """
    try:
        # Escape quotes in title and message
        title = notification.title.replace('"', '\\"')
        message = notification.message.replace('"', '\\"')

        script = f'display notification "{message}" with title "{title}"'
        subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            check=True,
        )
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"macOS notification failed: {e}")
        return False


def _notify_linux(notification: Notification) -> bool:
    """Send notification on Linux using notify-send.

    Args:
        notification: The notification to send.

    Returns:
        True if notification was sent successfully.
    """
    try:
        # Map notification type to urgency
        urgency_map = {
            NotificationType.ERROR: "critical",
            NotificationType.CONFLICT: "normal",
        }
        urgency = urgency_map.get(notification.type, "normal")

        subprocess.run(
            [
                "notify-send",
                "--urgency", urgency,
                "--app-name", APP_NAME,
                notification.title,
                notification.message,
            ],
            capture_output=True,
            check=True,
        )
        return True
    except FileNotFoundError:
        logger.debug("notify-send not found")
        return False
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"Linux notification failed: {e}")
        return False


def send_notification(notification: Notification) -> bool:
    """Send a system notification.

    Uses native OS notification system:
    - macOS: Notification Center via osascript
    - Linux: notify-send

    Args:
        notification: The notification to send.

    Returns:
        True if notification was sent, False if failed or unavailable.
    """
    system = platform.system()

    if system == "Darwin":
        return _notify_macos(notification)
    elif system == "Linux":
        return _notify_linux(notification)
    else:
        logger.warning(f"Notifications not supported on {system}")
        return False


class Notifier(Protocol):
    """Sends a notification for an event code."""

    def notify(self, event: str, notification: Notification) -> bool:
        """Send a notification; ``event`` identifies its kind for deduplication."""
        ...


class DesktopNotifier:
    """Notifier that shows native desktop notifications."""

    def notify(self, event: str, notification: Notification) -> bool:
        return send_notification(notification)


class NullNotifier:
    """Notifier that drops every notification."""

    def notify(self, event: str, notification: Notification) -> bool:
        return False


class DedupNotifier:
    """Suppresses repeated notifications of the same event.

    An event that fired less than ``interval`` seconds ago is dropped.
    Only notifications the wrapped notifier actually sent start a new
    suppression window.
    """

    def __init__(
        self,
        wrapped: Notifier,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the notifier.

        Args:
            wrapped: Notifier that sends non-duplicate notifications.
            interval: Seconds during which repeats of an event are dropped.
            clock: Monotonic time source.
        """
        self._wrapped = wrapped
        self._interval = interval
        self._clock = clock
        self._fired: dict[str, float] = {}

    def notify(self, event: str, notification: Notification) -> bool:
        now = self._clock()
        last_fired = self._fired.get(event)
        if last_fired is not None and now < last_fired + self._interval:
            logger.debug(
                "notification dedup: %s suppressed for another %.0fs",
                event,
                last_fired + self._interval - now,
            )
            return False

        if not self._wrapped.notify(event, notification):
            return False

        self._fired[event] = now
        return True


def build_notifier(use_desktop: bool, dedup_interval: float) -> Notifier:
    """Build the notifier used by the sync loop.

    Args:
        use_desktop: Show desktop notifications (otherwise notifications are dropped).
        dedup_interval: Seconds during which duplicate events are suppressed.
    """
    wrapped: Notifier = DesktopNotifier() if use_desktop else NullNotifier()
    return DedupNotifier(wrapped, dedup_interval)


def notify_conflict(notifier: Notifier, watch_dir: str, paths: list[str]) -> bool:
    """Send a conflict notification.

    Args:
        notifier: Notifier to send through.
        watch_dir: Working tree where conflicts were resolved.
        paths: Files resolved in favor of local changes.

    Returns:
        True if notification was sent.
    """
    return notifier.notify(EVENT_CONFLICT, Notification(
        title="gitdrive - Conflict Resolved",
        message=(
            f"Kept local changes in {len(paths)} file(s) in {watch_dir}: "
            + ", ".join(paths)
        ),
        type=NotificationType.CONFLICT,
    ))


def notify_error(notifier: Notifier, message: str) -> bool:
    """Send an error notification.

    Args:
        notifier: Notifier to send through.
        message: Error message.

    Returns:
        True if notification was sent.
    """
    return notifier.notify(EVENT_SYNC_FAILED, Notification(
        title="gitdrive - Sync Failed",
        message=message,
        type=NotificationType.ERROR,
    ))
