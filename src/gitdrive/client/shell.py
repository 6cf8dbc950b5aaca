"""Shell command execution for gitdrive.

This module provides:
- CommandRunner: runs a shell command in a fixed working directory
- Runner: protocol implemented by CommandRunner and by test fakes
- CommandError and its subclasses: structured command failures

Every git and filesystem command issued by the sync engine goes through a
Runner, so the engine never spawns processes itself.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SHELL = "/bin/sh"


class CommandError(Exception):
    """Base exception for a failed command.

    Attributes:
        command: The command string that failed.
    """

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(message)


class NonZeroExitError(CommandError):
    """The command ran but exited with a non-zero status."""

    def __init__(self, command: str, stderr: str, returncode: int) -> None:
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(command, f"{command}: non-zero exit ({returncode}):\n{stderr}")


class CommandIOError(CommandError):
    """The command could not be spawned or its output could not be decoded."""

    def __init__(self, command: str, error: Exception) -> None:
        self.error = error
        super().__init__(command, f"{command}: i/o error: {error}")


class CommandTimeoutError(CommandError):
    """The command did not finish within the configured timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, f"{command}: timed out after {timeout:.0f}s")


class Runner(Protocol):
    """Anything that can run a shell command and return its stdout."""

    def run(self, command: str) -> str:
        """Run a command and return its standard output."""
        ...


class CommandRunner:
    """Runs shell commands with a fixed working directory.

    Commands are passed to /bin/sh verbatim, so pipes, redirections and
    ``||`` work. Callers are responsible for quoting arguments.
    """

    def __init__(self, work_dir: Path | str, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            work_dir: Directory every command runs in.
            timeout: Optional per-command timeout in seconds (None waits forever).
        """
        self._work_dir = Path(work_dir)
        self._timeout = timeout

    @property
    def work_dir(self) -> Path:
        """Directory commands run in."""
        return self._work_dir

    def run(self, command: str) -> str:
        """Run a command and return its standard output.

        Args:
            command: Shell command string.

        Returns:
            Decoded standard output.

        Raises:
            NonZeroExitError: The command exited with a non-zero status.
            CommandIOError: The command could not be spawned or produced
                output that is not valid UTF-8.
            CommandTimeoutError: The command exceeded the configured timeout.
        """
        logger.debug(command)

        try:
            completed = subprocess.run(
                [SHELL, "-c", command],
                cwd=self._work_dir,
                capture_output=True,
                check=False,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandTimeoutError(command, e.timeout) from e
        except OSError as e:
            raise CommandIOError(command, e) from e

        if completed.returncode != 0:
            raise NonZeroExitError(
                command,
                completed.stderr.decode("utf-8", errors="replace"),
                completed.returncode,
            )

        try:
            stdout = completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CommandIOError(command, e) from e

        logger.debug("stdout: %s", stdout)
        return stdout
