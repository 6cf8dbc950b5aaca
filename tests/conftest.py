"""Shared pytest fixtures.

Provides a scripted fake command runner and a replica directory with just
enough repository metadata to pass validation.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from gitdrive.core.config import ReplicaConfig
from tests.fakes import FakeRunner, make_repo_skeleton


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Create an empty fake runner."""
    return FakeRunner()


@pytest.fixture
def git_on_path() -> Generator[None, None, None]:
    """Pretend the git executable is installed."""
    with patch("gitdrive.core.config.shutil.which", return_value="/usr/bin/git"):
        yield


@pytest.fixture
def replica(tmp_path: Path, git_on_path: None) -> ReplicaConfig:
    """Create a replica config pointing at a valid repository skeleton."""
    watch_dir = make_repo_skeleton(tmp_path / "replica")
    return ReplicaConfig(watch_dir=watch_dir, remote="origin", branch="master", identity="laptop")
