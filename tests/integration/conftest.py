"""Pytest fixtures for end-to-end tests against real git repositories.

Each test gets a bare "upstream" repository and two clones of it: the
replica kept in sync by gitdrive and a second clone standing in for another
machine pushing to the same remote.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gitdrive.core.config import ReplicaConfig
from tests.integration.repos import INITIAL_NOTES, Clone, Upstream, git


@pytest.fixture(autouse=True)
def isolated_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user and system git configuration out of the tests."""
    global_config = tmp_path / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "gitdrive test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "gitdrive test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


@pytest.fixture
def upstream(tmp_path: Path, isolated_git: None) -> Upstream:
    """Create a bare upstream repository with one commit on master."""
    seed = tmp_path / "seed"
    seed.mkdir()
    git(seed, "init", "--quiet")
    git(seed, "symbolic-ref", "HEAD", "refs/heads/master")
    (seed / "notes.txt").write_text(INITIAL_NOTES, encoding="utf-8")
    (seed / "todo.txt").write_text("buy milk\n", encoding="utf-8")
    git(seed, "add", "notes.txt", "todo.txt")
    git(seed, "commit", "--quiet", "-m", "initial")

    path = tmp_path / "upstream.git"
    git(tmp_path, "clone", "--quiet", "--bare", str(seed), str(path))
    return Upstream(path)


@pytest.fixture
def local(upstream: Upstream, tmp_path: Path) -> Clone:
    """Create the replica kept in sync by gitdrive."""
    return upstream.clone(tmp_path / "local")


@pytest.fixture
def other(upstream: Upstream, tmp_path: Path) -> Clone:
    """Create a second clone, standing in for another machine."""
    return upstream.clone(tmp_path / "other")


@pytest.fixture
def replica(local: Clone) -> ReplicaConfig:
    """Create the replica configuration for the local clone."""
    return ReplicaConfig(watch_dir=local.path, remote="origin", branch="master", identity="laptop")
