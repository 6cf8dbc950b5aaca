"""Helpers for driving real git repositories in end-to-end tests."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

INITIAL_NOTES = "line one\nline two\nline three\n"
TEN_LINES = "".join(f"line {i}\n" for i in range(1, 11))


def git(cwd: Path, *args: str) -> str:
    """Run a git command and return its stdout."""
    completed = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


@dataclass
class Clone:
    """A working tree cloned from the upstream repository."""

    path: Path

    def write(self, relative_path: str, content: str) -> Path:
        file_path = self.path / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    def read(self, relative_path: str) -> str:
        return (self.path / relative_path).read_text(encoding="utf-8")

    def git(self, *args: str) -> str:
        return git(self.path, *args)

    def commit_and_push(self, message: str) -> None:
        self.git("commit", "--quiet", "-am", message)
        self.git("push", "--quiet", "origin", "master")

    def pull(self) -> None:
        self.git("pull", "--quiet", "--ff-only", "origin", "master")

    def head(self, ref: str = "master") -> str:
        return self.git("rev-parse", ref).strip()

    def commit_count(self) -> int:
        return int(self.git("rev-list", "--count", "master").strip())

    def disconnect(self) -> None:
        """Point origin at a repository that does not exist."""
        self.git("remote", "set-url", "origin", str(self.path.parent / "gone.git"))

    def reconnect(self, upstream: Upstream) -> None:
        self.git("remote", "set-url", "origin", str(upstream.path))


@dataclass
class Upstream:
    """The bare repository both clones push to."""

    path: Path

    def head(self) -> str:
        return git(self.path, "rev-parse", "master").strip()

    def show(self, relative_path: str) -> str:
        return git(self.path, "show", f"master:{relative_path}")

    def files(self) -> list[str]:
        return git(self.path, "ls-tree", "--name-only", "master").split()

    def clone(self, path: Path) -> Clone:
        git(path.parent, "clone", "--quiet", str(self.path), str(path))
        return Clone(path)
