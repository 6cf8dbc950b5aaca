"""Conflict resolution for a paused rebase.

This module provides:
- ConflictResolver: drives a conflicted rebase to completion, resolving every
  colliding region in favor of the local side
- list_conflicts: query the files currently unmerged in the index
- list_stages: query which index stages an unmerged file has

During ``git rebase <upstream>`` the index stages of an unmerged file are:
stage 1 is the common ancestor, stage 2 the upstream commit being rebased
onto, and stage 3 the local commit being replayed.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from gitdrive.client.shell import CommandError, Runner
from gitdrive.client.sync.types import ConflictSet, ResolutionDidNotConvergeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100

# index stage -> suffix of the extracted scratch file
STAGE_BASE = 1
STAGE_UPSTREAM = 2
STAGE_LOCAL = 3
SCRATCH_SUFFIXES = {
    STAGE_BASE: ".base",
    STAGE_UPSTREAM: ".upstream",
    STAGE_LOCAL: ".local",
}


def list_conflicts(runner: Runner) -> ConflictSet:
    """Get the set of files currently marked unmerged."""
    return ConflictSet.parse(runner.run("git diff --name-only --diff-filter=U -z"))


def list_stages(runner: Runner, path: str) -> set[int]:
    """Get the index stages present for an unmerged file.

    Add/add conflicts have no base stage; modify/delete conflicts lack the
    stage of the side that deleted the file.
    """
    output = runner.run(f"git ls-files -u -z -- {shlex.quote(path)}")
    stages = set()
    for entry in output.split("\0"):
        if not entry:
            continue
        # "<mode> <object> <stage>\t<path>"
        meta, _, _ = entry.partition("\t")
        stages.add(int(meta.split()[2]))
    return stages


class ConflictResolver:
    """Resolves rebase conflicts with a local-wins three-way merge."""

    def __init__(
        self,
        runner: Runner,
        work_dir: Path,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        """Initialize the resolver.

        Args:
            runner: Runner rooted at the working tree.
            work_dir: Working tree, used to remove scratch files.
            max_iterations: Rounds of resolve-then-continue before giving up.
        """
        self._runner = runner
        self._work_dir = work_dir
        self._max_iterations = max_iterations

    def resolve(self) -> list[str]:
        """Resolve conflicts until the rebase has no unmerged files left.

        Each round resolves every unmerged file and then continues the rebase,
        which may stop again on a later commit.

        Returns:
            Every path resolved, in the order it was resolved.

        Raises:
            ResolutionDidNotConvergeError: Unmerged files remain after
                max_iterations rounds.
            CommandError: A git command failed.
        """
        resolved: list[str] = []
        iterations = 0

        while True:
            conflicts = list_conflicts(self._runner)
            if not conflicts:
                return resolved

            if iterations >= self._max_iterations:
                raise ResolutionDidNotConvergeError(iterations, conflicts.paths)
            iterations += 1

            for path in conflicts:
                self.resolve_file(path)
                resolved.append(path)

            logger.debug("continuing rebase after resolving %d file(s)", len(conflicts))
            try:
                self._runner.run("GIT_EDITOR=true git rebase --continue")
            except CommandError as e:
                # the rebase stopped again on a later commit
                if not list_conflicts(self._runner):
                    raise
                logger.debug("rebase paused on further conflicts: %s", e)

    def resolve_file(self, path: str) -> None:
        """Resolve a single unmerged file in favor of the local side.

        A file deleted locally is removed; a file deleted upstream keeps the
        local content. A missing base (both sides added the file) merges
        against an empty file.

        Args:
            path: Path of the unmerged file, relative to the working tree.
        """
        logger.info("resolving conflict in %s ...", path)
        stages = list_stages(self._runner, path)

        if STAGE_LOCAL not in stages:
            self._runner.run(f"git rm --quiet -- {shlex.quote(path)}")
            return

        if STAGE_UPSTREAM not in stages:
            self._runner.run(f"git show :{STAGE_LOCAL}:{shlex.quote(path)} > {shlex.quote(path)}")
            self._runner.run(f"git add -- {shlex.quote(path)}")
            return

        scratch = {stage: path + suffix for stage, suffix in SCRATCH_SUFFIXES.items()}
        try:
            for stage, scratch_path in scratch.items():
                if stage in stages:
                    self._runner.run(
                        f"git show :{stage}:{shlex.quote(path)} > {shlex.quote(scratch_path)}"
                    )
                else:
                    self._runner.run(f": > {shlex.quote(scratch_path)}")

            # merge-file treats its first file as "current": --ours keeps the local side
            self._runner.run(
                "git merge-file -p --ours "
                f"{shlex.quote(scratch[STAGE_LOCAL])} "
                f"{shlex.quote(scratch[STAGE_BASE])} "
                f"{shlex.quote(scratch[STAGE_UPSTREAM])} "
                f"> {shlex.quote(path)}"
            )

            # mark resolved
            self._runner.run(f"git add -- {shlex.quote(path)}")
        finally:
            for scratch_path in scratch.values():
                (self._work_dir / scratch_path).unlink(missing_ok=True)
