"""Git command helpers for version resolution."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from .exceptions import GitCommandError, GitUnavailableError

logger = logging.getLogger("git_version_info.git")

DEFAULT_TIMEOUT = 30


def run_git(
    args: list[str],
    repo_path: Path,
    timeout: int,
) -> subprocess.CompletedProcess[str]:
    """Execute git command and capture output."""
    completed = _execute(args, repo_path, timeout)
    if completed.returncode != 0:
        raise GitCommandError(
            args,
            completed.returncode,
            completed.stderr.strip(),
            stdout=completed.stdout.strip(),
        )
    return completed


def _execute(args: list[str], repo_path: Path, timeout: int) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env.setdefault("LC_ALL", "C")
    logger.debug("git_command", extra={"command": " ".join(args)})
    try:
        # subprocess.run kills and reaps the child on timeout.
        return subprocess.run(
            args,
            cwd=repo_path,
            check=False,
            text=True,
            capture_output=True,
            timeout=timeout,
            env=env,
        )
    except (FileNotFoundError, PermissionError) as exc:  # git missing
        raise GitUnavailableError(args[0], str(exc)) from exc
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(args, returncode=124, stderr=str(exc)) from exc


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class GitRepository:
    """``VersionControl`` implementation backed by the git executable."""

    def __init__(
        self,
        path: Path,
        *,
        git_executable: str = "git",
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.path = path
        self.git_executable = git_executable
        self.timeout = timeout

    def _git(self, *args: str) -> str:
        completed = run_git([self.git_executable, *args], self.path, self.timeout)
        return completed.stdout.strip()

    def current_commit_id(self) -> str:
        """Return full HEAD commit sha1."""
        return self._git("rev-parse", "HEAD")

    def short_commit_id(self) -> str:
        """Return abbreviated HEAD commit sha1."""
        return self._git("rev-parse", "--short", "HEAD")

    def tags_pointing_at(self, commit: str) -> list[str]:
        """Return raw tag names pointing exactly at ``commit``."""
        return _lines(self._git("tag", "--points-at", commit))

    def first_parent_history(self, branch: str) -> list[str]:
        """Return commits of ``branch`` from tip backwards along first parents."""
        if branch.startswith("-"):
            raise GitCommandError(
                [self.git_executable, "rev-list", "--first-parent", branch, "--"],
                128,
                f"invalid branch name: {branch}",
            )
        return _lines(self._git("rev-list", "--first-parent", branch, "--"))

    def merge_base(self, first: str, second: str) -> str:
        """Return the best common ancestor of two commits."""
        return self._git("merge-base", first, second)

    def commit_count_between(self, base: str, head: str, *, first_parent: bool) -> int:
        """Count commits reachable from ``head`` but not from ``base``."""
        args = ["rev-list", "--count"]
        if first_parent:
            args.append("--first-parent")
        args.append(f"{base}..{head}")
        output = self._git(*args)
        try:
            return int(output)
        except ValueError as exc:
            raise GitCommandError(
                [self.git_executable, *args],
                1,
                "unexpected rev-list output",
                stdout=output,
            ) from exc

    def is_working_tree_dirty(self) -> bool:
        """Return True when tracked files differ from HEAD."""
        # diff-index trusts cached stat data; refresh it so touched but unchanged
        # files compare clean. The refresh exit status is not meaningful here.
        _execute([self.git_executable, "update-index", "-q", "--refresh"], self.path, self.timeout)
        args = [self.git_executable, "diff-index", "--quiet", "HEAD", "--"]
        completed = _execute(args, self.path, self.timeout)
        if completed.returncode == 0:
            return False
        if completed.returncode == 1:
            return True
        raise GitCommandError(args, completed.returncode, completed.stderr.strip())

    def current_branch_name(self) -> str:
        """Return the checked-out branch name, ``HEAD`` when detached."""
        return self._git("rev-parse", "--abbrev-ref", "HEAD")


__all__ = ["DEFAULT_TIMEOUT", "GitRepository", "run_git"]
