from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import pytest

from git_version_info.clock import Clock, DEFAULT_TZ
from git_version_info.config import get_settings
from git_version_info.exceptions import GitCommandError
from git_version_info.metrics import ResolveMetrics


@dataclass
class RepoHandle:
    worktree: Path

    def git(self, *args: str) -> str:
        return _run(["git", *args], cwd=self.worktree)

    def commit(self, message: str) -> str:
        self.git("commit", "--allow-empty", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def stub_clock() -> Clock:
    base_epoch = 1_700_000_000.0
    monotonic_state = {"value": 10.0}

    def time_fn() -> float:
        return base_epoch

    def monotonic_fn() -> float:
        monotonic_state["value"] += 0.1
        return monotonic_state["value"]

    return Clock(time_fn=time_fn, monotonic_fn=monotonic_fn, timezone=DEFAULT_TZ)


@pytest.fixture
def resolve_metrics() -> ResolveMetrics:
    return ResolveMetrics()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith("GIT_VERSION_INFO_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _reset_package_logger() -> None:
    package_logger = logging.getLogger("git_version_info")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_git_version_info", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture(autouse=True)
def _isolated_logging():
    _reset_package_logger()
    yield
    _reset_package_logger()


@pytest.fixture
def repo_factory(tmp_path_factory: pytest.TempPathFactory) -> Callable[[], RepoHandle]:
    if shutil.which("git") is None:
        pytest.skip("git executable is not installed")

    def _factory() -> RepoHandle:
        worktree = tmp_path_factory.mktemp("repo")
        _run(["git", "init", "."], cwd=worktree)
        _run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], cwd=worktree)
        _run(["git", "config", "user.name", "tester"], cwd=worktree)
        _run(["git", "config", "user.email", "tester@example.com"], cwd=worktree)
        _run(["git", "config", "commit.gpgsign", "false"], cwd=worktree)
        _run(["git", "config", "tag.gpgsign", "false"], cwd=worktree)
        _run(["git", "commit", "--allow-empty", "-m", "Initial Commit"], cwd=worktree)
        return RepoHandle(worktree=worktree)

    return _factory


@dataclass
class FakeRepository:
    """In-memory commit graph implementing ``VersionControl``.

    ``parents`` maps each commit to its parents, first parent first.
    """

    parents: dict[str, list[str]]
    head: str
    tags: dict[str, list[str]] = field(default_factory=dict)
    branches: dict[str, str] = field(default_factory=dict)
    dirty: bool = False
    branch_name: str = "main"
    fail_on: Optional[str] = None
    calls: list[tuple] = field(default_factory=list)

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if self.fail_on == name:
            raise GitCommandError(["git", name, *map(str, args)], 128, f"fatal: {name} failed")

    def current_commit_id(self) -> str:
        self._record("current_commit_id")
        return self.head

    def short_commit_id(self) -> str:
        self._record("short_commit_id")
        return self.head[:7]

    def tags_pointing_at(self, commit: str) -> list[str]:
        self._record("tags_pointing_at", commit)
        return list(self.tags.get(commit, []))

    def first_parent_history(self, branch: str) -> list[str]:
        self._record("first_parent_history", branch)
        if branch not in self.branches:
            raise GitCommandError(["git", "rev-list", "--first-parent", branch], 128, "unknown revision")
        return self._first_parent_chain(self.branches[branch])

    def merge_base(self, first: str, second: str) -> str:
        self._record("merge_base", first, second)
        common = self.ancestors(first) & self.ancestors(second)
        if not common:
            raise GitCommandError(["git", "merge-base", first, second], 1, "")
        best = [
            commit
            for commit in common
            if not any(other != commit and commit in self.ancestors(other) for other in common)
        ]
        return sorted(best)[0]

    def commit_count_between(self, base: str, head: str, *, first_parent: bool) -> int:
        self._record("commit_count_between", base, head, first_parent)
        excluded = self.ancestors(base)
        if first_parent:
            return sum(1 for commit in self._first_parent_chain(head) if commit not in excluded)
        return len(self.ancestors(head) - excluded)

    def is_working_tree_dirty(self) -> bool:
        self._record("is_working_tree_dirty")
        return self.dirty

    def current_branch_name(self) -> str:
        self._record("current_branch_name")
        return self.branch_name

    def ancestors(self, commit: str) -> set[str]:
        """Return ``commit`` and everything reachable from it."""
        seen: set[str] = set()
        stack = [commit]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self.parents[current])
        return seen

    def _first_parent_chain(self, commit: str) -> list[str]:
        chain = [commit]
        while self.parents[chain[-1]]:
            chain.append(self.parents[chain[-1]][0])
        return chain

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_repository() -> type[FakeRepository]:
    return FakeRepository


def _run(args: list[str], cwd: Path) -> str:
    env = os.environ.copy()
    env.setdefault("LC_ALL", "C")
    completed = subprocess.run(
        args,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        raise RuntimeError(f"Command failed: {' '.join(args)} -> {completed.stderr}")
    return completed.stdout.strip()
