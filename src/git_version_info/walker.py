"""Locate the nearest version tag for the current commit.

The search has two stages. Tags pointing exactly at HEAD win outright. When
there are none and a release branch is configured, the release branch's
first-parent history is walked from its tip backwards. A candidate commit is
only considered once its merge base with HEAD is no longer HEAD itself, i.e.
once HEAD has diverged from (or moved past) the release line at that point;
commit distances are then measured from that merge base.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from .constants import COMMIT_LOG_LENGTH
from .logging_utils import bind
from .metrics import ResolveMetrics
from .models import ResolvedVersion, TagFound, TagNotFound, TagSearchResult
from .semver import ZERO_VERSION
from .tags import highest_tag

logger = logging.getLogger("git_version_info.walker")


class VersionControl(Protocol):
    """Queries the walker needs from a repository."""

    def current_commit_id(self) -> str: ...

    def short_commit_id(self) -> str: ...

    def tags_pointing_at(self, commit: str) -> Sequence[str]: ...

    def first_parent_history(self, branch: str) -> Sequence[str]: ...

    def merge_base(self, first: str, second: str) -> str: ...

    def commit_count_between(self, base: str, head: str, *, first_parent: bool) -> int: ...

    def is_working_tree_dirty(self) -> bool: ...

    def current_branch_name(self) -> str: ...


def locate_tag(
    vcs: VersionControl,
    head: str,
    release_branch: Optional[str],
    *,
    metrics: ResolveMetrics | None = None,
    correlation_id: Optional[str] = None,
) -> TagSearchResult:
    """Find the tag HEAD's version derives from."""
    log = bind(logger, correlation_id)
    version = highest_tag(vcs.tags_pointing_at(head), metrics=metrics, correlation_id=correlation_id)
    if version is not None:
        return TagFound(version=version, merge_base=head, at_head=True)

    if not release_branch or not release_branch.strip():
        return TagNotFound()

    for candidate in vcs.first_parent_history(release_branch.strip()):
        if metrics is not None:
            metrics.record_candidate()
        merge_base = vcs.merge_base(candidate, head)
        if merge_base == head:
            log.debug(
                "version_candidate_skipped",
                extra={"candidate": candidate[:COMMIT_LOG_LENGTH], "reason": "merge base is HEAD"},
            )
            continue
        version = highest_tag(
            vcs.tags_pointing_at(candidate), metrics=metrics, correlation_id=correlation_id
        )
        if version is not None:
            return TagFound(version=version, merge_base=merge_base)

    return TagNotFound()


def resolve_version(
    vcs: VersionControl,
    release_branch: Optional[str],
    *,
    metrics: ResolveMetrics | None = None,
    correlation_id: Optional[str] = None,
) -> ResolvedVersion:
    """Resolve the version of the current checkout.

    Collaborator failures propagate to the caller unchanged; only malformed
    tag names are recovered from (they are skipped by the tag resolver).
    """
    is_dirty = vcs.is_working_tree_dirty()
    full_commit_id = vcs.current_commit_id()
    short_commit_id = vcs.short_commit_id()
    branch_name = vcs.current_branch_name()

    result = locate_tag(
        vcs, full_commit_id, release_branch, metrics=metrics, correlation_id=correlation_id
    )

    if isinstance(result, TagFound):
        if result.at_head:
            commits_since_tag: Optional[int] = 0
            commits_since_tag_first_parent: Optional[int] = 0
        else:
            commits_since_tag = vcs.commit_count_between(
                result.merge_base, full_commit_id, first_parent=False
            )
            commits_since_tag_first_parent = vcs.commit_count_between(
                result.merge_base, full_commit_id, first_parent=True
            )
        resolved = ResolvedVersion(
            version=result.version,
            is_tagged=result.at_head,
            commits_since_tag=commits_since_tag,
            commits_since_tag_first_parent=commits_since_tag_first_parent,
            is_dirty=is_dirty,
            full_commit_id=full_commit_id,
            short_commit_id=short_commit_id,
            branch_name=branch_name,
        )
    else:
        resolved = ResolvedVersion(
            version=ZERO_VERSION,
            is_tagged=False,
            commits_since_tag=None,
            commits_since_tag_first_parent=None,
            is_dirty=is_dirty,
            full_commit_id=full_commit_id,
            short_commit_id=short_commit_id,
            branch_name=branch_name,
        )

    bind(logger, correlation_id).info(
        "version_resolved",
        extra={
            "tag": resolved.tag,
            "is_tagged": resolved.is_tagged,
            "commits_since_tag": resolved.commits_since_tag,
            "head": full_commit_id[:COMMIT_LOG_LENGTH],
        },
    )
    return resolved


__all__ = ["VersionControl", "locate_tag", "resolve_version"]
