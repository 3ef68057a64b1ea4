"""Result records produced by the ancestry walker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .semver import SemanticVersion


@dataclass(frozen=True)
class TagFound:
    """A version tag located at HEAD or on the release branch."""

    version: SemanticVersion
    merge_base: str
    at_head: bool = False


@dataclass(frozen=True)
class TagNotFound:
    """No version tag was located."""


TagSearchResult = Union[TagFound, TagNotFound]


@dataclass(frozen=True)
class ResolvedVersion:
    """Version of the current checkout plus distance and tree metadata."""

    version: SemanticVersion
    is_tagged: bool
    commits_since_tag: Optional[int]
    commits_since_tag_first_parent: Optional[int]
    is_dirty: bool
    full_commit_id: str
    short_commit_id: str
    branch_name: str

    @property
    def tag(self) -> str:
        return self.version.tag

    def to_metadata(self) -> dict[str, str]:
        """Flatten into string metadata; absent values render as ``""``."""
        version = self.version
        return {
            "tag": version.tag,
            "major": str(version.major),
            "minor": str(version.minor),
            "patch": str(version.patch),
            "revision": _optional(version.revision),
            "prerelease": version.prerelease,
            "build_metadata": version.build_metadata,
            "is_tagged": _flag(self.is_tagged),
            "commits_since_tag": _optional(self.commits_since_tag),
            "commits_since_tag_first_parent": _optional(self.commits_since_tag_first_parent),
            "is_dirty": _flag(self.is_dirty),
            "branch": self.branch_name,
            "full_sha": self.full_commit_id,
            "short_sha": self.short_commit_id,
        }


def _optional(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = ["ResolvedVersion", "TagFound", "TagNotFound", "TagSearchResult"]
