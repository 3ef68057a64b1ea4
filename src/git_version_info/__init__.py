"""Deterministic SemVer versions for git checkouts.

The version of a checkout is the highest SemVer tag on HEAD, or else the
nearest tag found walking the release branch's first-parent history, plus the
number of commits since that tag and whether the working tree is dirty.
"""
from __future__ import annotations

from .exceptions import (
    GitCommandError,
    GitUnavailableError,
    InvalidVersionTagError,
    VersionResolutionError,
)
from .git_ops import GitRepository
from .models import ResolvedVersion, TagFound, TagNotFound
from .semver import ZERO_VERSION, SemanticVersion, compare
from .tags import find_and_sort_tags, highest_tag
from .walker import VersionControl, locate_tag, resolve_version

__all__ = [
    "GitCommandError",
    "GitRepository",
    "GitUnavailableError",
    "InvalidVersionTagError",
    "ResolvedVersion",
    "SemanticVersion",
    "TagFound",
    "TagNotFound",
    "VersionControl",
    "VersionResolutionError",
    "ZERO_VERSION",
    "compare",
    "find_and_sort_tags",
    "highest_tag",
    "locate_tag",
    "resolve_version",
]
