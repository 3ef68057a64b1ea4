"""Semantic version model with an extra ``revision`` field.

Precedence follows https://semver.org/#spec-item-11 with one extension: a
fourth numeric field may follow ``PATCH``. A version without a revision sorts
below the same version with any revision, so ``1.0.0 < 1.0.0.0 < 1.0.0.1``.
Build metadata is kept for display and never participates in ordering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import NUMERIC_IDENTIFIER_REGEX, SEMVER_REGEX, ZERO_VERSION_TAG
from .exceptions import InvalidVersionTagError


@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """Parsed, comparable version.

    ``tag`` keeps the text the version was parsed from (for example
    ``v1.2.3``) so callers can report the tag exactly as it appears in git.
    """

    tag: str
    major: int
    minor: int
    patch: int
    revision: Optional[int] = None
    prerelease: str = ""
    build_metadata: str = ""

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """Parse ``text`` strictly, raising ``InvalidVersionTagError`` on failure."""
        version = cls.try_parse(text)
        if version is None:
            raise InvalidVersionTagError(text)
        return version

    @classmethod
    def try_parse(cls, text: str) -> Optional["SemanticVersion"]:
        """Return the parsed version, or ``None`` when ``text`` is not a version."""
        match = SEMVER_REGEX.fullmatch(text)
        if match is None:
            return None
        revision = match.group("revision")
        return cls(
            tag=text,
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            revision=int(revision) if revision else None,
            prerelease=match.group("prerelease") or "",
            build_metadata=match.group("buildmetadata") or "",
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def compare(self, other: "SemanticVersion") -> int:
        """Return -1, 0 or 1 as ``self`` sorts below, equal to or above ``other``."""
        return compare(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return compare(self, other) >= 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.revision, _prerelease_key(self.prerelease)))

    def __str__(self) -> str:
        return self.tag


ZERO_VERSION = SemanticVersion(tag=ZERO_VERSION_TAG, major=0, minor=0, patch=0)


def compare(left: SemanticVersion, right: SemanticVersion) -> int:
    """Total order over versions; build metadata is ignored."""
    for ours, theirs in (
        (left.major, right.major),
        (left.minor, right.minor),
        (left.patch, right.patch),
    ):
        if ours != theirs:
            return _sign(ours - theirs)

    if left.revision != right.revision:
        if left.revision is None:
            return -1
        if right.revision is None:
            return 1
        return _sign(left.revision - right.revision)

    # A pre-release sorts below the matching release.
    if not left.prerelease and not right.prerelease:
        return 0
    if not left.prerelease or not right.prerelease:
        return 1 if not left.prerelease else -1

    return _compare_prerelease(left.prerelease.split("."), right.prerelease.split("."))


def _compare_prerelease(ours: list[str], theirs: list[str]) -> int:
    for our_part, their_part in zip(ours, theirs):
        ours_numeric = NUMERIC_IDENTIFIER_REGEX.fullmatch(our_part) is not None
        theirs_numeric = NUMERIC_IDENTIFIER_REGEX.fullmatch(their_part) is not None

        if ours_numeric and theirs_numeric:
            difference = int(our_part) - int(their_part)
            if difference:
                return _sign(difference)
            continue
        if ours_numeric or theirs_numeric:
            # Numeric identifiers always have lower precedence.
            return -1 if ours_numeric else 1
        if our_part != their_part:
            # Ordinal comparison; identifiers are ASCII so code points match bytes.
            return -1 if our_part < their_part else 1

    return _sign(len(ours) - len(theirs))


def _prerelease_key(prerelease: str) -> tuple[object, ...]:
    # Must agree with _compare_prerelease: numeric identifiers compare by value.
    if not prerelease:
        return ()
    return tuple(
        int(part) if NUMERIC_IDENTIFIER_REGEX.fullmatch(part) else part
        for part in prerelease.split(".")
    )


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


__all__ = ["SemanticVersion", "ZERO_VERSION", "compare"]
