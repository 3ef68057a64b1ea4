"""Turn raw ``git tag`` output into versions ordered by precedence."""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Iterable, Optional, Union

from .logging_utils import bind
from .metrics import ResolveMetrics
from .semver import SemanticVersion, compare

logger = logging.getLogger("git_version_info.tags")

TagLines = Union[str, Iterable[str]]


def find_and_sort_tags(
    lines: TagLines,
    *,
    metrics: ResolveMetrics | None = None,
    correlation_id: Optional[str] = None,
) -> list[SemanticVersion]:
    """Parse each tag name and return the valid ones, highest precedence first.

    ``lines`` may be the raw newline-separated output of ``git tag`` or an
    iterable of tag names. Names that are not versions are logged at DEBUG and
    dropped; they never abort resolution.
    """
    log = bind(logger, correlation_id)
    if isinstance(lines, str):
        lines = lines.splitlines()

    versions: list[SemanticVersion] = []
    for line in lines:
        name = line.strip()
        if not name:
            continue
        version = SemanticVersion.try_parse(name)
        if version is None:
            log.debug(
                "version_tag_ignored",
                extra={"tag": name, "reason": "not a valid SemVer 2.0 version"},
            )
            if metrics is not None:
                metrics.record_ignored_tag()
            continue
        versions.append(version)

    # sorted() is stable, so equal versions keep their input order.
    return sorted(versions, key=cmp_to_key(compare), reverse=True)


def highest_tag(
    lines: TagLines,
    *,
    metrics: ResolveMetrics | None = None,
    correlation_id: Optional[str] = None,
) -> Optional[SemanticVersion]:
    """Return the highest-precedence version among ``lines`` or ``None``."""
    ordered = find_and_sort_tags(lines, metrics=metrics, correlation_id=correlation_id)
    return ordered[0] if ordered else None


__all__ = ["find_and_sort_tags", "highest_tag"]
