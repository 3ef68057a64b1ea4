from __future__ import annotations

import logging

import pytest

from git_version_info.metrics import ResolveMetrics
from git_version_info.tags import find_and_sort_tags, highest_tag


def test_sorts_descending_by_precedence() -> None:
    tags = find_and_sort_tags(["v1.0.0", "1.0.0-rc.1", "2.0.0", "1.0.0.1", "0.9.9"])

    assert [tag.tag for tag in tags] == ["2.0.0", "1.0.0.1", "v1.0.0", "1.0.0-rc.1", "0.9.9"]


def test_accepts_raw_git_output() -> None:
    output = "v1.2.3\nnightly\n\nv1.3.0-beta.1\n"

    tags = find_and_sort_tags(output)

    assert [tag.tag for tag in tags] == ["v1.3.0-beta.1", "v1.2.3"]


def test_invalid_tags_are_dropped_and_counted(resolve_metrics: ResolveMetrics) -> None:
    tags = find_and_sort_tags(["latest", "v1.02.0", "1.0", "v3.1.4"], metrics=resolve_metrics)

    assert [tag.tag for tag in tags] == ["v3.1.4"]
    assert resolve_metrics.sample("version_tags_ignored_total") == 3


def test_invalid_tags_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="git_version_info.tags"):
        find_and_sort_tags(["not-a-version", "1.0.0"])

    records = [record for record in caplog.records if record.getMessage() == "version_tag_ignored"]
    assert len(records) == 1
    assert records[0].levelno == logging.DEBUG
    assert records[0].tag == "not-a-version"


def test_equal_versions_keep_input_order() -> None:
    tags = find_and_sort_tags(["v1.0.0+build.2", "1.0.0", "v1.0.0+build.1"])

    assert [tag.tag for tag in tags] == ["v1.0.0+build.2", "1.0.0", "v1.0.0+build.1"]


def test_highest_tag() -> None:
    assert highest_tag([]) is None
    assert highest_tag(["junk", "also-junk"]) is None
    highest = highest_tag(["1.0.0-rc.1", "1.0.0-rc.2", "1.0.0-beta"])
    assert highest is not None
    assert highest.tag == "1.0.0-rc.2"


def test_ignored_tag_log_carries_correlation_id(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="git_version_info.tags"):
        highest_tag(["nightly"], correlation_id="cid-42")

    records = [record for record in caplog.records if record.getMessage() == "version_tag_ignored"]
    assert [record.correlation_id for record in records] == ["cid-42"]
    assert records[0].tag == "nightly"
