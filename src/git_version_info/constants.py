"""Constants for git version resolution."""

from __future__ import annotations

import re


# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
# with an optional fourth ``revision`` field.
SEMVER_REGEX = re.compile(
    r"^[vV]?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:\.(?P<revision>0|[1-9]\d*))?"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<buildmetadata>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)

NUMERIC_IDENTIFIER_REGEX = re.compile(r"[0-9]+")

ZERO_VERSION_TAG = "0.0.0"

ENV_PREFIX = "GIT_VERSION_"

COMMIT_LOG_LENGTH = 12
