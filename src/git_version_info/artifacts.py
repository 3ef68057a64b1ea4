"""Artifact writers with atomic I/O."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from .constants import ENV_PREFIX


def atomic_write_text(path: Path, content: str) -> None:
    """Write text atomically."""
    ensure_parent(path)
    tmp_path = path.with_suffix(path.suffix + ".part")
    with open(tmp_path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)
        handle.flush()
        os.fsync(handle.fileno())
    os.replace(tmp_path, path)


def ensure_parent(path: Path) -> None:
    """Ensure parent directory exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def render_json(report: Mapping[str, Any]) -> str:
    return json.dumps(report, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def render_env(metadata: Mapping[str, str]) -> str:
    """Render metadata as ``KEY=value`` lines for CI environment files."""
    lines = [f"{ENV_PREFIX}{key.upper()}={_env_value(value)}" for key, value in metadata.items()]
    return "\n".join(lines) + "\n"


def write_json(report: Mapping[str, Any], path: Path) -> None:
    """Write the version report as JSON."""
    atomic_write_text(path, render_json(report))


def write_env(metadata: Mapping[str, str], path: Path) -> None:
    """Write version metadata as an environment file."""
    atomic_write_text(path, render_env(metadata))


def _env_value(value: str) -> str:
    return "".join(ch for ch in str(value) if ch not in "\r\n")


__all__ = ["atomic_write_text", "render_env", "render_json", "write_env", "write_json"]
