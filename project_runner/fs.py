"""Filesystem probes — existence, mtime and manifest reads. Never raise."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

MANIFEST_NAME = "package.json"


def file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def directory_exists(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def modified_time(path: Path) -> float | None:
    """Return the mtime of *path*, or ``None`` if it cannot be read."""
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def read_manifest(project_dir: Path) -> dict[str, Any] | None:
    """Load ``package.json`` from *project_dir*.

    Returns ``None`` when the file is absent, unreadable, not valid JSON,
    or not a JSON object.
    """
    manifest = project_dir / MANIFEST_NAME
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return data
