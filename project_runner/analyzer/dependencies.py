"""Dependency staleness — decide whether ``<pm> install`` needs to run."""

from __future__ import annotations

from pathlib import Path

from project_runner.analyzer.package_manager import find_lockfile
from project_runner.fs import MANIFEST_NAME, directory_exists, modified_time
from project_runner.models.project import DependencyStatus

DEPENDENCIES_DIR = "node_modules"

REASON_MISSING = "dependencies directory missing"
REASON_LOCKFILE = "lockfile updated"
REASON_MANIFEST = "manifest updated"


def _newer(path: Path, reference: float | None) -> bool:
    """True only when both timestamps are known and *path* is strictly newer."""
    mtime = modified_time(path)
    return mtime is not None and reference is not None and mtime > reference


def check_dependency_status(project_dir: Path) -> DependencyStatus:
    deps_dir = project_dir / DEPENDENCIES_DIR

    if not directory_exists(deps_dir):
        return DependencyStatus(has_node_modules=False, needs_install=True, reason=REASON_MISSING)

    deps_mtime = modified_time(deps_dir)

    lockfile = find_lockfile(project_dir)
    if lockfile is not None and _newer(lockfile, deps_mtime):
        return DependencyStatus(has_node_modules=True, needs_install=True, reason=REASON_LOCKFILE)

    if _newer(project_dir / MANIFEST_NAME, deps_mtime):
        return DependencyStatus(has_node_modules=True, needs_install=True, reason=REASON_MANIFEST)

    return DependencyStatus(has_node_modules=True, needs_install=False)
