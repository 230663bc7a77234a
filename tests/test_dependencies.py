"""Tests for dependency staleness detection — mtimes set explicitly."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from project_runner.analyzer.dependencies import (
    REASON_LOCKFILE,
    REASON_MANIFEST,
    REASON_MISSING,
    check_dependency_status,
)

OLD = 1_600_000_000
NEW = 1_700_000_000


def _touch(path: Path, mtime: float) -> None:
    os.utime(path, (mtime, mtime))


class TestCheckDependencyStatus:
    def test_missing_node_modules(self, make_project):
        root = make_project({"name": "app"})
        status = check_dependency_status(root)
        assert status.has_node_modules is False
        assert status.needs_install is True
        assert status.reason == REASON_MISSING

    def test_node_modules_file_is_not_a_directory(self, make_project):
        root = make_project({"name": "app"})
        (root / "node_modules").write_text("")
        assert check_dependency_status(root).reason == REASON_MISSING

    def test_up_to_date(self, make_project):
        root = make_project({"name": "app"}, files=("yarn.lock",), node_modules=True)
        _touch(root / "package.json", OLD)
        _touch(root / "yarn.lock", OLD)
        _touch(root / "node_modules", NEW)
        status = check_dependency_status(root)
        assert status.has_node_modules is True
        assert status.needs_install is False
        assert status.reason is None

    def test_lockfile_newer(self, make_project):
        root = make_project({"name": "app"}, files=("pnpm-lock.yaml",), node_modules=True)
        _touch(root / "package.json", OLD)
        _touch(root / "node_modules", OLD)
        _touch(root / "pnpm-lock.yaml", NEW)
        status = check_dependency_status(root)
        assert status.needs_install is True
        assert status.reason == REASON_LOCKFILE

    def test_lockfile_checked_before_manifest(self, make_project):
        root = make_project({"name": "app"}, files=("package-lock.json",), node_modules=True)
        _touch(root / "node_modules", OLD)
        _touch(root / "package-lock.json", NEW)
        _touch(root / "package.json", NEW)
        assert check_dependency_status(root).reason == REASON_LOCKFILE

    def test_manifest_newer(self, make_project):
        root = make_project({"name": "app"}, node_modules=True)
        _touch(root / "node_modules", OLD)
        _touch(root / "package.json", NEW)
        status = check_dependency_status(root)
        assert status.needs_install is True
        assert status.reason == REASON_MANIFEST

    def test_equal_mtime_is_not_stale(self, make_project):
        root = make_project({"name": "app"}, files=("yarn.lock",), node_modules=True)
        for name in ("package.json", "yarn.lock", "node_modules"):
            _touch(root / name, OLD)
        assert check_dependency_status(root).needs_install is False

    def test_unreadable_timestamps_never_trigger_install(self, make_project):
        root = make_project({"name": "app"}, files=("yarn.lock",), node_modules=True)
        with patch("project_runner.analyzer.dependencies.modified_time", return_value=None):
            status = check_dependency_status(root)
        assert status.needs_install is False

    def test_no_manifest_with_node_modules(self, tmp_path: Path):
        (tmp_path / "node_modules").mkdir()
        assert check_dependency_status(tmp_path).needs_install is False
