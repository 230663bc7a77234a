"""Shared pytest fixtures for project-runner tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from project_runner.testing import FakeExecutor


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory writing package.json plus optional empty files into tmp_path."""

    def _make(
        manifest: dict[str, Any] | None = None,
        *,
        files: tuple[str, ...] = (),
        node_modules: bool = False,
    ) -> Path:
        if manifest is not None:
            (tmp_path / "package.json").write_text(json.dumps(manifest))
        for name in files:
            (tmp_path / name).write_text("")
        if node_modules:
            (tmp_path / "node_modules").mkdir(exist_ok=True)
        return tmp_path

    return _make


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()
