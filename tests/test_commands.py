"""Tests for the command flows — FakeExecutor, no subprocesses."""

from __future__ import annotations

import json

import pytest

from project_runner.analyzer import analyze_project
from project_runner.commands import find_role_script, run_role, run_script, show_info, should_install
from project_runner.core.config import Settings
from project_runner.exceptions import (
    InstallFailedError,
    ProjectNotFoundError,
    ScriptFailedError,
    ScriptNotFoundError,
)
from project_runner.models.project import DetectedScripts, ScriptsInfo
from project_runner.runner.availability import AvailabilityResolver
from project_runner.runner.context import RunContext
from project_runner.testing import FakeExecutor


def _context(root, executor, settings=None) -> RunContext:
    resolver = AvailabilityResolver(executor, is_interactive=lambda: False)
    return RunContext(str(root), settings=settings, executor=executor, resolver=resolver)


VITE = {"name": "web", "scripts": {"dev": "vite", "build": "vite build", "lint": "eslint ."}}


class TestRunRole:
    def test_dev_installs_when_node_modules_missing(self, make_project, fake_executor):
        root = make_project(VITE)
        assert run_role(_context(root, fake_executor), "dev", auto_install=True) == 0
        assert fake_executor.executed == [["npm", "install"], ["npm", "run", "dev"]]

    def test_no_install_flag_skips_install(self, make_project, fake_executor):
        root = make_project(VITE)
        run_role(_context(root, fake_executor), "dev", auto_install=True, no_install=True)
        assert fake_executor.executed == [["npm", "run", "dev"]]

    def test_role_without_auto_install(self, make_project, fake_executor):
        root = make_project(VITE)
        run_role(_context(root, fake_executor), "build")
        assert fake_executor.executed == [["npm", "run", "build"]]

    def test_force_install(self, make_project, fake_executor):
        root = make_project(VITE)
        run_role(_context(root, fake_executor), "build", force_install=True)
        assert fake_executor.executed == [["npm", "install"], ["npm", "run", "build"]]

    def test_forwards_args(self, make_project, fake_executor):
        root = make_project(VITE)
        run_role(_context(root, fake_executor), "build", ["--mode", "staging"])
        assert fake_executor.executed == [["npm", "run", "build", "--", "--mode", "staging"]]

    def test_uses_detected_package_manager(self, make_project):
        executor = FakeExecutor(versions={"pnpm": "8.6.0"})
        root = make_project({**VITE, "packageManager": "pnpm@8.6.0"}, node_modules=True)
        run_role(_context(root, executor), "dev", auto_install=True)
        assert executor.executed == [["pnpm", "dev"]]

    def test_falls_back_to_npm_when_manager_missing(self, make_project, fake_executor):
        root = make_project(VITE, files=("yarn.lock",))
        run_role(_context(root, fake_executor), "dev", auto_install=True)
        assert fake_executor.captured == [["yarn", "--version"]]
        assert fake_executor.executed == [["npm", "install"], ["npm", "run", "dev"]]

    def test_missing_role(self, make_project, fake_executor):
        root = make_project(VITE)
        with pytest.raises(ScriptNotFoundError) as exc_info:
            run_role(_context(root, fake_executor), "test")
        assert exc_info.value.exit_code == 1
        assert exc_info.value.name == "test"
        assert exc_info.value.available == ["dev", "build", "lint"]
        assert "test" in exc_info.value.message
        assert fake_executor.executed == []

    def test_unknown_project(self, tmp_path, fake_executor):
        with pytest.raises(ProjectNotFoundError):
            run_role(_context(tmp_path, fake_executor), "dev")

    def test_install_failure_propagates_exit_code(self, make_project):
        executor = FakeExecutor(exit_codes={"npm install": 7})
        root = make_project(VITE)
        with pytest.raises(InstallFailedError) as exc_info:
            run_role(_context(root, executor), "dev", auto_install=True)
        assert exc_info.value.exit_code == 7
        assert executor.executed == [["npm", "install"]]

    def test_script_failure_propagates_exit_code(self, make_project):
        executor = FakeExecutor(exit_codes={"npm run build": 2})
        root = make_project(VITE)
        with pytest.raises(ScriptFailedError) as exc_info:
            run_role(_context(root, executor), "build")
        assert exc_info.value.exit_code == 2

    def test_start_patterns_from_settings(self, make_project, fake_executor):
        root = make_project({"scripts": {"serve": "http-server"}})
        settings = Settings(start_patterns=("start", "serve"))
        run_role(_context(root, fake_executor, settings), "start")
        assert fake_executor.executed == [["npm", "run", "serve"]]


class TestRunScript:
    def test_runs_named_script(self, make_project, fake_executor):
        root = make_project(VITE)
        assert run_script(_context(root, fake_executor), "lint", ["--fix"]) == 0
        assert fake_executor.executed == [["npm", "run", "lint", "--", "--fix"]]

    def test_no_auto_install(self, make_project, fake_executor):
        root = make_project(VITE)
        run_script(_context(root, fake_executor), "lint")
        assert ["npm", "install"] not in fake_executor.executed

    def test_missing_script(self, make_project, fake_executor):
        root = make_project(VITE)
        with pytest.raises(ScriptNotFoundError) as exc_info:
            run_script(_context(root, fake_executor), "deploy")
        assert exc_info.value.role is False
        assert '"deploy"' in exc_info.value.message

    def test_bun_project(self, make_project):
        executor = FakeExecutor(versions={"bun": "1.1.0"})
        root = make_project(VITE, files=("bun.lockb",), node_modules=True)
        run_script(_context(root, executor), "lint")
        assert executor.executed == [["bun", "run", "lint"]]


class TestFindRoleScript:
    def test_detected_first(self):
        scripts = ScriptsInfo(scripts={"dev:web": "vite"}, detected=DetectedScripts(dev="dev:web"))
        assert find_role_script(scripts, "dev") == "dev:web"

    def test_exact_name_fallback(self):
        scripts = ScriptsInfo(scripts={"test": "npm install && jest"})
        assert find_role_script(scripts, "test") == "test"

    def test_none(self):
        assert find_role_script(ScriptsInfo(), "build") is None


class TestShouldInstall:
    @pytest.fixture
    def stale(self, make_project):
        return analyze_project(make_project(VITE))

    def test_matrix(self, stale):
        assert should_install(stale, auto_install=True, force_install=False, no_install=False)
        assert not should_install(stale, auto_install=False, force_install=False, no_install=False)
        assert should_install(stale, auto_install=False, force_install=True, no_install=False)
        assert not should_install(stale, auto_install=True, force_install=True, no_install=True)


class TestShowInfo:
    def test_report(self, make_project, fake_executor, capsys):
        root = make_project(
            {
                "name": "web",
                "version": "1.0.0",
                "description": "Demo",
                "packageManager": "pnpm@8.6.0",
                "scripts": {**VITE["scripts"], "long": "x" * 60},
            }
        )
        assert show_info(_context(root, fake_executor)) == 0
        out = capsys.readouterr().out
        assert "web" in out
        assert "1.0.0" in out
        assert "pnpm@8.6.0" in out
        assert "explicit-field" in out
        assert "needs install" in out
        assert "pnpm dev" in out
        assert "pnpm build" in out
        assert "x" * 40 + "..." in out
        assert "x" * 41 not in out
        assert fake_executor.executed == []
        assert fake_executor.captured == []

    def test_unknown_project(self, tmp_path, fake_executor, capsys):
        assert show_info(_context(tmp_path, fake_executor)) == 0
        assert "No project type detected" in capsys.readouterr().err

    def test_json(self, make_project, fake_executor, capsys):
        root = make_project(VITE)
        show_info(_context(root, fake_executor), as_json=True)
        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "nodejs"
        assert data["scripts"]["detected"] == {"dev": "dev", "build": "build"}
        assert data["dependencies"]["needs_install"] is True
