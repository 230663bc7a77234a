"""Child process execution — interactive pass-through and captured probes."""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import sys
from dataclasses import dataclass
from types import FrameType
from typing import Any

import structlog

from project_runner import console
from project_runner.exceptions import CommandSpawnError

log = structlog.get_logger("project_runner.runner")

FORWARDED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


@dataclass
class CaptureResult:
    """Outcome of a captured command.

    ``spawned`` is False when the binary could not be started at all; the
    reason is in ``error`` and ``exit_code`` is -1.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    spawned: bool = True
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.spawned and self.exit_code == 0


def _resolve_argv(argv: list[str]) -> list[str]:
    # shutil.which honours PATHEXT, so npm.cmd-style shims resolve on Windows
    resolved = shutil.which(argv[0])
    return [resolved or argv[0], *argv[1:]]


def _normalize_returncode(code: int) -> int:
    # Popen reports death-by-signal N as -N; map to the shell's 128 + N
    return 128 - code if code < 0 else code


class Executor:
    """Spawns commands and tracks the single foreground child."""

    def __init__(self, cwd: str | None = None, *, echo: bool = True) -> None:
        self.cwd = cwd
        self.echo = echo
        self._foreground: subprocess.Popen[Any] | None = None
        self._previous_handlers: dict[signal.Signals, Any] = {}

    @property
    def foreground(self) -> subprocess.Popen[Any] | None:
        return self._foreground

    def _env(self, env: dict[str, str] | None) -> dict[str, str]:
        return {**os.environ, **(env or {})}

    def execute(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> int:
        """Run *argv* with inherited stdio and return its exit code.

        Raises CommandSpawnError when the binary cannot be started.
        """
        if not argv:
            raise CommandSpawnError(argv, "empty command")
        if self.echo:
            console.exec_line(argv)

        log.debug("executor.spawn", argv=argv, cwd=cwd or self.cwd)
        try:
            proc = subprocess.Popen(
                _resolve_argv(argv),
                cwd=cwd or self.cwd,
                env=self._env(env),
            )
        except OSError as e:
            raise CommandSpawnError(argv, e.strerror or str(e)) from e

        self._foreground = proc
        try:
            code = proc.wait()
        finally:
            self._foreground = None
        log.debug("executor.exit", argv=argv, exit_code=code)
        return _normalize_returncode(code)

    def capture(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> CaptureResult:
        """Run a short, bounded command and buffer its output. Never raises."""
        if not argv:
            return CaptureResult(exit_code=-1, spawned=False, error="empty command")
        try:
            result = subprocess.run(
                _resolve_argv(argv),
                cwd=cwd or self.cwd,
                env=self._env(env),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("executor.capture_failed", argv=argv, error=str(e))
            return CaptureResult(exit_code=-1, spawned=False, error=str(e))
        return CaptureResult(
            exit_code=_normalize_returncode(result.returncode),
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    # ── Signal forwarding ──

    def _handle_signal(self, signum: int, _frame: FrameType | None) -> None:
        proc = self._foreground
        if proc is not None and proc.poll() is None:
            log.debug("executor.forward_signal", signal=signum, pid=proc.pid)
            try:
                proc.send_signal(signum)
            except OSError:
                pass
        sys.exit(0)

    def install_signal_handlers(self) -> None:
        for sig in FORWARDED_SIGNALS:
            self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()
