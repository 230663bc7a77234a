"""Test doubles for project_runner — use in unit and CLI tests.

Usage::

    from project_runner.testing import FakeExecutor

    executor = FakeExecutor()                                    # every command exits 0
    executor = FakeExecutor(exit_codes={"npm install": 1})       # install fails
    executor = FakeExecutor(versions={"pnpm": "8.6.0"})          # pnpm --version succeeds
"""

from __future__ import annotations

from project_runner.runner.executor import CaptureResult, Executor


class FakeExecutor(Executor):
    """Drop-in replacement for Executor that records commands instead of spawning them.

    Parameters
    ----------
    exit_codes:
        Exit code per space-joined argv for :meth:`execute`; default 0.
    capture_results:
        Result per space-joined argv for :meth:`capture`.
    versions:
        Shortcut for ``<pm> --version`` captures that succeed. Any other
        capture behaves like a missing binary.
    """

    def __init__(
        self,
        *,
        exit_codes: dict[str, int] | None = None,
        capture_results: dict[str, CaptureResult] | None = None,
        versions: dict[str, str] | None = None,
    ) -> None:
        super().__init__(echo=False)
        self._exit_codes = exit_codes or {}
        self._capture_results = dict(capture_results or {})
        for name, version in (versions or {}).items():
            self._capture_results[f"{name} --version"] = CaptureResult(
                exit_code=0, stdout=f"{version}\n"
            )
        self.executed: list[list[str]] = []
        self.captured: list[list[str]] = []

    def execute(self, argv, *, cwd=None, env=None) -> int:
        self.executed.append(list(argv))
        return self._exit_codes.get(" ".join(argv), 0)

    def capture(self, argv, *, cwd=None, env=None) -> CaptureResult:
        self.captured.append(list(argv))
        result = self._capture_results.get(" ".join(argv))
        if result is not None:
            return result
        return CaptureResult(exit_code=-1, spawned=False, error=f"{argv[0]}: not found")

    def install_signal_handlers(self) -> None:
        pass

    def restore_signal_handlers(self) -> None:
        pass
