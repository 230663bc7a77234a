"""RunContext — per-invocation owner of the executor, resolver and signal handlers."""

from __future__ import annotations

from types import TracebackType

from project_runner.core.config import Settings
from project_runner.runner.availability import AvailabilityResolver
from project_runner.runner.executor import Executor


class RunContext:
    """Everything a command flow mutates during one CLI invocation.

    Use as a context manager: signal forwarding is active inside the block
    and the previous handlers are restored on exit.
    """

    def __init__(
        self,
        project_dir: str,
        *,
        settings: Settings | None = None,
        executor: Executor | None = None,
        resolver: AvailabilityResolver | None = None,
    ) -> None:
        self.project_dir = project_dir
        self.settings = settings or Settings()
        self.executor = executor or Executor(cwd=project_dir)
        self.resolver = resolver or AvailabilityResolver(self.executor)

    def __enter__(self) -> RunContext:
        self.executor.install_signal_handlers()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.executor.restore_signal_handlers()
