"""Package manager availability — probe, cache and negotiate a fallback.

State machine per package manager::

    UNKNOWN -> CHECKING -> AVAILABLE
                        -> UNAVAILABLE -> RESOLVED

npm ships with Node.js and is never probed. Any other manager is probed once
with ``<pm> --version`` and the verdict is cached for the invocation. When it
is missing, a non-interactive session falls back to npm; an interactive one is
asked whether to install it globally, use npm instead, or abort.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from enum import Enum

import click
import structlog

from project_runner import console
from project_runner.analyzer.package_manager import global_install_command
from project_runner.exceptions import PackageManagerUnavailableError
from project_runner.runner.executor import Executor

log = structlog.get_logger("project_runner.runner")

FALLBACK = "npm"

CHOICE_INSTALL = "1"
CHOICE_USE_NPM = "2"
CHOICE_ABORT = "3"


class AvailabilityState(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    RESOLVED = "resolved"


def _stdin_is_interactive() -> bool:
    try:
        return sys.stdin is not None and sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _click_prompt(text: str) -> str:
    return click.prompt(text, default="", show_default=False)


class AvailabilityResolver:
    """Verifies that the chosen package manager can actually be invoked."""

    def __init__(
        self,
        executor: Executor,
        *,
        is_interactive: Callable[[], bool] = _stdin_is_interactive,
        prompt: Callable[[str], str] = _click_prompt,
    ) -> None:
        self._executor = executor
        self._is_interactive_check = is_interactive
        self._interactive: bool | None = None
        self._prompt = prompt
        self._cache: dict[str, bool] = {}
        self.states: dict[str, AvailabilityState] = {}

    @property
    def interactive(self) -> bool:
        """Whether input is a terminal. Checked once per resolver."""
        if self._interactive is None:
            self._interactive = self._is_interactive_check()
        return self._interactive

    def state(self, package_manager: str) -> AvailabilityState:
        return self.states.get(package_manager, AvailabilityState.UNKNOWN)

    def is_available(self, package_manager: str) -> bool:
        """Probe ``<pm> --version``; cached per name."""
        if package_manager == FALLBACK:
            return True
        if package_manager in self._cache:
            return self._cache[package_manager]

        self.states[package_manager] = AvailabilityState.CHECKING
        try:
            result = self._executor.capture([package_manager, "--version"])
            available = result.ok and bool(result.stdout.strip())
        except Exception:
            log.debug("availability.probe_error", package_manager=package_manager, exc_info=True)
            available = False

        log.debug("availability.probe", package_manager=package_manager, available=available)
        self._cache[package_manager] = available
        self.states[package_manager] = (
            AvailabilityState.AVAILABLE if available else AvailabilityState.UNAVAILABLE
        )
        return available

    def invalidate(self, package_manager: str) -> None:
        self._cache.pop(package_manager, None)
        self.states.pop(package_manager, None)

    def ensure_available(self, package_manager: str) -> str:
        """Return the package manager to use, which may differ from the requested one.

        Raises PackageManagerUnavailableError when the user aborts or an
        installation attempt does not yield a usable binary.
        """
        if self.is_available(package_manager):
            return package_manager

        console.warn(f"Package manager {package_manager} is not installed")

        if not self.interactive:
            console.warn(f"Non-interactive session, falling back to {FALLBACK}")
            return self._resolved(package_manager, FALLBACK)

        return self._resolved(package_manager, self._prompt_resolution(package_manager))

    def _resolved(self, requested: str, chosen: str) -> str:
        self.states[requested] = AvailabilityState.RESOLVED
        log.debug("availability.resolved", requested=requested, chosen=chosen)
        return chosen

    def _prompt_resolution(self, package_manager: str) -> str:
        install_hint = " ".join(global_install_command(package_manager))
        click.echo()
        click.echo(
            f"  This project uses {console.color(package_manager, 'cyan')}, "
            "but it is not installed."
        )
        click.echo()
        click.echo(f"  {console.bold('Choose an option:')}")
        click.echo(
            f"    {console.color(CHOICE_INSTALL, 'cyan')}) Install {package_manager} "
            f"{console.dim(f'({install_hint})')}"
        )
        click.echo(f"    {console.color(CHOICE_USE_NPM, 'cyan')}) Use {FALLBACK} instead")
        click.echo(f"    {console.color(CHOICE_ABORT, 'cyan')}) Exit and install it manually")
        click.echo()

        try:
            choice = self._prompt(f"  Enter a choice {console.dim('[1/2/3]')}").strip()
        except click.Abort:
            choice = CHOICE_ABORT

        if choice == CHOICE_INSTALL:
            return self._install(package_manager)
        if choice == CHOICE_USE_NPM:
            console.warn(f"Using {FALLBACK} instead of {package_manager}")
            return FALLBACK
        raise PackageManagerUnavailableError(f"Install {package_manager} first: {install_hint}")

    def _install(self, package_manager: str) -> str:
        argv = global_install_command(package_manager)
        install_hint = " ".join(argv)
        console.info(f"Installing {package_manager}...")
        console.newline()

        result = self._executor.capture(argv)
        if not result.spawned:
            raise PackageManagerUnavailableError(
                f"Error while installing {package_manager}, run manually: {install_hint}"
            )
        if result.exit_code != 0:
            console.error(f"Installing {package_manager} failed")
            if result.stderr.strip():
                click.echo(result.stderr.strip(), err=True)
            raise PackageManagerUnavailableError(
                f"Could not install {package_manager} automatically, run manually: {install_hint}"
            )

        self.invalidate(package_manager)
        if not self.is_available(package_manager):
            raise PackageManagerUnavailableError(
                f"{package_manager} was installed but cannot be executed. "
                "Check your PATH or open a new terminal and try again."
            )

        console.success(f"{package_manager} installed")
        console.newline()
        return package_manager
