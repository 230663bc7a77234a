"""Command flows behind the CLI: run a role, run a named script, show project info."""

from __future__ import annotations

import json
from collections.abc import Sequence

import click
import structlog

from project_runner import console
from project_runner.analyzer import analyze_project
from project_runner.analyzer.package_manager import install_command, run_command
from project_runner.analyzer.scripts import (
    RoleRule,
    available_scripts,
    build_role_rules,
    has_script,
)
from project_runner.exceptions import (
    InstallFailedError,
    ProjectNotFoundError,
    ScriptFailedError,
    ScriptNotFoundError,
)
from project_runner.models.project import ProjectSnapshot, ScriptsInfo
from project_runner.runner.context import RunContext

log = structlog.get_logger("project_runner.commands")

ROLE_COMMANDS: dict[str, str] = {
    "dev": "run",
    "test": "test",
    "build": "build",
    "start": "start",
}

_MAX_COMMAND_WIDTH = 40


def _rules(ctx: RunContext) -> tuple[RoleRule, ...]:
    return build_role_rules(ctx.settings.start_patterns)


def _load_project(ctx: RunContext) -> tuple[ProjectSnapshot, ScriptsInfo]:
    snapshot = analyze_project(ctx.project_dir, _rules(ctx))
    if snapshot.type == "unknown" or snapshot.scripts is None:
        raise ProjectNotFoundError(ctx.project_dir)
    log.debug(
        "commands.project",
        type=snapshot.type,
        package_manager=snapshot.package_manager.name,
        source=snapshot.package_manager.source,
    )
    return snapshot, snapshot.scripts


def find_role_script(scripts: ScriptsInfo, role: str) -> str | None:
    """Detected script for *role*, else a script named exactly like the role."""
    detected = scripts.detected.get(role)
    if detected:
        return detected
    if has_script(scripts, role):
        return role
    return None


def show_available_scripts(names: Sequence[str]) -> None:
    if not names:
        console.warn("No scripts are defined in package.json")
        return
    console.info("Available scripts:")
    for name in names:
        click.echo(f"  - {name}")
    console.newline()
    console.info("Use `pr <script>` to run any of them")


def should_install(
    snapshot: ProjectSnapshot, *, auto_install: bool, force_install: bool, no_install: bool
) -> bool:
    if no_install:
        return False
    if force_install:
        return True
    return auto_install and snapshot.dependencies.needs_install


def _install(ctx: RunContext, package_manager: str, snapshot: ProjectSnapshot, forced: bool) -> None:
    if forced:
        log.debug("commands.install_forced")
    else:
        log.debug("commands.install", reason=snapshot.dependencies.reason or "needs install")
    console.newline()

    exit_code = ctx.executor.execute(install_command(package_manager), cwd=ctx.project_dir)
    if exit_code != 0:
        raise InstallFailedError(package_manager, exit_code)

    console.success("Dependencies installed")
    console.newline()


def _run(
    ctx: RunContext,
    snapshot: ProjectSnapshot,
    script: str,
    args: Sequence[str],
    *,
    auto_install: bool,
    force_install: bool,
    no_install: bool,
) -> int:
    package_manager = ctx.resolver.ensure_available(snapshot.package_manager.name)

    if should_install(
        snapshot, auto_install=auto_install, force_install=force_install, no_install=no_install
    ):
        _install(ctx, package_manager, snapshot, force_install)
    elif not no_install:
        log.debug("commands.dependencies_up_to_date")

    exit_code = ctx.executor.execute(
        run_command(package_manager, script, list(args)), cwd=ctx.project_dir
    )
    if exit_code != 0:
        raise ScriptFailedError(script, exit_code)
    return 0


def run_role(
    ctx: RunContext,
    role: str,
    args: Sequence[str] = (),
    *,
    auto_install: bool = False,
    force_install: bool = False,
    no_install: bool = False,
) -> int:
    """Run the script detected for *role* ("dev", "test", "build", "start")."""
    snapshot, scripts = _load_project(ctx)

    script = find_role_script(scripts, role)
    if script is None:
        raise ScriptNotFoundError(role, available_scripts(scripts), role=True)

    log.debug("commands.script", role=role, script=script)
    return _run(
        ctx,
        snapshot,
        script,
        args,
        auto_install=auto_install,
        force_install=force_install,
        no_install=no_install,
    )


def run_script(
    ctx: RunContext,
    name: str,
    args: Sequence[str] = (),
    *,
    force_install: bool = False,
    no_install: bool = False,
) -> int:
    """Run the script called *name* verbatim."""
    snapshot, scripts = _load_project(ctx)

    if not has_script(scripts, name):
        raise ScriptNotFoundError(name, available_scripts(scripts))

    log.debug("commands.script", script=name)
    return _run(
        ctx,
        snapshot,
        name,
        args,
        auto_install=False,
        force_install=force_install,
        no_install=no_install,
    )


def _truncate(command: str) -> str:
    if len(command) > _MAX_COMMAND_WIDTH:
        return command[:_MAX_COMMAND_WIDTH] + "..."
    return command


def show_info(ctx: RunContext, *, as_json: bool = False) -> int:
    """Print the project analysis. Read-only; never spawns anything."""
    snapshot = analyze_project(ctx.project_dir, _rules(ctx))

    if as_json:
        click.echo(json.dumps(snapshot.to_dict(), indent=2))
        return 0

    if snapshot.type == "unknown":
        console.error("No project type detected")
        click.echo("  Make sure the directory contains a package.json")
        return 0

    click.echo()
    click.echo(console.color(console.bold("pr - project analysis"), "cyan"))
    click.echo("─" * 40)

    if snapshot.name:
        click.echo(f"{console.bold('Name:')}            {snapshot.name}")
    if snapshot.version:
        click.echo(f"{console.bold('Version:')}         {snapshot.version}")
    if snapshot.description:
        click.echo(f"{console.bold('Description:')}     {snapshot.description}")
    click.echo(f"{console.bold('Type:')}            {snapshot.type}")

    pm = snapshot.package_manager
    click.echo(f"{console.bold('Package manager:')} {pm.label} {console.dim(f'({pm.source})')}")

    deps = snapshot.dependencies
    if deps.needs_install:
        status = f"{console.color('needs install', 'yellow')} ({deps.reason})"
    else:
        status = console.color("up to date", "green")
    click.echo(f"{console.bold('Dependencies:')}    {status}")
    click.echo()

    if snapshot.scripts is None:
        return 0

    click.echo(console.bold("Detected commands:"))
    for role, command in ROLE_COMMANDS.items():
        script = snapshot.scripts.detected.get(role)
        if script:
            label = console.color(f"pr {command:<5}", "green")
            click.echo(f"  {label} → {pm.name} {script}")
    click.echo()

    if snapshot.scripts.scripts:
        click.echo(console.bold("All scripts:"))
        for name, command in snapshot.scripts.scripts.items():
            click.echo(f"  {console.color(name, 'cyan')} {console.dim('→ ' + _truncate(command))}")
    click.echo()
    return 0
