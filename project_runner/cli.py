"""CLI entry point: pr.

Commands:
    pr run              Detect -> install if needed -> start the dev script
    pr test|build|start Run the script detected for that role
    pr info             Show the project analysis
    pr <script>         Run any script from package.json
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from project_runner import __version__, console
from project_runner.commands import run_role, run_script, show_available_scripts, show_info
from project_runner.core.config import Settings
from project_runner.core.logging import setup_logging
from project_runner.exceptions import CliError, ScriptNotFoundError
from project_runner.runner.context import RunContext

log = structlog.get_logger("project_runner.cli")

PROG_NAME = "pr"

# Commands bound to a script role; only "run" installs dependencies on its own
ROLE_COMMANDS: dict[str, tuple[str, bool]] = {
    "run": ("dev", True),
    "test": ("test", False),
    "build": ("build", False),
    "start": ("start", False),
}

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
    "allow_extra_args": True,
}


class RunnerCommand(click.Command):
    """Keeps everything after ``--`` out of option parsing so it reaches the script."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if "--" in args:
            split = args.index("--")
            ctx.meta["passthrough"] = args[split + 1 :]
            args = args[:split]
        return super().parse_args(ctx, args)


def _split_tokens(tokens: list[str]) -> list[str]:
    """Drop unrecognized flags with a warning; keep positional tokens."""
    positional: list[str] = []
    for token in tokens:
        if token.startswith("-") and token != "-":
            console.warn(f"Unknown option ignored: {token}")
            continue
        positional.append(token)
    return positional


def _dispatch(
    run_ctx: RunContext,
    command: str,
    args: list[str],
    *,
    no_install: bool,
    force_install: bool,
    as_json: bool,
) -> int:
    if command == "info":
        return show_info(run_ctx, as_json=as_json)
    if command in ROLE_COMMANDS:
        role, auto_install = ROLE_COMMANDS[command]
        return run_role(
            run_ctx,
            role,
            args,
            auto_install=auto_install,
            force_install=force_install,
            no_install=no_install,
        )
    return run_script(
        run_ctx, command, args, force_install=force_install, no_install=no_install
    )


@click.command(cls=RunnerCommand, context_settings=CONTEXT_SETTINGS)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option("-v", "--verbose", is_flag=True, help="Show the detection trail")
@click.option(
    "-d",
    "--dir",
    "project_dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Project directory (default: current directory)",
)
@click.option("--no-install", is_flag=True, help="Skip dependency installation")
@click.option("-i", "--install", "force_install", is_flag=True, help="Always install dependencies first")
@click.option("--json", "as_json", is_flag=True, help="info: print the analysis as JSON")
@click.version_option(
    __version__, "-V", "--version", prog_name=PROG_NAME, message="%(prog)s v%(version)s"
)
@click.pass_context
def main(
    ctx: click.Context,
    tokens: tuple[str, ...],
    verbose: bool,
    project_dir: str,
    no_install: bool,
    force_install: bool,
    as_json: bool,
) -> None:
    """pr - zero-config project runner.

    \b
    Commands:
      run          Detect, install if needed, start the dev server
      test         Run the tests
      build        Build the project
      start        Start in production mode
      info         Show the project analysis
      help         Show this message
      version      Show the version
      <script>     Run any script from package.json

    Arguments after the command, and anything after --, are passed to the script.
    """
    positional = _split_tokens(list(tokens))
    command = positional[0] if positional else ""
    args = positional[1:] + list(ctx.meta.get("passthrough", []))

    if command in ("", "help"):
        click.echo(ctx.get_help())
        return
    if command == "version":
        click.echo(f"{PROG_NAME} v{__version__}")
        return

    try:
        settings = Settings.from_env()
        setup_logging(settings, verbose=verbose)
        resolved_dir = str(Path(project_dir).resolve())
        log.debug("cli.command", command=command, args=args, project_dir=resolved_dir)

        with RunContext(resolved_dir, settings=settings) as run_ctx:
            exit_code = _dispatch(
                run_ctx,
                command,
                args,
                no_install=no_install,
                force_install=force_install,
                as_json=as_json,
            )
    except CliError as e:
        console.error(e.message)
        if isinstance(e, ScriptNotFoundError):
            console.newline()
            show_available_scripts(e.available)
        ctx.exit(e.exit_code)
    except Exception as e:
        log.exception("cli.unexpected_error")
        console.error(str(e) or type(e).__name__)
        ctx.exit(1)

    ctx.exit(exit_code)


if __name__ == "__main__":
    main()
