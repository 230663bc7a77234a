"""User-facing terminal output. Diagnostics go through structlog instead."""

from __future__ import annotations

import click

PREFIX = "[pr]"


def info(message: str) -> None:
    click.echo(f"{click.style(PREFIX, fg='cyan')} {message}")


def success(message: str) -> None:
    click.echo(f"{click.style('✓', fg='green')} {message}")


def warn(message: str) -> None:
    click.echo(f"{click.style('⚠', fg='yellow')} {message}", err=True)


def error(message: str) -> None:
    click.echo(f"{click.style('✗', fg='red')} {message}", err=True)


def exec_line(argv: list[str]) -> None:
    """Echo a command line before it runs."""
    click.echo(f"{click.style('>', dim=True)} {click.style(' '.join(argv), bold=True)}")


def newline() -> None:
    click.echo()


def bold(text: str) -> str:
    return click.style(text, bold=True)


def dim(text: str) -> str:
    return click.style(text, dim=True)


def color(text: str, fg: str) -> str:
    return click.style(text, fg=fg)
