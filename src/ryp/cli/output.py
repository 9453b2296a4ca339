"""CLI output helpers for errors, warnings and the run summary."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, NoReturn

import click

from ryp.executor.invocation import format_command

if TYPE_CHECKING:
    from ryp.cli.exit_codes import ExitCode
    from ryp.workflow import PipelineResult


def error_exit(message: str, code: ExitCode | int) -> NoReturn:
    """Print ``Error: <message>`` to stderr and exit with ``code``.

    Note:
        This function never returns; it always calls sys.exit().
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def warning_output(message: str) -> None:
    """Print a warning message to stderr."""
    click.echo(f"Warning: {message}", err=True)


def summary_output(result: PipelineResult) -> None:
    """Print what a finished run produced."""
    for note in result.notes:
        warning_output(note)

    if result.thumbnails or result.warnings:
        click.echo(
            f"Thumbnails: {len(result.thumbnails)} written"
            + (f", {len(result.warnings)} failed" if result.warnings else "")
        )
    if result.final_output is not None:
        click.echo(f"Output: {result.final_output}")
    if result.intermediate_kept:
        click.echo(f"Intermediate retained: {result.intermediate_path}")


def dry_run_output(commands: list[list[str]]) -> None:
    """Print the ffmpeg commands a dry run would have executed."""
    click.echo(f"Dry run: {len(commands)} ffmpeg command(s) planned")
    for cmd in commands:
        click.echo(format_command(cmd))
