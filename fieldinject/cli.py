"""CLI entry point for fieldinject."""

import difflib
import sys
from pathlib import Path
from typing import Any, Optional

import click

from fieldinject import __version__
from fieldinject.commands.base import BaseCommand
from fieldinject.commands.constructor_injection.inject_constructor_fields import Outcome
from fieldinject.commands.registry import (
    apply_refactoring,
    discover_and_register_commands,
    registered_commands,
)
from fieldinject.core.options import MatchPolicy
from fieldinject.logging_config import setup_logging

# Dynamically discover and import all command modules
discover_and_register_commands()


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """fieldinject - constructor field injection for C# and Python sources.

    Point it at a class and it declares a private backing field for every
    constructor parameter that lacks one, then assigns it in the constructor.
    """
    pass


def refactor_file(refactoring_name: str, file_path: Path, **params: Any) -> BaseCommand:
    """Apply a refactoring to a file.

    Args:
        refactoring_name: Name of the refactoring to apply
        file_path: Path to the file to refactor
        **params: Additional parameters for the refactoring

    Returns:
        The executed command

    Raises:
        ValueError: If refactoring_name is not recognized
    """
    return apply_refactoring(refactoring_name, file_path, **params)


def _unified_diff(before: str, after: str, file_path: Path) -> str:
    diff = difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"a/{file_path.name}",
        tofile=f"b/{file_path.name}",
    )
    return "".join(diff)


@main.command("inject-fields")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--line", "-l", type=click.IntRange(min=1), required=True, help="1-based caret line.")
@click.option("--column", "-c", type=click.IntRange(min=1), default=1, show_default=True, help="1-based caret column.")
@click.option(
    "--match-policy",
    type=click.Choice([p.value for p in MatchPolicy]),
    default=MatchPolicy.NAME_ONLY.value,
    show_default=True,
    help="How existing fields are matched against parameters.",
)
@click.option("--indent-size", type=click.IntRange(min=1), default=None, help="Spaces per indent level.")
@click.option("--dry-run", is_flag=True, help="Print a diff instead of writing the file.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def inject_fields(
    file: Path,
    line: int,
    column: int,
    match_policy: str,
    indent_size: Optional[int],
    dry_run: bool,
    verbose: bool,
) -> None:
    """Add backing fields for the constructor of the class at FILE:LINE."""
    setup_logging(verbose)
    try:
        command = refactor_file(
            "inject-constructor-fields",
            file,
            line=line,
            column=column,
            match_policy=match_policy,
            indent_size=indent_size,
            dry_run=dry_run,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if dry_run and command.changed:
        click.echo(_unified_diff(command.original_text, command.updated_text, file), nl=False)
    elif command.outcome is Outcome.APPLIED:
        added = ", ".join(command.result.fields_added)
        click.echo(f"Added backing fields for {added} in {command.result.class_name}")

    if command.outcome is Outcome.FAILED:
        sys.exit(1)


@main.command("list-commands")
def list_commands() -> None:
    """List registered commands and their menu bindings."""
    for command_class in registered_commands():
        if command_class.command_set is not None and command_class.command_id is not None:
            binding = f"{command_class.command_set}:{command_class.command_id:#06x}"
        else:
            binding = "-"
        click.echo(f"{command_class.name}\t{binding}")
