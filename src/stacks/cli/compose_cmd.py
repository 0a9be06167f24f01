"""
stacks.cli.compose_cmd — Compose subcommands.

Every subcommand has the same shape:

    stack [-s web,worker] up -d
    stack logs --tail=5 -f

Arguments after the subcommand are handed to compose unchanged, except
--help, which shows this tool's help for the subcommand
(use `stack -s web logs -- --help` to reach compose's own). The
stacks file is only loaded once a subcommand actually runs, so
``--help`` works without one.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field

import click

from stacks.config.loader import find_stacks_file, load_config
from stacks.errors import ConfigError
from stacks.run.commands import COMMANDS
from stacks.run.driver import run
from stacks.run.executor import DryRunExecutor, SubprocessExecutor

# Exit status for an interrupted run (128 + SIGINT)
EXIT_INTERRUPTED = 130


@dataclass
class CliState:
    """Global options shared by all subcommands."""
    stacks_file: str | None = None
    stacks: list[str] = field(default_factory=list)
    dry_run: bool = False


def split_stacks(values: tuple[str, ...] | list[str]) -> list[str]:
    """Flatten repeated, comma separated -s values."""
    names: list[str] = []
    for value in values:
        for name in value.split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return names


def compose_command(name: str, help: str | None = None) -> click.Command:
    """Build the click command that runs ``name`` across stacks."""
    if not help:
        help = f"Run `{name}` against each stack"

    @click.command(
        name,
        help=help,
        context_settings={
            "ignore_unknown_options": True,
            "allow_interspersed_args": False,
        },
    )
    @click.argument("args", nargs=-1, type=click.UNPROCESSED)
    @click.pass_obj
    def command(state: CliState, args: tuple[str, ...]) -> None:
        run_command(state, name, list(args))

    return command


def run_command(state: CliState, command: str, args: list[str]) -> None:
    """Load the config, run the command and exit non-zero on failure."""
    try:
        config = load_config(find_stacks_file(state.stacks_file))
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    executor = DryRunExecutor() if state.dry_run else SubprocessExecutor()
    result = run(config, command, state.stacks, args, executor)

    if result.success:
        return

    click.echo(f"Error: {result.message}", err=True)
    if result.kind == "interrupted":
        sys.exit(EXIT_INTERRUPTED)
    if result.returncode is not None and result.returncode > 0:
        sys.exit(result.returncode)
    sys.exit(1)


class ComposeGroup(click.Group):
    """Group that passes unknown subcommands through to compose."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is None and cmd_name and not cmd_name.startswith("-"):
            command = compose_command(cmd_name)
        return command


def register_compose_commands(group: click.Group) -> None:
    """Add a subcommand for every entry of the command table."""
    for name, spec in COMMANDS.items():
        group.add_command(compose_command(name, spec.help), name)
