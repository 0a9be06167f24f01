"""
stacks.cli — CLI entry point.

  stack up                       — Bring every stack up, dependencies first
  stack -s web up -d             — Bring up web and what it depends on
  stack -s web,worker down       — Tear down, dependents first
  stack update                   — Pull images, then bring stacks up
  stack -s web logs --tail=5     — Any other compose command, passed through
"""

import click

from stacks.cli.compose_cmd import (
    CliState, ComposeGroup, register_compose_commands, split_stacks,
)
from stacks.logging_config import resolve_level, setup_logging


@click.group(cls=ComposeGroup)
@click.version_option(package_name="compose-stacks")
@click.option("-f", "--file", "stacks_file", envvar="STACKS_FILE", default=None,
              help="Stacks file (default: stacks.yml in the current or a parent directory)")
@click.option("-s", "--stacks", "stack_names", multiple=True,
              help="Comma separated stacks to operate on (default: all)")
@click.option("-v", "--verbose", count=True,
              help="Increase verbosity (-v info, -vv debug)")
@click.option("-q", "--quiet", is_flag=True, default=False,
              help="Only log errors")
@click.option("--dry-run", is_flag=True, default=False,
              help="Print compose invocations instead of running them")
@click.pass_context
def main(ctx, stacks_file, stack_names, verbose, quiet, dry_run):
    """Run docker compose across dependent stacks."""
    setup_logging(resolve_level(verbose, quiet))
    ctx.obj = CliState(
        stacks_file=stacks_file,
        stacks=split_stacks(stack_names),
        dry_run=dry_run,
    )


register_compose_commands(main)
