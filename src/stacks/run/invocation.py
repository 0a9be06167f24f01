"""
stacks.run.invocation — Concrete compose invocations.

An InvocationTemplate bound to a stack:

    docker compose -p <name> [-f <file>]... <subcommand> <args>...

run in the stack's directory with its environment overlay.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from stacks.graph.model import Stack
from stacks.run.commands import InvocationTemplate


@dataclass(frozen=True)
class Invocation:
    """A fully parameterized compose call for one stack."""
    stack: str
    step: str
    program: str
    args: tuple[str, ...]
    working_dir: Path
    environment: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def for_stack(
        cls,
        template: InvocationTemplate,
        stack: Stack,
        command: Sequence[str],
        base_dir: str | Path,
    ) -> Invocation:
        """Bind a template to a stack.

        Args:
            template: Stack-agnostic template
            stack: Target stack
            command: Tool command, e.g. ["docker", "compose"]
            base_dir: Directory stack directories are relative to
        """
        global_args = ["-p", stack.name]
        for f in stack.files:
            global_args.extend(["-f", f])

        return cls(
            stack=stack.key,
            step=template.step,
            program=command[0],
            args=(*command[1:], *global_args, *template.argv()),
            working_dir=stack.working_dir(base_dir),
            environment=dict(stack.environment),
        )

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def display(self) -> str:
        return shlex.join(self.argv())
