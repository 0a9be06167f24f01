"""
stacks.run.commands — Command translation.

Maps a user-facing command to the compose invocations it expands to.
Templates are stack-agnostic; stacks.run.invocation fills in the
project name, files, directory and environment of each stack.

    up           → up --wait <args>
    update       → pull <args>, then up --wait <args>
    restart      → down <args> (reverse order), then up --wait (forward)
    logs --tail=5 → logs --tail=5

Anything not in the table is passed through unchanged, so every
compose command keeps working.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from stacks.errors import StacksError
from stacks.graph.order import Direction

WAIT = "--wait"


class InvalidArgumentsError(StacksError):
    """Command name or passthrough arguments can't form an invocation."""
    kind = "invalid-arguments"


class Scope(Enum):
    DEPENDENCIES = "dependencies"   # requested stacks + everything they need
    SINGLE = "single"               # exactly one stack, no dependencies


@dataclass(frozen=True)
class InvocationTemplate:
    """One compose call, not yet bound to a stack."""
    subcommand: str
    args: tuple[str, ...] = ()

    @property
    def step(self) -> str:
        return self.subcommand

    def argv(self) -> list[str]:
        return [self.subcommand, *self.args]


@dataclass(frozen=True)
class Step:
    """A compose subcommand with fixed leading flags.

    Attributes:
        subcommand: Compose subcommand
        flags: Flags placed before the passthrough arguments
        passthrough: Append the user's arguments
    """
    subcommand: str
    flags: tuple[str, ...] = ()
    passthrough: bool = True

    def template(self, args: Sequence[str]) -> InvocationTemplate:
        extra = tuple(args) if self.passthrough else ()
        return InvocationTemplate(self.subcommand, self.flags + extra)


@dataclass(frozen=True)
class Phase:
    """Steps run for every stack of one plan, in one direction."""
    direction: Direction
    steps: tuple[Step, ...]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    phases: tuple[Phase, ...]
    scope: Scope = Scope.DEPENDENCIES
    help: str = ""

    def phase_templates(
        self, args: Sequence[str],
    ) -> list[tuple[Direction, list[InvocationTemplate]]]:
        return [
            (phase.direction, [step.template(args) for step in phase.steps])
            for phase in self.phases
        ]


def _forward(name: str, help: str) -> CommandSpec:
    return CommandSpec(name, (Phase(Direction.FORWARD, (Step(name),)),), help=help)


def _reverse(name: str, help: str) -> CommandSpec:
    return CommandSpec(name, (Phase(Direction.REVERSE, (Step(name),)),), help=help)


def _single(name: str, help: str) -> CommandSpec:
    return CommandSpec(
        name, (Phase(Direction.FORWARD, (Step(name),)),),
        scope=Scope.SINGLE, help=help,
    )


COMMANDS: dict[str, CommandSpec] = {spec.name: spec for spec in [
    _forward("build", "Build or rebuild services"),
    _single("cp", "Copy files/folders between a service container and the local filesystem"),
    _forward("create", "Creates containers for a service"),
    _reverse("down", "Stop and remove containers, networks"),
    _single("events", "Receive real time events from containers"),
    _single("exec", "Execute a command in a running container"),
    _forward("images", "List images used by the created containers"),
    _reverse("kill", "Force stop service containers"),
    _single("logs", "View output from containers"),
    _forward("ls", "List running compose projects"),
    _reverse("pause", "Pause services"),
    _single("port", "Print the public port for a port binding"),
    _forward("ps", "List containers"),
    _forward("pull", "Pull service images"),
    _forward("push", "Push service images"),
    CommandSpec(
        "restart",
        (
            Phase(Direction.REVERSE, (Step("down"),)),
            Phase(Direction.FORWARD, (Step("up", (WAIT,), passthrough=False),)),
        ),
        help="Take stacks down, then bring them back up",
    ),
    _reverse("rm", "Removes stopped service containers"),
    _single("run", "Run a one-off command on a service"),
    _single("start", "Start services"),
    _single("stop", "Stop services"),
    _single("top", "Display the running processes"),
    _forward("unpause", "Unpause services"),
    CommandSpec(
        "up",
        (Phase(Direction.FORWARD, (Step("up", (WAIT,)),)),),
        help="Create and start containers, waiting until they are running",
    ),
    CommandSpec(
        "update",
        (Phase(Direction.FORWARD, (Step("pull"), Step("up", (WAIT,)))),),
        help="Pull images, then recreate and start containers",
    ),
]}


def check_arguments(command: str, args: Sequence[str]) -> None:
    """Reject command names and arguments that can't be passed on.

    Raises:
        InvalidArgumentsError: Bad command name or argument
    """
    if not isinstance(command, str) or not command.strip():
        raise InvalidArgumentsError("A command name is required.")
    if command.startswith("-") or any(c.isspace() for c in command):
        raise InvalidArgumentsError(f"Invalid command name: {command!r}")

    for i, arg in enumerate(args):
        if not isinstance(arg, str):
            raise InvalidArgumentsError(
                f"Argument {i} must be a string, got {type(arg).__name__}"
            )
        if "\0" in arg:
            raise InvalidArgumentsError(f"Argument {i} contains a NUL byte: {arg!r}")


def get_command(name: str) -> CommandSpec:
    """Return the table entry for ``name``, or a passthrough command."""
    spec = COMMANDS.get(name)
    if spec is None:
        return _forward(name, "")
    return spec


def translate(command: str, args: Sequence[str] = ()) -> list[InvocationTemplate]:
    """Translate a command into its invocation templates, in run order.

    Args:
        command: User-facing command name
        args: Passthrough arguments

    Returns:
        InvocationTemplate list (all phases, in order)

    Raises:
        InvalidArgumentsError: See check_arguments()
    """
    args = list(args)
    check_arguments(command, args)

    templates: list[InvocationTemplate] = []
    for _, phase in get_command(command).phase_templates(args):
        templates.extend(phase)
    return templates
