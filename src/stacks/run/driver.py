"""
stacks.run.driver — Plan execution.

    config = load_config(find_stacks_file())
    result = run(config, "up", stacks=["web"], args=["-d"])

run() translates the command, resolves and orders the stacks for every
phase, and only then starts executing. Execution is strictly sequential
and fail-fast: the first failing invocation stops the remaining steps
of that stack and every later stack. Nothing is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from stacks.config.loader import Config
from stacks.errors import StacksError
from stacks.graph.order import Direction, order
from stacks.graph.resolver import resolve
from stacks.run.commands import (
    InvalidArgumentsError, InvocationTemplate, Scope,
    check_arguments, get_command,
)
from stacks.run.executor import Executor, SubprocessExecutor
from stacks.run.invocation import Invocation

logger = logging.getLogger(__name__)


class StackOperationError(StacksError):
    """An invocation for a stack failed or was interrupted."""
    kind = "operation-failed"

    def __init__(
        self,
        stack: str,
        step: str,
        reason: str,
        returncode: int | None = None,
        kind: str | None = None,
    ):
        self.stack = stack
        self.step = step
        self.reason = reason
        self.returncode = returncode
        if kind is not None:
            self.kind = kind
        super().__init__(f'Stack "{stack}" failed at step "{step}": {reason}')


@dataclass
class PlannedPhase:
    """One ordered pass over the stacks."""
    direction: Direction
    plan: list[str]
    templates: list[InvocationTemplate]


@dataclass
class RunResult:
    """Overall outcome of run()."""
    success: bool
    stack: str | None = None
    step: str | None = None
    kind: str | None = None
    message: str = ""
    returncode: int | None = None


def plan_command(
    config: Config,
    command: str,
    stacks: Sequence[str] | None = None,
    args: Sequence[str] = (),
) -> list[PlannedPhase]:
    """Validate a request and build its execution phases.

    Raises:
        InvalidArgumentsError: Bad command/arguments, or a single-stack
            command that doesn't target exactly one stack
        UnknownStackError: Unknown stack
        CycleError: Dependency cycle
    """
    args = list(args)
    check_arguments(command, args)
    spec = get_command(command)
    requested = list(stacks or [])

    if spec.scope is Scope.SINGLE:
        keys = resolve(config.graph, requested, with_dependencies=False)
        if len(keys) != 1:
            raise InvalidArgumentsError(
                f"Command {command} can only operate on one stack "
                f"but {len(keys)} were provided."
            )
    else:
        keys = resolve(config.graph, requested)

    return [
        PlannedPhase(direction, order(config.graph, keys, direction), templates)
        for direction, templates in spec.phase_templates(args)
    ]


def execute(
    config: Config,
    plan: Sequence[str],
    templates: Sequence[InvocationTemplate],
    executor: Executor,
) -> None:
    """Run every template for every stack of the plan, in order.

    Raises:
        StackOperationError: First failed or interrupted invocation
    """
    for key in plan:
        stack = config.graph[key]

        for template in templates:
            invocation = Invocation.for_stack(
                template, stack, config.command, config.base_dir,
            )
            logger.info("[%s] %s", key, template.step)
            logger.debug(
                "Executing `%s` in %s", invocation.display(), invocation.working_dir,
            )

            try:
                outcome = executor.run(invocation)
            except KeyboardInterrupt as e:
                raise StackOperationError(
                    key, template.step, "interrupted", kind="interrupted",
                ) from e

            if not outcome.success:
                raise StackOperationError(
                    key,
                    template.step,
                    outcome.message or "command failed",
                    returncode=outcome.returncode,
                )


def run(
    config: Config,
    command: str,
    stacks: Sequence[str] | None = None,
    args: Sequence[str] = (),
    executor: Executor | None = None,
) -> RunResult:
    """Validate, plan and execute a command.

    Args:
        config: Loaded config
        command: Command name (up, down, update, logs, ...)
        stacks: Requested stack keys (empty/None = all)
        args: Passthrough arguments
        executor: Executor (default: SubprocessExecutor)

    Returns:
        RunResult; errors are reported through it, not raised
    """
    if executor is None:
        executor = SubprocessExecutor()

    logger.debug(
        "Command `%s` against %s with arguments %s",
        command,
        ",".join(stacks) if stacks else "all stacks",
        list(args),
    )

    try:
        phases = plan_command(config, command, stacks, args)
        for phase in phases:
            execute(config, phase.plan, phase.templates, executor)
    except StackOperationError as e:
        return RunResult(
            success=False,
            stack=e.stack,
            step=e.step,
            kind=e.kind,
            message=str(e),
            returncode=e.returncode,
        )
    except StacksError as e:
        return RunResult(success=False, kind=e.kind, message=str(e))

    return RunResult(success=True)
