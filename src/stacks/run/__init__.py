"""stacks.run — Command translation and plan execution."""

from stacks.run.commands import (
    COMMANDS, CommandSpec, Phase, Step, Scope, InvocationTemplate,
    InvalidArgumentsError, check_arguments, get_command, translate,
)
from stacks.run.invocation import Invocation
from stacks.run.executor import Outcome, Executor, SubprocessExecutor, DryRunExecutor
from stacks.run.driver import (
    StackOperationError, PlannedPhase, RunResult, plan_command, execute, run,
)

__all__ = [
    "COMMANDS", "CommandSpec", "Phase", "Step", "Scope", "InvocationTemplate",
    "InvalidArgumentsError", "check_arguments", "get_command", "translate",
    "Invocation",
    "Outcome", "Executor", "SubprocessExecutor", "DryRunExecutor",
    "StackOperationError", "PlannedPhase", "RunResult",
    "plan_command", "execute", "run",
]
