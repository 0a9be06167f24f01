"""
stacks — Dependency-ordered docker compose across many projects.

Stacks are declared in stacks.yml with their dependencies; every
command runs against the requested stacks and everything they need,
dependencies first (or last, for teardown).
"""

from stacks.errors import StacksError, ConfigError
from stacks.graph import (
    Stack,
    StackGraph,
    resolve,
    validate_graph,
    order,
    Direction,
    UnknownStackError,
    CycleError,
)
from stacks.config import Config, find_stacks_file, load_config, parse_config_dict
from stacks.run import (
    translate,
    get_command,
    InvocationTemplate,
    Invocation,
    InvalidArgumentsError,
    Outcome,
    SubprocessExecutor,
    DryRunExecutor,
    StackOperationError,
    RunResult,
)

__version__ = "0.1.0"

__all__ = [
    # errors
    "StacksError",
    "ConfigError",
    "UnknownStackError",
    "CycleError",
    "InvalidArgumentsError",
    "StackOperationError",
    # graph
    "Stack",
    "StackGraph",
    "resolve",
    "validate_graph",
    "order",
    "Direction",
    # config
    "Config",
    "find_stacks_file",
    "load_config",
    "parse_config_dict",
    # run
    "translate",
    "get_command",
    "InvocationTemplate",
    "Invocation",
    "Outcome",
    "SubprocessExecutor",
    "DryRunExecutor",
    "RunResult",
]
