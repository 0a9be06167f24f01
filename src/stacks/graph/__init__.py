"""stacks.graph — Stack graph, dependency resolution and ordering."""

from stacks.graph.model import Stack, StackGraph
from stacks.graph.resolver import (
    resolve, validate_graph, check_references, find_cycle,
    UnknownStackError, CycleError,
)
from stacks.graph.order import order, Direction

__all__ = [
    "Stack", "StackGraph",
    "resolve", "validate_graph", "check_references", "find_cycle",
    "UnknownStackError", "CycleError",
    "order", "Direction",
]
