"""
stacks.graph.resolver — Dependency closure and graph validation.

Given a requested set of stack keys, resolve() returns the requested
stacks plus everything they transitively depend on:

    networks: []
    web: [networks]
    worker: [networks]

    resolve(graph, ["web"])  → {"networks", "web"}
    resolve(graph, [])       → {"networks", "web", "worker"}

The whole graph is validated first (unknown dependency targets, cycles),
so an invalid config is rejected before anything runs, whichever stacks
were requested.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stacks.errors import StacksError
from stacks.graph.model import StackGraph

logger = logging.getLogger(__name__)

# DFS colours
_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


class UnknownStackError(StacksError):
    """A requested stack or a dependency target does not exist."""
    kind = "unknown-stack"

    def __init__(self, key: str, referenced_by: str | None = None):
        self.key = key
        self.referenced_by = referenced_by
        if referenced_by is None:
            message = f'unknown stack "{key}"'
        else:
            message = (
                f'invalid dependency: "{referenced_by}" depends on "{key}", '
                f"which is not a known stack"
            )
        super().__init__(message)


class CycleError(StacksError):
    """The dependency relation contains a cycle.

    ``cycle`` starts and ends on the same key: ["a", "b", "a"].
    """
    kind = "cycle"

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        path = " -> ".join(f'"{key}"' for key in self.cycle)
        super().__init__(f"invalid dependency cycle: {path}")


def find_cycle(
    graph: StackGraph,
    keys: Iterable[str] | None = None,
) -> list[str] | None:
    """Find a dependency cycle with a three-colour depth-first traversal.

    Args:
        graph: Stack graph
        keys: Restrict the search to the subgraph induced by these keys
            (None = whole graph)

    Returns:
        The cycle as a closed path (first key repeated at the end),
        or None if the (sub)graph is acyclic
    """
    adjacency = graph.adjacency()
    if keys is None:
        scope = set(adjacency)
    else:
        scope = {key for key in keys if key in adjacency}

    colour = dict.fromkeys(scope, _UNVISITED)

    for root in sorted(scope):
        if colour[root] != _UNVISITED:
            continue

        colour[root] = _IN_PROGRESS
        path = [root]
        pending = [iter(adjacency[root])]

        while pending:
            for dep in pending[-1]:
                # Edges leaving the scope don't count
                if dep not in colour:
                    continue
                if colour[dep] == _IN_PROGRESS:
                    return path[path.index(dep):] + [dep]
                if colour[dep] == _UNVISITED:
                    colour[dep] = _IN_PROGRESS
                    path.append(dep)
                    pending.append(iter(adjacency[dep]))
                    break
            else:
                colour[path.pop()] = _DONE
                pending.pop()

    return None


def check_references(graph: StackGraph) -> None:
    """Raise UnknownStackError for the first dangling dependency edge."""
    for key, deps in graph.adjacency().items():
        for dep in deps:
            if dep not in graph:
                raise UnknownStackError(dep, referenced_by=key)


def validate_graph(graph: StackGraph) -> None:
    """Check referential integrity and acyclicity of the whole graph.

    Raises:
        UnknownStackError: A dependency points to a missing stack
        CycleError: The graph contains a cycle
    """
    check_references(graph)

    cycle = find_cycle(graph)
    if cycle is not None:
        raise CycleError(cycle)


def resolve(
    graph: StackGraph,
    requested: Iterable[str] | None = None,
    with_dependencies: bool = True,
) -> set[str]:
    """Resolve the set of stacks a request touches.

    Args:
        graph: Stack graph
        requested: Requested stack keys (empty/None = all stacks)
        with_dependencies: Include transitive dependencies

    Returns:
        Set of stack keys

    Raises:
        UnknownStackError: Unknown requested stack or dependency
        CycleError: The graph contains a cycle
    """
    requested = list(requested or [])

    for key in requested:
        if key not in graph:
            raise UnknownStackError(key)

    validate_graph(graph)

    if not requested:
        resolved = set(graph)
    elif not with_dependencies:
        resolved = set(requested)
    else:
        resolved = set()
        pending = list(requested)
        while pending:
            key = pending.pop()
            if key in resolved:
                continue
            resolved.add(key)
            pending.extend(graph.dependencies(key))

    logger.debug(
        "Resolved %s to %s",
        ",".join(requested) if requested else "all stacks",
        sorted(resolved),
    )
    return resolved
