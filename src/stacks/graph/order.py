"""
stacks.graph.order — Execution ordering.

Topologically sorts a resolved set of stacks:

  FORWARD — dependencies before dependents (up, build, pull, ...)
  REVERSE — dependents before dependencies (down, rm, kill, ...)

Stacks with no ordering constraint between them are emitted in
ascending key order, so the same graph and request always give the
same plan.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable
from enum import Enum

from stacks.graph.model import StackGraph
from stacks.graph.resolver import CycleError, UnknownStackError, find_cycle

logger = logging.getLogger(__name__)


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


def order(
    graph: StackGraph,
    keys: Iterable[str],
    direction: Direction = Direction.FORWARD,
) -> list[str]:
    """Order ``keys`` so every dependency edge inside the set is respected.

    Args:
        graph: Stack graph
        keys: Stacks to order (usually the output of resolve())
        direction: FORWARD or REVERSE

    Returns:
        Execution plan (list of stack keys)

    Raises:
        UnknownStackError: A key is not in the graph
        CycleError: The induced subgraph contains a cycle
    """
    scope = set(keys)
    for key in sorted(scope):
        if key not in graph:
            raise UnknownStackError(key)

    # key → keys that have to run first
    blockers: dict[str, set[str]] = {key: set() for key in scope}
    for key in scope:
        for dep in graph.dependencies(key):
            if dep not in scope:
                continue
            if direction is Direction.FORWARD:
                blockers[key].add(dep)
            else:
                blockers[dep].add(key)

    unblocks: dict[str, list[str]] = {key: [] for key in scope}
    for key, before in blockers.items():
        for other in before:
            unblocks[other].append(key)

    waiting = {key: len(before) for key, before in blockers.items()}
    ready = [key for key, count in waiting.items() if count == 0]
    heapq.heapify(ready)

    plan: list[str] = []
    while ready:
        key = heapq.heappop(ready)
        plan.append(key)
        for other in unblocks[key]:
            waiting[other] -= 1
            if waiting[other] == 0:
                heapq.heappush(ready, other)

    if len(plan) != len(scope):
        cycle = find_cycle(graph, scope)
        raise CycleError(cycle or sorted(scope - set(plan)))

    logger.debug("Plan (%s): %s", direction.value, plan)
    return plan
