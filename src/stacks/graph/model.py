"""
stacks.graph.model — Stack graph data model.

A Stack is one compose project. The StackGraph maps stack keys to
stacks and is built once per invocation by the config loader:

    graph = StackGraph.from_stacks([
        Stack("networks"),
        Stack("web", depends_on=("networks",)),
    ])
    graph.adjacency()  # {"networks": (), "web": ("networks",)}

The graph does not validate its edges; see stacks.graph.resolver.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType


@dataclass(frozen=True)
class Stack:
    """A single compose project.

    Attributes:
        key: Unique identity, the key under ``stacks:`` in the config
        name: Compose project name (default: key)
        directory: Project directory (default: key)
        files: Compose files, empty for the tool's own discovery
        environment: Environment overlay for every invocation
        depends_on: Keys of the stacks this one needs, in declared order
    """

    key: str
    name: str = ""
    directory: str = ""
    files: tuple[str, ...] = ()
    environment: Mapping[str, str] = field(default_factory=dict)
    depends_on: tuple[str, ...] = ()

    def __post_init__(self):
        # frozen: defaults go through object.__setattr__
        if not self.name:
            object.__setattr__(self, "name", self.key)
        if not self.directory:
            object.__setattr__(self, "directory", self.key)
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "depends_on", tuple(dict.fromkeys(self.depends_on)))
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))

    def working_dir(self, base_dir: str | Path) -> Path:
        """Project directory resolved against the config's directory."""
        return Path(base_dir) / self.directory


class StackGraph(Mapping[str, Stack]):
    """Read-only mapping of stack key → Stack.

    Iteration is always in ascending key order.
    """

    def __init__(self, stacks: Mapping[str, Stack] | None = None):
        self._stacks: dict[str, Stack] = {
            key: stacks[key] for key in sorted(stacks or {})
        }

    @classmethod
    def from_stacks(cls, stacks: Iterable[Stack]) -> StackGraph:
        return cls({s.key: s for s in stacks})

    @classmethod
    def from_adjacency(cls, adjacency: Mapping[str, Iterable[str]]) -> StackGraph:
        """Build a bare graph from key → dependency keys."""
        return cls({
            key: Stack(key, depends_on=tuple(deps))
            for key, deps in adjacency.items()
        })

    def __getitem__(self, key: str) -> Stack:
        return self._stacks[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._stacks)

    def __len__(self) -> int:
        return len(self._stacks)

    def __repr__(self) -> str:
        return f"StackGraph({list(self._stacks)})"

    def adjacency(self) -> dict[str, tuple[str, ...]]:
        """Return key → dependency keys for every stack."""
        return {key: stack.depends_on for key, stack in self._stacks.items()}

    def dependencies(self, key: str) -> tuple[str, ...]:
        return self._stacks[key].depends_on
