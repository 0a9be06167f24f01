"""
stacks.config.loader — stacks.yml discovery and parsing.

stacks.yml format:

    command: docker compose          # optional, string or list
    stacks:
      networks: {}
      web:
        name: web-prod               # compose project name (default: key)
        directory: services/web      # default: key, relative to stacks.yml
        file: [compose.yml, compose.prod.yml]
        depends_on: [networks]
        environment:
          TAG: "1.2"

Lookup order when no file is given:
    --file / STACKS_FILE > stacks.yml or stacks.yaml in cwd or any parent

The loader only checks the format. Dependency references and cycles are
checked by stacks.graph.resolver.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from stacks.errors import ConfigError
from stacks.graph.model import Stack, StackGraph

DEFAULT_COMMAND = ["docker", "compose"]
STACKS_FILENAMES = ("stacks.yml", "stacks.yaml")


@dataclass
class Config:
    """Loaded stacks.yml."""
    graph: StackGraph
    command: list[str] = field(default_factory=lambda: list(DEFAULT_COMMAND))
    base_dir: Path = field(default_factory=lambda: Path("."))
    path: Path | None = None


def find_stacks_file(
    file: str | Path | None = None,
    cwd: str | Path | None = None,
) -> Path:
    """Locate the stacks file.

    Args:
        file: Explicit path (relative to cwd), None = search
        cwd: Start directory (None = current directory)

    Returns:
        Absolute path of the stacks file

    Raises:
        ConfigError: Nothing found
    """
    start = Path(cwd or ".").resolve()

    if file is not None:
        target = (start / file).resolve()
        if not target.is_file():
            raise ConfigError(f"The file {file} does not exist or is not a file.")
        return target

    for directory in (start, *start.parents):
        for filename in STACKS_FILENAMES:
            target = directory / filename
            if target.is_file():
                return target

    raise ConfigError(
        "No stacks.yml file present in the current directory or any of its parents."
    )


def load_config(path: str | Path) -> Config:
    """Read and parse a stacks file.

    Raises:
        ConfigError: File unreadable, invalid YAML or invalid format
    """
    p = Path(path)
    try:
        with open(p, "rb") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to open file {p}: {e}") from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e

    config = parse_config_dict(data, base_dir=p.resolve().parent)
    config.path = p
    return config


def parse_config_dict(
    data: dict[str, Any] | None,
    base_dir: str | Path = ".",
) -> Config:
    """Create a Config from decoded YAML.

    Args:
        data: stacks.yml content (None for an empty file)
        base_dir: Directory that stack directories are relative to

    Returns:
        Config object
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Stacks file must be a YAML mapping, got {type(data).__name__}"
        )

    command = _parse_command(data.get("command"))

    stacks_raw = data.get("stacks") or {}
    if not isinstance(stacks_raw, dict):
        raise ConfigError("stacks must be a mapping")

    stacks = [_parse_stack(str(key), raw) for key, raw in stacks_raw.items()]

    return Config(
        graph=StackGraph.from_stacks(stacks),
        command=command,
        base_dir=Path(base_dir),
    )


def _parse_command(raw: Any) -> list[str]:
    if raw is None:
        return list(DEFAULT_COMMAND)

    if isinstance(raw, str):
        command = shlex.split(raw)
    elif isinstance(raw, list) and all(isinstance(c, str) for c in raw):
        command = list(raw)
    else:
        raise ConfigError("command must be a string or a list of strings")

    if not command:
        raise ConfigError("command must not be empty")
    return command


def _parse_stack(key: str, raw: Any) -> Stack:
    """Validate one entry under ``stacks:``."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"stacks.{key} must be a mapping")

    for attr in ("name", "directory"):
        value = raw.get(attr)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"stacks.{key}.{attr} must be a string")

    files = raw.get("file")
    if files is None:
        files = []
    elif isinstance(files, str):
        files = [files]
    elif not (isinstance(files, list) and all(isinstance(f, str) for f in files)):
        raise ConfigError(f"stacks.{key}.file must be a string or a list of strings")

    depends_on = raw.get("depends_on") or []
    if not (isinstance(depends_on, list) and all(_is_name(d) for d in depends_on)):
        raise ConfigError(f"stacks.{key}.depends_on must be a list of stack names")

    environment = raw.get("environment") or {}
    if not isinstance(environment, dict):
        raise ConfigError(f"stacks.{key}.environment must be a mapping")
    for k, v in environment.items():
        if isinstance(v, (list, dict)):
            raise ConfigError(f"stacks.{key}.environment.{k} must be a scalar")

    return Stack(
        key=key,
        name=raw.get("name") or "",
        directory=raw.get("directory") or "",
        files=tuple(files),
        environment={
            str(k): "" if v is None else _env_str(v)
            for k, v in environment.items()
        },
        depends_on=tuple(str(d) for d in depends_on),
    )


def _env_str(value: Any) -> str:
    # YAML booleans would otherwise become "True"/"False"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_name(value: Any) -> bool:
    # Stack keys like `1:` are read as ints and stored as "1"
    return isinstance(value, str) or (
        isinstance(value, int) and not isinstance(value, bool)
    )
