"""stacks.config — stacks.yml loading."""

from stacks.config.loader import (
    Config, find_stacks_file, load_config, parse_config_dict,
    DEFAULT_COMMAND, STACKS_FILENAMES,
)

__all__ = [
    "Config", "find_stacks_file", "load_config", "parse_config_dict",
    "DEFAULT_COMMAND", "STACKS_FILENAMES",
]
