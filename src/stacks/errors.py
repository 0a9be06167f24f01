"""
stacks.errors — Shared error base.

Every error the engine raises derives from StacksError and carries a
``kind`` string, so callers can report a failure without matching on
concrete classes. Concrete errors live next to the code that raises them.
"""


class StacksError(Exception):
    """Base error."""
    kind = "error"


class ConfigError(StacksError):
    """Config file discovery or format error."""
    kind = "config"
