"""
stacks.run.executor — Running invocations.

An executor is anything with ``run(invocation) -> Outcome``. It blocks
until the invocation is finished.

  SubprocessExecutor — runs the tool, output goes straight to the terminal
  DryRunExecutor     — prints the command line instead of running it
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Protocol

import click

from stacks.run.invocation import Invocation


@dataclass
class Outcome:
    """Result of one invocation."""
    success: bool
    returncode: int | None = 0
    message: str = ""


class Executor(Protocol):
    def run(self, invocation: Invocation) -> Outcome:
        ...


class SubprocessExecutor:
    """Run invocations with subprocess.run, inheriting stdio."""

    def run(self, invocation: Invocation) -> Outcome:
        env = {**os.environ, **invocation.environment}

        try:
            result = subprocess.run(
                invocation.argv(),
                cwd=invocation.working_dir,
                env=env,
            )
        except OSError as e:
            # Missing program or working directory
            return Outcome(
                success=False,
                returncode=None,
                message=f"Error running {invocation.program}: {e}",
            )

        if result.returncode == 0:
            return Outcome(success=True)

        if result.returncode < 0:
            status = f"terminated by signal {-result.returncode}"
        else:
            status = f"exit status {result.returncode}"
        return Outcome(
            success=False,
            returncode=result.returncode,
            message=f"Error running command `{invocation.display()}`: {status}",
        )


@dataclass
class DryRunExecutor:
    """Print each invocation and report success."""
    invocations: list[Invocation] = field(default_factory=list)

    def run(self, invocation: Invocation) -> Outcome:
        self.invocations.append(invocation)
        env = " ".join(f"{k}={shlex.quote(v)}" for k, v in sorted(invocation.environment.items()))
        prefix = f"{env} " if env else ""
        click.echo(f"[{invocation.stack}] (cd {invocation.working_dir} && {prefix}{invocation.display()})")
        return Outcome(success=True)
