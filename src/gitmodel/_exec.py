"""Subprocess execution for git invocations.

run_command() never raises for process failures. Timeouts, a missing binary
and OS errors come back on the CommandResult; the repository facade decides
whether a failed result becomes a CommandError.
"""

import os
import subprocess
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from gitmodel.exceptions import CommandContext

DEFAULT_TIMEOUT_MS: Final = 60_000

# Output kept on a CommandContext, in bytes
MAX_OUTPUT_BYTES: Final = 1024 * 1024

TRUNCATION_MARKER: Final = "\n... [output truncated]"


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """A single process invocation.

    Attributes:
        args: Argument vector; the first item is the executable.
        cwd: Directory to run in, or None for the current directory.
        env: Variables layered over the inherited environment.
        timeout_ms: Wall-clock limit in milliseconds.
    """

    args: Sequence[str]
    cwd: str | Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a process invocation.

    Attributes:
        success: True only when the process ran and exited 0.
        exit_code: Exit status, or None when the process never finished.
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        error: Why the process could not be started or finished.
        timed_out: Whether the timeout killed the process.
        command_not_found: Whether the executable was missing.
        duration_ms: Wall-clock time spent, in milliseconds.
    """

    success: bool
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    timed_out: bool = False
    command_not_found: bool = False
    duration_ms: float = 0.0

    def to_context(self, args: Sequence[str]) -> CommandContext:
        """Snapshot this result for an error, with output capped."""
        return CommandContext(
            args=tuple(args),
            exit_code=self.exit_code,
            stdout=truncate_output(self.stdout),
            stderr=truncate_output(self.stderr),
        )


def truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Cap output at `max_bytes` of UTF-8 and mark the cut.

    A multi-byte character straddling the limit is dropped whole.
    """
    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output
    kept = encoded[:max_bytes].decode("utf-8", errors="ignore")
    return f"{kept}{TRUNCATION_MARKER}"


def run_command(config: CommandConfig) -> CommandResult:
    """Run a process to completion and capture its output.

    Output is decoded as UTF-8 with undecodable bytes replaced.

    Args:
        config: What to run, where, and for how long.

    Returns:
        The CommandResult; never raises for process failures.
    """
    if not config.args:
        return CommandResult(success=False, error="No command specified")

    timeout = config.timeout_ms / 1000
    started = time.perf_counter()
    try:
        completed = subprocess.run(  # noqa: S603
            list(config.args),
            cwd=None if config.cwd is None else str(config.cwd),
            env={**os.environ, **config.env},
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            success=False,
            error=f"{config.args[0]} did not finish within {timeout:g}s",
            timed_out=True,
            duration_ms=_elapsed_ms(started),
        )
    except FileNotFoundError as e:
        return CommandResult(success=False, error=str(e), command_not_found=True)
    except OSError as e:
        return CommandResult(success=False, error=str(e))

    return CommandResult(
        success=completed.returncode == 0,
        exit_code=completed.returncode,
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
        duration_ms=_elapsed_ms(started),
    )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)
