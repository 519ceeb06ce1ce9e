"""Thin wrapper around the system ps command.

All subprocess access in fitps goes through run_ps(), so callers and tests can
substitute a different runner.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import subprocess

logger = logging.getLogger(__name__)

PsRunner = Callable[[Sequence[str]], str]


class PsError(Exception):
    """ps could not be run or produced undecodable output.

    Attributes:
        command: The command line that failed
    """

    def __init__(self, message: str, *, command: Sequence[str] | None = None) -> None:
        self.command = list(command) if command else []
        super().__init__(message)


def output_lines(output: str) -> list[str]:
    """Split ps output at newlines only, dropping a trailing carriage return.

    Unlike str.splitlines(), form feeds and other separators that can appear
    inside a command line do not start a new line.
    """
    lines = output.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def query_args() -> list[str]:
    """Arguments listing every process as ``PID ARGS`` without a header."""
    return ["-e", "-o", "pid,args", "--no-headers"]


def render_args(spec: str) -> list[str]:
    """Arguments listing every process in tree order with the given columns."""
    return ["-e", "-o", spec, "-H"]


def run_ps(args: Sequence[str], command: str = "ps") -> str:
    """Run ps and return its standard output as text.

    The exit status is not checked; whatever ps wrote to stdout is used.

    Args:
        args: Arguments to pass to ps
        command: Program to invoke

    Returns:
        Decoded standard output

    Raises:
        PsError: If the program cannot be started or its output is not UTF-8
    """
    cmd = [command, *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, check=False)
    except OSError as e:
        raise PsError(f"Failed to run {command}: {e}", command=cmd) from e

    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PsError(f"{command} output is not valid UTF-8: {e}", command=cmd) from e

    logger.debug("%s exited with %d, %d bytes of output", command, result.returncode, len(result.stdout))
    return output


def make_runner(command: str) -> PsRunner:
    """Return a runner bound to a specific ps program."""

    def runner(args: Sequence[str]) -> str:
        return run_ps(args, command=command)

    return runner
