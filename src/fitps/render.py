"""Printing the fitted ps table.

This module provides:
- truncate(): cut a line to a number of characters
- highlight(): wrap a line in bold red
- render(): run ps with a layout plan and print the result
- summary(): the trailing "N matching processes" line
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
import logging
import sys
from typing import TextIO

from fitps.layout import LayoutPlan
from fitps.ps import PsRunner, output_lines, render_args, run_ps

logger = logging.getLogger(__name__)

HIGHLIGHT_START = "\x1b[01;31m"
HIGHLIGHT_END = "\x1b[0m"


def truncate(line: str, width: int) -> str:
    """Return at most ``width`` characters of ``line``.

    ps replaces anything that would not fit in a single terminal cell with
    "?", so counting characters is a close enough stand-in for counting cells.
    Wide characters are not accounted for.
    """
    return line[: max(0, width)]


def highlight(line: str) -> str:
    return f"{HIGHLIGHT_START}{line}{HIGHLIGHT_END}"


def leading_pid(line: str) -> str | None:
    """Return the first whitespace-delimited token of a line, if any."""
    fields = line.split(None, 1)
    return fields[0] if fields else None


def format_table(
    output: str,
    width: int,
    pids: Collection[str] = (),
    use_highlight: bool = True,
) -> list[str]:
    """Turn raw ps output into the lines fitps prints.

    The header is kept verbatim and repeated after the last row. Every other
    line is truncated to ``width`` and, when its PID is in ``pids``,
    highlighted.

    Args:
        output: ps output including its header line
        width: Maximum characters per row
        pids: PIDs to highlight (PID is assumed to be the first column)
        use_highlight: Set False to print matched rows unmodified

    Returns:
        Lines to print, without trailing newlines
    """
    lines = output_lines(output)
    if not lines:
        return []

    selected = set(pids)
    header, rows = lines[0], lines[1:]
    result = [header]
    for row in rows:
        row = truncate(row, width)
        if use_highlight and leading_pid(row) in selected:
            row = highlight(row)
        result.append(row)
    result.append(header)
    return result


def render(
    plan: LayoutPlan,
    pids: Collection[str] = (),
    out: TextIO | None = None,
    runner: PsRunner = run_ps,
    use_highlight: bool = True,
) -> int:
    """Run ps with ``plan`` and print the fitted table.

    Args:
        plan: Columns and widths to request from ps
        pids: PIDs whose rows are highlighted
        out: Stream to print to (stdout by default)
        runner: Callable that runs ps with the given arguments
        use_highlight: Set False to disable highlighting

    Returns:
        Number of process rows printed

    Raises:
        PsError: If ps cannot be run
    """
    out = out or sys.stdout
    output = runner(render_args(plan.spec))
    lines = format_table(output, plan.total_width, pids, use_highlight=use_highlight)
    for line in lines:
        print(line, file=out)

    rows = max(0, len(lines) - 2)
    logger.debug("Rendered %d rows at width %d", rows, plan.total_width)
    return rows


def summary(pids: Iterable[str]) -> str:
    """Describe the matched PIDs in one line."""
    pids = list(pids)
    if not pids:
        return "No matching processes."
    if len(pids) == 1:
        return f"One matching process: {pids[0]}"
    return f"{len(pids)} matching processes: {' '.join(pids)}"
