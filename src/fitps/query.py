"""Finding processes whose command line contains a query string."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from fitps.ps import PsRunner, output_lines, query_args, run_ps

logger = logging.getLogger(__name__)


def find_pids(needle: str, runner: PsRunner = run_ps) -> list[str]:
    """Return the PIDs of processes whose ``PID ARGS`` line contains ``needle``.

    Matching is plain substring containment against the raw ps line, so a
    needle can also match part of the PID column. The PID is the first
    whitespace-delimited token of each matching line.

    Args:
        needle: Substring to look for
        runner: Callable that runs ps with the given arguments

    Returns:
        Matching PIDs in ps output order

    Raises:
        PsError: If ps cannot be run
    """
    output = runner(query_args())
    pids: list[str] = []
    for line in output_lines(output):
        if needle not in line:
            continue
        fields = line.split()
        if fields:
            pids.append(fields[0])
    logger.debug("Query %r matched %d process(es)", needle, len(pids))
    return pids


def collect_pids(
    queries: Iterable[str],
    found: list[str] | None = None,
    runner: PsRunner = run_ps,
) -> list[str]:
    """Append the matches for each query to ``found`` and return it.

    Queries are ORed together. A PID matched by more than one query appears
    once per query.
    """
    if found is None:
        found = []
    for query in queries:
        found.extend(find_pids(query, runner=runner))
    return found
