"""Column layout planning for fitps.

This module provides:
- Column: a ps output column with a fixed width and two sort keys
- COLUMNS: the static column catalog
- LayoutMode: the three layout modes selectable from the command line
- LayoutPlan: the resolved (name, width) pairs handed to ps
- plan(): greedy column selection for a target width
- reserve_for_mode(): the baseline args width for a layout mode

Columns are chosen in preference order until the line is full, then shown in
display order. The ``args`` column has no fixed width and absorbs whatever
space is left over.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Width assumed when the terminal size cannot be determined
DEFAULT_WIDTH = 80

# Args reserve used by the detail (-d) layout
DETAIL_RESERVE = 44

EXPANDABLE = "args"


class Column(BaseModel):
    """A single ps output column.

    Attributes:
        name: ps format specifier (e.g. "pid", "%mem")
        fixed_width: Width in characters; 0 marks the expandable column
        preference_rank: Lower ranks are offered space first
        display_rank: Lower ranks are shown further left
    """

    model_config = ConfigDict(frozen=True)

    name: str
    fixed_width: int = Field(..., ge=0)
    preference_rank: int
    display_rank: int

    @property
    def expandable(self) -> bool:
        return self.fixed_width == 0


def _catalog() -> tuple[Column, ...]:
    # Listed in order of preference.
    widths = [
        ("args", 0),
        ("pid", 5),
        ("stat", 4),
        ("nice", 3),
        ("%mem", 4),
        ("euser", 8),
        ("tname", 6),
        ("start_time", 5),
        ("psr", 3),
        ("cputime", 8),
        ("egroup", 8),
        ("pgid", 5),
    ]
    display = [
        "pid", "pgid", "args", "psr", "stat", "nice",
        "%mem", "cputime", "start_time", "tname", "euser", "egroup",
    ]
    return tuple(
        Column(
            name=name,
            fixed_width=width,
            preference_rank=rank,
            display_rank=display.index(name),
        )
        for rank, (name, width) in enumerate(widths)
    )


COLUMNS: tuple[Column, ...] = _catalog()

PID_WIDTH = next(col.fixed_width for col in COLUMNS if col.name == "pid")


class LayoutMode(str, Enum):
    """How much room the args column is promised before leftovers are added."""

    NORMAL = "normal"
    DETAIL = "detail"
    LONG = "long"


class LayoutPlan(BaseModel):
    """Resolved columns in display order.

    Attributes:
        columns: (name, width) pairs, left to right
        total_width: Width of the line the plan was built for
    """

    model_config = ConfigDict(frozen=True)

    columns: tuple[tuple[str, int], ...]
    total_width: int = Field(..., ge=0)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.columns]

    def width_of(self, name: str) -> int | None:
        """Return the resolved width of a column, or None if it was not chosen."""
        for col_name, width in self.columns:
            if col_name == name:
                return width
        return None

    @property
    def spec(self) -> str:
        """The column list in ps ``-o`` syntax, e.g. ``pid:5,args:74``."""
        return ",".join(f"{name}:{width}" for name, width in self.columns)

    def __str__(self) -> str:
        return self.spec


def plan(
    total_width: int,
    reserved_for_expandable: int,
    columns: tuple[Column, ...] = COLUMNS,
) -> LayoutPlan:
    """Choose and order columns for a line of ``total_width`` characters.

    Columns are considered once each in preference order and admitted while
    they fit; every admitted column costs its width plus a one-character gap.
    The expandable column is always admitted and receives the reserve plus
    whatever space is left at the end, so for ``total_width >= reserve`` the
    widths plus gaps add up to exactly ``total_width + 1``.

    Args:
        total_width: Target line width in characters
        reserved_for_expandable: Baseline width promised to the args column
        columns: Column catalog to plan from

    Returns:
        LayoutPlan in display order
    """
    total_width = max(0, total_width)
    reserved_for_expandable = max(0, reserved_for_expandable)

    # The +1 offsets the gap charged to the first column.
    space = total_width - reserved_for_expandable + 1
    chosen: list[Column] = []
    for col in sorted(columns, key=lambda c: c.preference_rank):
        if col.expandable or col.fixed_width < space:
            space -= col.fixed_width + 1
            chosen.append(col)

    resolved: list[tuple[Column, int]] = []
    for col in chosen:
        width = max(0, reserved_for_expandable + space) if col.expandable else col.fixed_width
        resolved.append((col, width))

    resolved.sort(key=lambda pair: pair[0].display_rank)
    return LayoutPlan(
        columns=tuple((col.name, width) for col, width in resolved),
        total_width=total_width,
    )


def reserve_for_mode(
    mode: LayoutMode,
    total_width: int,
    detail_reserve: int = DETAIL_RESERVE,
    default_width: int = DEFAULT_WIDTH,
) -> int:
    """Return the args reserve for a layout mode.

    Normal mode promises args the room it would get on a default-width line
    beside the PID column, whatever the real terminal width is. Long mode
    promises it the whole line except the PID column.
    """
    if mode is LayoutMode.DETAIL:
        return detail_reserve
    if mode is LayoutMode.LONG:
        return max(0, total_width - PID_WIDTH - 1)
    return default_width - PID_WIDTH - 1
