"""Tests for column layout planning."""

from pydantic import ValidationError
import pytest

from fitps.layout import (
    COLUMNS,
    DEFAULT_WIDTH,
    DETAIL_RESERVE,
    EXPANDABLE,
    PID_WIDTH,
    Column,
    LayoutMode,
    LayoutPlan,
    plan,
    reserve_for_mode,
)

DISPLAY_ORDER = [
    "pid", "pgid", "args", "psr", "stat", "nice",
    "%mem", "cputime", "start_time", "tname", "euser", "egroup",
]


def used_width(layout: LayoutPlan) -> int:
    """Width of all columns plus one gap per column."""
    return sum(width + 1 for _, width in layout.columns)


class TestCatalog:
    """Tests for the static column catalog."""

    def test_single_expandable_column(self) -> None:
        """Test exactly one column has no fixed width, and it is args."""
        expandable = [col for col in COLUMNS if col.expandable]
        assert [col.name for col in expandable] == [EXPANDABLE]

    def test_expandable_is_most_preferred(self) -> None:
        """Test args is offered space before every other column."""
        first = min(COLUMNS, key=lambda col: col.preference_rank)
        assert first.name == "args"

    def test_display_order(self) -> None:
        """Test display ranks give the expected left-to-right order."""
        ordered = sorted(COLUMNS, key=lambda col: col.display_rank)
        assert [col.name for col in ordered] == DISPLAY_ORDER

    def test_ranks_unique(self) -> None:
        """Test no two columns share a rank."""
        assert len({col.preference_rank for col in COLUMNS}) == len(COLUMNS)
        assert len({col.display_rank for col in COLUMNS}) == len(COLUMNS)

    def test_pid_width(self) -> None:
        """Test the PID column width used for reserves."""
        assert PID_WIDTH == 5

    def test_column_is_frozen(self) -> None:
        """Test catalog entries cannot be modified."""
        with pytest.raises(ValidationError):
            COLUMNS[0].fixed_width = 10  # type: ignore[misc]


class TestPlan:
    """Tests for plan()."""

    def test_default_terminal(self) -> None:
        """Test an 80-column line with the normal reserve."""
        layout = plan(80, 74)
        assert layout.columns == (("pid", 5), ("args", 74))
        assert layout.spec == "pid:5,args:74"
        assert layout.total_width == 80

    def test_leftover_goes_to_args(self) -> None:
        """Test space too small for another column is added to args."""
        layout = plan(81, 74)
        assert layout.columns == (("pid", 5), ("args", 75))

    def test_wide_terminal_normal_reserve(self) -> None:
        """Test columns are admitted in preference order until space runs out."""
        layout = plan(120, 74)
        assert layout.names == [
            "pid", "args", "psr", "stat", "nice", "%mem",
            "start_time", "tname", "euser",
        ]
        assert layout.width_of("args") == 74
        assert layout.width_of("cputime") is None

    def test_detail_reserve(self) -> None:
        """Test the detail reserve at 80 columns."""
        layout = plan(80, 44)
        assert layout.spec == "pid:5,args:44,stat:4,nice:3,%mem:4,tname:6,euser:8"

    def test_every_column_fits(self) -> None:
        """Test all columns are chosen when space is plentiful."""
        layout = plan(200, 44)
        assert layout.names == DISPLAY_ORDER
        assert layout.width_of("args") == 130

    def test_skipped_column_not_reconsidered(self) -> None:
        """Test a column that did not fit stays out even if a later one fits."""
        layout = plan(78, 74)
        assert layout.columns == (("args", 74), ("nice", 3))
        assert "pid" not in layout.names

    def test_wider_line_can_swap_columns(self) -> None:
        """Test one more character can admit stat and crowd out nice."""
        assert plan(78, 74).names == ["args", "nice"]
        assert plan(79, 74).columns == (("args", 74), ("stat", 4))

    def test_display_order_independent_of_preference(self) -> None:
        """Test chosen columns appear in display order."""
        for width in range(0, 200):
            names = plan(width, 44).names
            assert names == [name for name in DISPLAY_ORDER if name in names]

    @pytest.mark.parametrize("reserve", [0, 20, 44, 74, 120])
    def test_space_fully_accounted(self, reserve: int) -> None:
        """Test widths plus gaps equal total_width + 1."""
        for width in range(reserve, reserve + 150):
            assert used_width(plan(width, reserve)) == width + 1

    @pytest.mark.parametrize("width", [0, 1, 5, 10, 40, 73])
    def test_narrow_terminal(self, width: int) -> None:
        """Test a line narrower than the reserve still shows args, clamped."""
        layout = plan(width, 74)
        assert layout.columns == (("args", width),)
        assert used_width(layout) == width + 1

    def test_args_always_present(self) -> None:
        """Test args is chosen at every width and never negative."""
        for reserve in (0, 44, 74, 300):
            for width in range(0, 160):
                layout = plan(width, reserve)
                args_width = layout.width_of("args")
                assert args_width is not None
                assert args_width >= 0

    def test_negative_inputs_clamped(self) -> None:
        """Test negative widths are treated as zero."""
        layout = plan(-5, -3)
        assert layout.columns == (("args", 0),)
        assert layout.total_width == 0

    def test_fixed_columns_keep_fixed_width(self) -> None:
        """Test every chosen fixed column gets exactly its catalog width."""
        widths = {col.name: col.fixed_width for col in COLUMNS}
        for name, width in plan(200, 44).columns:
            if name != "args":
                assert width == widths[name]

    def test_fixed_space_never_shrinks(self) -> None:
        """Test a wider line never gives less room to fixed columns."""
        previous = -1
        for width in range(74, 260):
            layout = plan(width, 74)
            fixed = used_width(layout) - (layout.width_of("args") + 1)
            assert fixed >= previous
            previous = fixed

    def test_pid_chosen_when_it_fits(self) -> None:
        """Test PID is present whenever there is room for it after args."""
        assert "pid" not in plan(79, 74).names
        for width in range(80, 260):
            assert plan(width, 74).names[0] == "pid"

    def test_deterministic(self) -> None:
        """Test the same inputs give the same plan."""
        assert plan(133, 44) == plan(133, 44)

    def test_custom_catalog(self) -> None:
        """Test planning from a caller-supplied catalog."""
        columns = (
            Column(name="args", fixed_width=0, preference_rank=0, display_rank=1),
            Column(name="pid", fixed_width=5, preference_rank=1, display_rank=0),
            Column(name="user", fixed_width=8, preference_rank=2, display_rank=2),
        )
        layout = plan(40, 20, columns=columns)
        assert layout.spec == "pid:5,args:25,user:8"
        assert used_width(layout) == 41


class TestLayoutPlan:
    """Tests for the LayoutPlan model."""

    def test_str_is_spec(self) -> None:
        """Test str() gives the ps column spec."""
        layout = LayoutPlan(columns=(("pid", 5), ("args", 10)), total_width=16)
        assert str(layout) == "pid:5,args:10"

    def test_width_of_missing(self) -> None:
        """Test width_of() for a column that was not chosen."""
        layout = LayoutPlan(columns=(("args", 10),), total_width=10)
        assert layout.width_of("pid") is None


class TestReserveForMode:
    """Tests for reserve_for_mode()."""

    def test_normal_default_width(self) -> None:
        """Test the normal reserve on an 80-column terminal."""
        assert reserve_for_mode(LayoutMode.NORMAL, 80) == 74

    def test_normal_ignores_terminal_width(self) -> None:
        """Test the normal reserve is based on the default width."""
        assert reserve_for_mode(LayoutMode.NORMAL, 200) == DEFAULT_WIDTH - PID_WIDTH - 1

    def test_detail(self) -> None:
        """Test -d forces the detail reserve regardless of width."""
        for width in (40, 80, 250):
            assert reserve_for_mode(LayoutMode.DETAIL, width) == DETAIL_RESERVE == 44

    def test_detail_custom(self) -> None:
        """Test a configured detail reserve."""
        assert reserve_for_mode(LayoutMode.DETAIL, 80, detail_reserve=30) == 30

    def test_long(self) -> None:
        """Test -l reserves all but the PID column."""
        assert reserve_for_mode(LayoutMode.LONG, 200) == 194

    def test_long_narrow_clamped(self) -> None:
        """Test -l on a tiny terminal does not go negative."""
        assert reserve_for_mode(LayoutMode.LONG, 3) == 0

    def test_detail_and_long_differ(self) -> None:
        """Test the detail args width differs from the long one on a wide line."""
        width = 200
        detail = plan(width, reserve_for_mode(LayoutMode.DETAIL, width))
        long_ = plan(width, reserve_for_mode(LayoutMode.LONG, width))
        assert detail.width_of("args") != long_.width_of("args")
        assert long_.columns == (("pid", 5), ("args", 194))
