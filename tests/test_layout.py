"""Panel rendering, size allocation and the tile grid."""

from __future__ import annotations

import pytest

from quotaview.layout import (Panel, PanelRow, allocate_column_widths, allocate_row_heights, render_grid,
                              render_panel, tile_grid)

pytestmark = pytest.mark.unit


def test_row_heights_follow_weights() -> None:
    assert allocate_row_heights([1, 1, 1], 10) == [3, 3, 4]
    assert allocate_row_heights([1, 2], 12) == [4, 8]
    assert allocate_row_heights([], 12) == []


def test_row_heights_respect_floor() -> None:
    assert allocate_row_heights([1, 1, 1], 5) == [3, 3, 3]
    assert allocate_row_heights([0, -2], 10) == [5, 5]


def test_column_widths_subtract_gaps() -> None:
    assert allocate_column_widths([1, 1], 21) == [10, 10]
    assert allocate_column_widths([1, 3], 41) == [10, 30]
    assert allocate_column_widths([1, 1, 1], 20, gap=2, min_width=8) == [8, 8, 8]


def test_panel_is_exact_box(palette) -> None:
    lines = render_panel(Panel("Usage", ["one", "two"]), 20, 6, palette)
    assert len(lines) == 6
    assert all(line.cell_len == 20 for line in lines)
    assert lines[0].plain == "╭─ Usage ──────────╮"
    assert lines[1].plain == "│ one              │"
    assert lines[3].plain == "│                  │"
    assert lines[-1].plain == "╰" + "─" * 18 + "╯"


def test_panel_content_is_ellipsized(palette) -> None:
    lines = render_panel(Panel("Usage", ["x" * 50]), 20, 3, palette)
    assert lines[1].plain == "│ " + "x" * 15 + "… │"


def test_long_title_is_ellipsized(palette) -> None:
    top = render_panel(Panel("A very long panel title", icon="●"), 20, 3, palette)[0]
    assert top.cell_len == 20
    assert "…" in top.plain
    assert top.plain.endswith("╮")


def test_panel_is_clamped_to_minimum_size(palette) -> None:
    lines = render_panel(Panel("x"), 2, 1, palette)
    assert len(lines) == 3
    assert all(line.cell_len == 8 for line in lines)


@pytest.mark.parametrize(
    ("row_count", "per_row", "width", "height"),
    [(1, 1, 20, 3), (2, 3, 40, 6), (3, 2, 50, 20), (2, 4, 30, 7), (5, 1, 80, 9), (1, 2, 17, 40)],
)
def test_grid_is_exactly_the_requested_size(palette, row_count, per_row, width, height) -> None:
    rows = [
        PanelRow([Panel(f"p{r}{c}", [f"line {i}" for i in range(12)], span=c + 1) for c in range(per_row)],
                 weight=r + 1)
        for r in range(row_count)
    ]
    lines = render_grid(rows, width, height, palette)
    assert len(lines) == height
    assert all(line.cell_len <= width for line in lines)


def test_empty_grid_shows_placeholder(palette) -> None:
    lines = render_grid([PanelRow([])], 30, 4, palette)
    assert len(lines) == 4
    assert "No data available" in lines[0].plain


def test_row_weight_defaults_to_heaviest_panel() -> None:
    assert PanelRow([Panel("a", weight=2), Panel("b", weight=3)]).effective_weight == 3
    assert PanelRow([Panel("a", weight=2)], weight=5).effective_weight == 5
    assert PanelRow([]).effective_weight == 1


def test_tile_grid_columns() -> None:
    assert tile_grid(200, 60, 3) == (3, 62, 58)
    assert tile_grid(140, 39, 3) == (2, 66, 17)
    assert tile_grid(100, 40, 3) == (1, 96, 0)
    assert tile_grid(200, 60, 0) == (1, 30, 0)


def test_tile_grid_drops_columns_when_too_short() -> None:
    cols, _, _ = tile_grid(200, 10, 6)
    assert cols == 1


def test_bracketed_content_is_shown_literally(palette) -> None:
    """Content strings with brackets are text, never markup that can fail or vanish."""

    rows = [PanelRow([Panel("Models", ["[/] gpt-4 [beta]", "[bold]"])])]
    lines = render_grid(rows, 40, 5, palette)
    assert len(lines) == 5
    assert lines[1].plain.startswith("│ [/] gpt-4 [beta]")
    assert lines[2].plain.startswith("│ [bold]")
