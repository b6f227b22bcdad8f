"""Braille canvas rasterization and cell coloring."""

from __future__ import annotations

import time

import pytest

from quotaview.canvas import BRAILLE_BASE, EMPTY, BrailleCanvas, _round


def test_empty_canvas_renders_blank_block() -> None:
    """A canvas nobody drew on is all spaces at the requested size."""

    lines = BrailleCanvas(5, 3).render([])
    assert len(lines) == 3
    assert all(line.plain == " " * 5 for line in lines)


def test_pixel_dimensions_are_two_by_four_per_cell() -> None:
    canvas = BrailleCanvas(3, 2)
    assert (canvas.width, canvas.height) == (6, 8)
    assert canvas.grid == [EMPTY] * 48


def test_out_of_bounds_writes_are_ignored() -> None:
    canvas = BrailleCanvas(2, 2)
    canvas.set(-1, 0, 0)
    canvas.set(0, 99, 0)
    canvas.set(4, 0, 0)
    assert canvas.grid == [EMPTY] * (4 * 8)
    assert canvas.get(-5, -5) == EMPTY


def test_far_out_of_bounds_line_never_raises() -> None:
    """Lines may start and end far off-canvas; the visible part is still drawn."""

    canvas = BrailleCanvas(4, 2)
    canvas.draw_line(-1000, -1000, 1000, 1000, 0)
    canvas.draw_line(-500, 3, -400, 5, 1)
    canvas.draw_line(50, 50, 90, 90, 1)
    assert any(v == 0 for v in canvas.grid)
    assert all(v in (EMPTY, 0) for v in canvas.grid)


def test_single_dot_maps_to_braille_bit() -> None:
    canvas = BrailleCanvas(1, 1)
    canvas.set(0, 0, 0)
    assert canvas.render(["red"])[0].plain == chr(BRAILLE_BASE + 0x01)

    canvas.set(1, 3, 0)
    assert canvas.render(["red"])[0].plain == chr(BRAILLE_BASE + 0x01 + 0x80)


def test_horizontal_line_is_thickened_vertically() -> None:
    canvas = BrailleCanvas(2, 2)
    canvas.draw_line(0, 4, 3, 4, 0)
    for x in range(4):
        assert [canvas.get(x, y) for y in (3, 4, 5)] == [0, 0, 0]
        assert canvas.get(x, 2) == EMPTY
        assert canvas.get(x, 6) == EMPTY


def test_fill_below_paints_under_topmost_pixel() -> None:
    canvas = BrailleCanvas(1, 1)
    canvas.set(0, 1, 0)
    canvas.fill_below(0)
    assert [canvas.get(0, y) for y in range(4)] == [EMPTY, 0, 0, 0]
    assert [canvas.get(1, y) for y in range(4)] == [EMPTY] * 4


def test_cell_color_follows_plurality() -> None:
    canvas = BrailleCanvas(1, 1)
    canvas.set(0, 0, 0)
    canvas.set(1, 0, 1)
    canvas.set(1, 1, 1)
    line = canvas.render(["red", "blue"])[0]
    assert line.spans[0].style == "blue"


def test_cell_color_ties_go_to_lowest_series() -> None:
    for first, second in ((0, 1), (1, 0)):
        canvas = BrailleCanvas(1, 1)
        canvas.set(0, 0, first)
        canvas.set(1, 0, second)
        assert canvas.render(["red", "blue"])[0].spans[0].style == "red"


def test_missing_series_style_uses_fallback() -> None:
    canvas = BrailleCanvas(1, 1)
    canvas.set(0, 0, 3)
    assert canvas.render(["red"], fallback="grey50")[0].spans[0].style == "grey50"


def test_huge_endpoints_cost_no_more_than_the_canvas() -> None:
    """Walking a line is bounded by canvas size, not by how far away its endpoints are."""

    canvas = BrailleCanvas(10, 5)
    start = time.perf_counter()
    canvas.draw_line(0, 0, 10**9, 10**9, 0)
    canvas.draw_line(-10**9, 7, 10**9, 7, 1)
    assert time.perf_counter() - start < 0.5
    assert [canvas.get(i, i) for i in (0, 5, 19)] == [0, 0, 0]
    assert [canvas.get(x, 7) for x in (0, 10, 19)] == [1, 1, 1]


def _walk_every_step(canvas, x0, y0, x1, y1, series) -> None:
    steps = max(abs(x1 - x0), abs(y1 - y0))
    for i in range(steps + 1):
        px = _round(x0 + (x1 - x0) * i / steps)
        py = _round(y0 + (y1 - y0) * i / steps)
        for y in (py - 1, py, py + 1):
            canvas.set(px, y, series)


@pytest.mark.parametrize(
    "segment",
    [(-6, 9, 13, -2), (3, -40, 5, 60), (-30, 3, 45, 4), (0, 0, 7, 7), (7, 11, 0, -1), (-3, -3, 2, 1)],
)
def test_clipping_only_skips_invisible_steps(segment) -> None:
    """Clipped drawing paints exactly what walking every step would."""

    clipped = BrailleCanvas(4, 2)
    clipped.draw_line(*segment, 0)
    walked = BrailleCanvas(4, 2)
    _walk_every_step(walked, *segment, 0)
    assert clipped.grid == walked.grid


def test_degenerate_line_is_thickened() -> None:
    canvas = BrailleCanvas(1, 1)
    canvas.draw_line(1, 1, 1, 1, 0)
    assert [canvas.get(1, y) for y in range(4)] == [0, 0, 0, EMPTY]
