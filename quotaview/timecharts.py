"""Block-column time charts: stacked multi-series and single-series bars.

Both share one pipeline: align the series onto a daily axis, bin to the plot
width, lay the buckets out on columns, then fill a grid of cells where each
cell is owned by at most one series.
"""

from itertools import accumulate
from typing import Callable, Sequence

from rich.text import Text

from .blocks import fit_lines
from .charts import FILLED, bar_length
from .formatting import format_chart_value, format_date_label
from .models import Series
from .palette import Palette
from .plot import MIN_PLOT_HEIGHT, MIN_PLOT_WIDTH, PLOT_PREFIX, axis_base, axis_row, date_axis, legend
from .timeseries import AlignedFrame, align, bin_frame, column_ranges

Grid = list[list[int | None]]


def _plot_size(width: int, height: int, title: str) -> tuple[int, int]:
    chrome = 3 + (1 if title else 0)  # axis, dates, legend
    return max(width - PLOT_PREFIX, MIN_PLOT_WIDTH), max(height - chrome, MIN_PLOT_HEIGHT)


def _prepare(series: Sequence[Series], plot_w: int) -> AlignedFrame | None:
    series = [s for s in series if s.has_positive()]
    if not series:
        return None
    frame = align(series, fill_gaps=True, pad=1)
    if frame is None:
        return None
    return bin_frame(frame, plot_w)


def _draw(frame: AlignedFrame, grid: Grid, max_value: float, width: int, height: int,
          palette: Palette, y_fmt: Callable[[float], str], title: str,
          ranges: list[tuple[int, int]]) -> list[Text]:
    plot_h = len(grid)
    plot_w = len(grid[0]) if grid else 0
    lines = []
    if title:
        lines.append(Text(f"  {title}", style=palette("title")))

    for row, cells in enumerate(grid):
        if row == 0:
            label = y_fmt(max_value)
        elif row == plot_h - 1:
            label = y_fmt(0)
        elif plot_h >= 5 and row == plot_h // 2:
            label = y_fmt(max_value * (plot_h - row) / plot_h)
        else:
            label = ""
        line = axis_row(label, palette)
        for owner in cells:
            if owner is None:
                line.append(" ")
            else:
                line.append(FILLED, style=palette(frame.colors[owner]))
        lines.append(line)

    lines.append(axis_base(plot_w, palette))
    n = len(frame.dates)
    picks = sorted({0, n // 2, n - 1}) if n > 2 else list(range(n))
    labels = [((ranges[i][0] + ranges[i][1] - 1) // 2, format_date_label(frame.dates[i])) for i in picks]
    lines.append(date_axis(labels, plot_w, palette))
    lines.append(legend(frame.labels, frame.colors, palette))
    return fit_lines(lines, width, height)


def render_stacked_time_chart(series: Sequence[Series], width: int, height: int, palette: Palette,
                              y_fmt: Callable[[float], str] = format_chart_value,
                              title: str = "") -> list[Text]:
    """Stacked daily volume, one full block per cell.

    Each row stands for a value threshold; in every bucket the cell belongs to
    the first series whose cumulative total reaches it. Colors never blend.
    """
    plot_w, plot_h = _plot_size(width, height, title)
    frame = _prepare(series, plot_w)
    if frame is None:
        return []

    n = len(frame.dates)
    cumulative = [list(accumulate(col)) for col in zip(*frame.values)]
    max_total = max(c[-1] for c in cumulative) or 1.0
    ranges = column_ranges(n, plot_w)

    grid: Grid = [[None] * plot_w for _ in range(plot_h)]
    for b, (lo, hi) in enumerate(ranges):
        for row in range(plot_h):
            threshold = (plot_h - row - 0.5) / plot_h * max_total
            owner = next((si for si, c in enumerate(cumulative[b]) if c >= threshold), None)
            if owner is None:
                continue
            for x in range(lo, min(hi, plot_w)):
                grid[row][x] = owner

    return _draw(frame, grid, max_total, width, height, palette, y_fmt, title, ranges)


def render_bar_time_chart(series: Series, width: int, height: int, palette: Palette,
                          y_fmt: Callable[[float], str] = format_chart_value,
                          title: str = "") -> list[Text]:
    plot_w, plot_h = _plot_size(width, height, title)
    frame = _prepare([series], plot_w)
    if frame is None:
        return []

    values = frame.values[0]
    max_value = max(values) or 1.0
    ranges = column_ranges(len(values), plot_w)

    grid: Grid = [[None] * plot_w for _ in range(plot_h)]
    for (lo, hi), value in zip(ranges, values):
        filled = bar_length(value, max_value, plot_h)
        for row in range(plot_h - filled, plot_h):
            for x in range(lo, min(hi, plot_w)):
                grid[row][x] = 0

    return _draw(frame, grid, max_value, width, height, palette, y_fmt, title, ranges)
