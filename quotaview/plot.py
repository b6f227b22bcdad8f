"""Multi-series line chart drawn on the braille canvas."""

from datetime import date, timedelta
from typing import Callable, Sequence

from rich.text import Text

from .blocks import fit_lines
from .canvas import BrailleCanvas
from .formatting import format_chart_value, format_date_label
from .models import Series
from .palette import Palette
from .timeseries import align

Y_AXIS_WIDTH = 7
PLOT_PREFIX = Y_AXIS_WIDTH + 2
MIN_PLOT_WIDTH = 10
MIN_PLOT_HEIGHT = 2
HEADROOM = 1.1
MARKERS = ("●", "◆", "■", "▲", "★")


# ─────────────────────────────────────────────────────────────────────────────
# Axis helpers (shared with the time charts)
# ─────────────────────────────────────────────────────────────────────────────

def axis_row(label: str, palette: Palette) -> Text:
    line = Text(label[:Y_AXIS_WIDTH].rjust(Y_AXIS_WIDTH), style=palette("dim"))
    line.append(" ┤", style=palette("track"))
    return line


def axis_base(plot_w: int, palette: Palette) -> Text:
    return Text(" " * (Y_AXIS_WIDTH + 1) + "└" + "─" * plot_w, style=palette("track"))


def date_axis(labels: Sequence[tuple[int, str]], plot_w: int, palette: Palette) -> Text:
    """Place (x, label) pairs on one line, centred and clamped to the plot."""
    cells = [" "] * plot_w
    for x, label in labels:
        start = x - len(label) // 2
        start = max(min(start, plot_w - len(label)), 0)
        for j, ch in enumerate(label):
            if start + j < plot_w:
                cells[start + j] = ch
    return Text(" " * PLOT_PREFIX + "".join(cells), style=palette("dim"))


def legend(labels: Sequence[str], colors: Sequence[str], palette: Palette) -> Text:
    line = Text("  ")
    for i, (label, color) in enumerate(zip(labels, colors)):
        if i:
            line.append("   ")
        line.append(MARKERS[i % len(MARKERS)], style=palette(color))
        line.append(f" {label}", style=palette("dim"))
    return line


def pick_label_indexes(count: int, max_labels: int = 5) -> list[int]:
    shown = min(max_labels, count)
    if shown <= 1:
        return [0] if count else []
    return sorted({i * (count - 1) // (shown - 1) for i in range(shown)})


# ─────────────────────────────────────────────────────────────────────────────
# Line chart
# ─────────────────────────────────────────────────────────────────────────────

def render_line_chart(title: str, series: Sequence[Series], width: int, height: int,
                      palette: Palette,
                      y_fmt: Callable[[float], str] = format_chart_value) -> list[Text]:
    """Title, rule, plot, axis, dates and legend in exactly ``height`` lines.

    Series that never go above zero are dropped; if none are left the chart is
    omitted and an empty list comes back. A lone series is drawn as an area.
    """
    series = [s for s in series if s.has_positive()]
    if not series:
        return []
    frame = align(series, fill_gaps=True, pad=1)
    if frame is None:
        return []

    dates = list(frame.dates)
    values = [list(v) for v in frame.values]
    if len(dates) == 1:
        try:
            before = date.fromisoformat(dates[0]) - timedelta(days=1)
        except ValueError:
            return []
        dates.insert(0, before.isoformat())
        values = [[0.0] + v for v in values]

    max_y = max(max(v) for v in values) or 1.0
    max_y *= HEADROOM

    plot_w = max(width - PLOT_PREFIX, MIN_PLOT_WIDTH)
    plot_h = max(height - 5, MIN_PLOT_HEIGHT)
    canvas = BrailleCanvas(plot_w, plot_h)
    n = len(dates)

    for si, vals in enumerate(values):
        prev = None
        for di, v in enumerate(vals):
            px = int(di / (n - 1) * (canvas.width - 1))
            py = (canvas.height - 1) - int(v / max_y * (canvas.height - 1))
            py = min(max(py, 0), canvas.height - 1)
            canvas.set(px, py, si)
            if prev is not None:
                canvas.draw_line(prev[0], prev[1], px, py, si)
            prev = (px, py)

    if len(series) == 1:
        canvas.fill_below(0)

    plot_lines = canvas.render([palette(s.color) for s in series], fallback=palette("subtext"))

    num_ticks = min(5 if plot_h >= 6 else 3, plot_h)
    ticks = {}
    for t in range(num_ticks):
        row = t * (plot_h - 1) // (num_ticks - 1)
        ticks[row] = max_y * (plot_h - 1 - row) / (plot_h - 1)

    lines = [
        Text(f"  {title}", style=palette("title")),
        Text("─" * width, style=palette("track")),
    ]
    for row in range(plot_h):
        line = axis_row(y_fmt(ticks[row]) if row in ticks else "", palette)
        line.append_text(plot_lines[row])
        lines.append(line)
    lines.append(axis_base(plot_w, palette))

    labels = [
        (int(di / (n - 1) * (plot_w - 1)), format_date_label(dates[di]))
        for di in pick_label_indexes(n)
    ]
    lines.append(date_axis(labels, plot_w, palette))
    lines.append(legend([s.label for s in series], [s.color for s in series], palette))
    return fit_lines(lines, width, height)
