"""Gauges, sparklines and bar charts.

All renderers are pure: data and dimensions in, rich ``Text`` out. Bad
numbers are drawn as zero or "N/A", never raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from rich.text import Text

from .blocks import fit_lines, placeholder
from .formatting import format_chart_value, format_usd, truncate_label
from .models import to_float
from .palette import Palette

GAUGE_MIN_WIDTH = 5
MINI_GAUGE_MIN_WIDTH = 3
BAR_MIN_WIDTH = 4

FILLED = "█"
TRACK = "░"
NA_TRACK = "─"
MINI = "━"

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
SPARK_ASCII = "_.oO08@#"


class Orientation(str, Enum):
    """What a gauge percentage measures. Colors flip with it."""

    USED = "used"
    REMAINING = "remaining"


@dataclass(frozen=True)
class GaugeSegment:
    percent: float
    color: str


@dataclass(frozen=True)
class ChartItem:
    label: str
    value: float
    color: str = "accent"
    sublabel: str = ""


def _percent(raw) -> float | None:
    value = to_float(raw)
    if value is None or value < 0:
        return None
    return min(value, 100.0)


def gauge_token(pct: float, orientation: Orientation, palette: Palette) -> str:
    used = pct if orientation == Orientation.USED else 100 - pct
    return palette.status(used)


# ─────────────────────────────────────────────────────────────────────────────
# Gauges
# ─────────────────────────────────────────────────────────────────────────────

def render_gauge(percent: float, width: int, palette: Palette,
                 orientation: Orientation = Orientation.USED) -> Text:
    width = max(width, GAUGE_MIN_WIDTH)
    pct = _percent(percent)
    if pct is None:
        return Text.assemble((NA_TRACK * width, palette("track")), (" N/A", palette("dim")))

    filled = int(pct / 100 * width)
    color = palette(gauge_token(pct, orientation, palette))
    t = Text()
    t.append(FILLED * filled, style=color)
    t.append(TRACK * (width - filled), style=palette("track"))
    t.append(f" {pct:5.1f}%", style=f"bold {color}")
    return t


def render_segmented_gauge(segments: Sequence[GaugeSegment], width: int, palette: Palette) -> Text:
    """Several colored shares on one track, e.g. spend split by model."""
    width = max(width, GAUGE_MIN_WIDTH)
    t = Text()
    cumulative = 0.0
    drawn = 0
    for seg in segments:
        pct = _percent(seg.percent) or 0.0
        cumulative = min(cumulative + pct, 100.0)
        end = int(cumulative / 100 * width)
        if end > drawn:
            t.append(FILLED * (end - drawn), style=palette(seg.color))
            drawn = end
    t.append(TRACK * (width - drawn), style=palette("track"))
    color = palette(palette.status(cumulative))
    t.append(f" {cumulative:5.1f}%", style=f"bold {color}")
    return t


def render_mini_gauge(percent: float, width: int, palette: Palette,
                      orientation: Orientation = Orientation.REMAINING) -> Text:
    width = max(width, MINI_GAUGE_MIN_WIDTH)
    pct = _percent(percent)
    if pct is None:
        return Text(MINI * width, style=palette("track"))
    filled = int(pct / 100 * width)
    t = Text()
    t.append(MINI * filled, style=palette(gauge_token(pct, orientation, palette)))
    t.append(MINI * (width - filled), style=palette("track"))
    return t


def render_inline_gauge(percent: float, width: int, palette: Palette) -> Text:
    width = max(width, BAR_MIN_WIDTH)
    pct = _percent(percent) or 0.0
    filled = int(pct / 100 * width)
    if filled < 1 and pct > 0:
        filled = 1
    t = Text()
    t.append(FILLED * filled, style=palette(palette.status(pct)))
    t.append(TRACK * (width - filled), style=palette("track"))
    return t


def render_budget_gauge(label: str, used: float, limit: float, width: int, label_width: int,
                        palette: Palette, burn_rate: float = 0.0,
                        value_fmt: Callable[[float], str] = format_usd) -> list[Text]:
    """Spend against a limit, plus a projection line when a burn rate ($/h) is known."""
    used = max(to_float(used) or 0.0, 0.0)
    limit = to_float(limit) or 0.0
    if limit <= 0:
        limit = 1.0
    pct = min(used / limit * 100, 100.0)

    detail = f"{value_fmt(used)} / {value_fmt(limit)}  {pct:.0f}%"
    bar_w = max(width - 2 - label_width - 1 - 2 - len(detail), BAR_MIN_WIDTH)
    filled = int(pct / 100 * bar_w)
    if filled < 1 and used > 0:
        filled = 1
    token = palette.status(pct)

    line = Text("  ")
    line.append(truncate_label(label, label_width).ljust(label_width), style=palette("text"))
    line.append(" ")
    line.append(FILLED * filled, style=palette(token))
    line.append(TRACK * (bar_w - filled), style=palette("track"))
    line.append(f"  {detail}", style=f"bold {palette(token)}")
    lines = [line]

    burn_rate = to_float(burn_rate) or 0.0
    remaining = limit - used
    if burn_rate > 0 and remaining > 0:
        hours_left = remaining / burn_rate
        days_left = hours_left / 24
        if days_left < 3:
            icon_token, projection = "crit", f"{hours_left:.0f} hours until limit at ${burn_rate:.2f}/h"
        elif days_left < 14:
            icon_token, projection = "warn", f"~{days_left:.0f} days until limit at ${burn_rate:.2f}/h"
        else:
            icon_token, projection = "ok", f"~{days_left:.0f} days remaining at ${burn_rate:.2f}/h"
        proj = Text("  " + " " * label_width + " ")
        proj.append("●", style=palette(icon_token))
        proj.append(f" {projection}", style=palette("dim"))
        lines.append(proj)

    return fit_lines(lines, width, len(lines))


# ─────────────────────────────────────────────────────────────────────────────
# Sparkline
# ─────────────────────────────────────────────────────────────────────────────

def render_sparkline(values: Sequence[float], width: int, palette: Palette,
                     color: str = "accent", ascii_mode: bool = False) -> Text:
    ramp = SPARK_ASCII if ascii_mode else SPARK_BLOCKS
    if width < 1:
        return Text()
    vals = [to_float(v) or 0.0 for v in values]
    if not vals:
        return Text(ramp[0] * width, style=palette("track"))

    n = len(vals)
    sampled = [vals[min(i * n // width, n - 1)] for i in range(width)]
    lo, hi = min(sampled), max(sampled)
    rng = (hi - lo) or 1.0
    top = len(ramp) - 1
    chars = "".join(ramp[min(max(int((v - lo) / rng * top), 0), top)] for v in sampled)
    return Text(chars, style=palette(color))


# ─────────────────────────────────────────────────────────────────────────────
# Bar charts
# ─────────────────────────────────────────────────────────────────────────────

def bar_length(value: float, max_val: float, size: int) -> int:
    length = int(value / max_val * size)
    if length < 1 and value > 0:
        length = 1
    return min(length, size)


def render_hbar_chart(items: Sequence[ChartItem], width: int, palette: Palette,
                      value_fmt: Callable[[float], str] = format_usd,
                      label_width: int = 16, height: int | None = None) -> list[Text]:
    if not items:
        return placeholder(width, height or 1, palette)

    values = [max(to_float(item.value) or 0.0, 0.0) for item in items]
    max_val = max(values) or 1.0
    value_w = max(len(value_fmt(v)) for v in values)
    bar_w = max(width - 2 - label_width - 1 - 2 - value_w, BAR_MIN_WIDTH)

    lines = []
    for item, value in zip(items, values):
        bar_len = bar_length(value, max_val, bar_w)
        color = palette(item.color)
        line = Text("  ")
        line.append(truncate_label(item.label, label_width).ljust(label_width), style=palette("subtext"))
        line.append(" ")
        line.append(FILLED * bar_len, style=color)
        line.append(TRACK * (bar_w - bar_len), style=palette("track"))
        line.append("  ")
        line.append(value_fmt(value).rjust(value_w), style=f"bold {color}")
        if item.sublabel:
            line.append(f"  {item.sublabel}", style=palette("dim"))
        lines.append(line)

    return fit_lines(lines, width, len(lines) if height is None else height)


def render_vbar_chart(items: Sequence[ChartItem], width: int, height: int, palette: Palette,
                      value_fmt: Callable[[float], str] = format_chart_value) -> list[Text]:
    """Vertical bars with labels underneath; the value sits just above each bar."""
    height = max(height, 2)
    if not items or width < 1:
        return placeholder(width, height, palette)

    items = list(items)[:width]
    values = [max(to_float(item.value) or 0.0, 0.0) for item in items]
    max_val = max(values) or 1.0
    plot_h = height - 1
    col_w = max(width // len(items), 1)
    bar_w = max(col_w - 1, 1)
    heights = [bar_length(v, max_val, plot_h) for v in values]

    lines = []
    for row in range(plot_h):
        level = plot_h - row
        line = Text()
        for item, value, h in zip(items, values, heights):
            if h >= level:
                line.append(FILLED * bar_w, style=palette(item.color))
            elif level == h + 1 and value > 0:
                line.append(value_fmt(value)[:bar_w].ljust(bar_w), style=palette("dim"))
            else:
                line.append(" " * bar_w)
            line.append(" " * (col_w - bar_w))
        lines.append(line)

    labels = Text()
    for item in items:
        labels.append(item.label[:bar_w].ljust(col_w), style=palette("subtext"))
    lines.append(labels)
    return fit_lines(lines, width, height)
