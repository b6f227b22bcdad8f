"""Whole-screen composition: header plus the body for the effective view mode."""

from typing import Callable, Sequence

from rich.text import Text

from .blocks import fit_lines, placeholder
from .charts import (ChartItem, GaugeSegment, render_budget_gauge, render_gauge, render_hbar_chart,
                     render_mini_gauge, render_segmented_gauge, render_sparkline)
from .formatting import format_chart_value, format_cost_axis, truncate_label
from .heatmap import HeatmapRow, render_heatmap
from .layout import (PANEL_MIN_WIDTH, PANEL_PAD, TILE_BORDER_V, TILE_GAP_H, TILE_MIN_HEIGHT, Panel, PanelRow,
                     allocate_column_widths, render_grid, tile_grid)
from .models import Series, Snapshot, Status
from .palette import Palette
from .plot import render_line_chart
from .summary import compute_display_info
from .timecharts import render_bar_time_chart, render_stacked_time_chart
from .timeseries import align
from .views import ViewMode, ViewState, effective_view, view_status_label

GAUGE_LABEL = 7  # " 100.0%"
METRIC_LABEL_WIDTH = 14
STACKED_TILE_HEIGHT = 16
NAVIGATOR_SPAN = 1
FOCUS_SPAN = 3
MAX_MODELS = 6
SPEND_WORDS = ("cost", "spend", "usd")

STATUS_MARKERS = {
    Status.OK: ("●", "ok"),
    Status.NEAR_LIMIT: ("●", "warn"),
    Status.LIMITED: ("●", "crit"),
    Status.AUTH_REQUIRED: ("◌", "warn"),
    Status.UNSUPPORTED: ("◇", "dim"),
    Status.ERROR: ("⚠", "crit"),
    Status.UNKNOWN: ("○", "dim"),
}
PULSING = (Status.NEAR_LIMIT, Status.LIMITED)


def status_marker(snap: Snapshot, anim_frame: int = 0) -> tuple[str, str]:
    icon, token = STATUS_MARKERS.get(snap.status, STATUS_MARKERS[Status.UNKNOWN])
    if snap.status in PULSING and anim_frame % 2:
        icon = "○"
    return icon, token


def content_width(panel_width: int) -> int:
    return max(panel_width, PANEL_MIN_WIDTH) - 2 - 2 * PANEL_PAD


# ─────────────────────────────────────────────────────────────────────────────
# Tile content
# ─────────────────────────────────────────────────────────────────────────────

def _series_of(snap: Snapshot, palette: Palette) -> list[Series]:
    return [Series(name, palette.series(i), tuple(points))
            for i, (name, points) in enumerate(sorted(snap.series.items()))]


def _metric_lines(snap: Snapshot, width: int, palette: Palette) -> list[Text]:
    lines = []
    for key in sorted(snap.metrics):
        pct = snap.metrics[key].used_percent()
        if pct < 0:
            continue
        line = Text(truncate_label(key, METRIC_LABEL_WIDTH).ljust(METRIC_LABEL_WIDTH) + " ",
                    style=palette("subtext"))
        line.append_text(render_gauge(pct, width - METRIC_LABEL_WIDTH - 1 - GAUGE_LABEL, palette))
        lines.append(line)
    return lines


def _model_lines(snap: Snapshot, width: int, palette: Palette) -> list[Text]:
    models = sorted(snap.models.items(), key=lambda kv: (-kv[1], kv[0]))[:MAX_MODELS]
    models = [(name, value) for name, value in models if value > 0]
    if not models:
        return []
    total = sum(v for v in snap.models.values() if v > 0) or 1.0
    segments = [GaugeSegment(value / total * 100, palette.series(i)) for i, (_, value) in enumerate(models)]
    items = [ChartItem(name, value, palette.series(i)) for i, (name, value) in enumerate(models)]
    lines = [Text("Models", style=palette("title")),
             render_segmented_gauge(segments, width - GAUGE_LABEL, palette)]
    lines.extend(render_hbar_chart(items, width, palette, value_fmt=format_chart_value, label_width=14))
    return lines


def _y_format(series: Sequence[Series]) -> Callable[[float], str]:
    """Dollar axis when every series is a spend series."""
    if all(any(word in s.label.lower() for word in SPEND_WORDS) for s in series):
        return format_cost_axis
    return format_chart_value


def _history_lines(snap: Snapshot, width: int, palette: Palette) -> list[Text]:
    series = _series_of(snap, palette)
    if not series:
        return []
    y_fmt = _y_format(series)
    lines = render_line_chart("Daily usage", series, width, 12, palette, y_fmt=y_fmt)
    if len(series) == 1:
        lines += render_bar_time_chart(series[0], width, 8, palette, y_fmt=y_fmt, title="Per day")
    else:
        lines += render_stacked_time_chart(series, width, 9, palette, y_fmt=y_fmt, title="Stacked volume")

    frame = align(series, fill_gaps=True, pad=0)
    if frame is not None:
        rows = [HeatmapRow(label, values) for label, values in zip(frame.labels, frame.values)]
        heat = render_heatmap(rows, width, palette, row_scaled=True)
        if heat:
            lines.append(Text("Activity", style=palette("title")))
            lines.extend(heat)
    return lines


def tile_content(snap: Snapshot, width: int, palette: Palette, detailed: bool = False,
                 anim_frame: int = 0, ascii_mode: bool = False) -> list[Text]:
    info = compute_display_info(snap)
    _, token = status_marker(snap, anim_frame)

    head = Text(f"{info.icon} {info.tag}", style=f"bold {palette(token)}")
    head.append(f"  {info.summary}", style=palette("text"))
    lines = [head]
    if info.detail:
        lines.append(Text(info.detail, style=palette("dim")))
    if info.gauge_percent >= 0:
        lines.append(render_gauge(info.gauge_percent, width - GAUGE_LABEL, palette, info.orientation))
    lines.extend(_metric_lines(snap, width, palette))

    spend = snap.metrics.get("spend_limit")
    burn = snap.metrics.get("burn_rate")
    if detailed and spend is not None and spend.used is not None and spend.limit is not None:
        lines.extend(render_budget_gauge("Spend limit", spend.used, spend.limit, width, 12, palette,
                                         burn_rate=burn.used if burn is not None and burn.used else 0.0))

    if detailed:
        lines.extend(_history_lines(snap, width, palette))
        lines.extend(_model_lines(snap, width, palette))
    else:
        for i, (name, points) in enumerate(sorted(snap.series.items())[:2]):
            line = Text(truncate_label(name, METRIC_LABEL_WIDTH).ljust(METRIC_LABEL_WIDTH) + " ",
                        style=palette("subtext"))
            line.append_text(render_sparkline([p.value for p in points], width - METRIC_LABEL_WIDTH - 1,
                                              palette, color=palette.series(i), ascii_mode=ascii_mode))
            lines.append(line)

    if snap.message and snap.status != Status.ERROR:
        lines.append(Text(snap.message, style=palette("dim")))
    return lines


def _panel(snap: Snapshot, width: int, palette: Palette, selected: bool, detailed: bool,
           anim_frame: int, ascii_mode: bool, offset: int = 0, span: int = 1) -> Panel:
    icon, token = status_marker(snap, anim_frame)
    content = tile_content(snap, content_width(width), palette, detailed, anim_frame, ascii_mode)
    return Panel(title=snap.title, icon=icon, content=content[offset:], span=span,
                 accent="accent" if selected else token)


# ─────────────────────────────────────────────────────────────────────────────
# View bodies
# ─────────────────────────────────────────────────────────────────────────────

class Frame:
    """Per-call inputs shared by the view renderers."""

    def __init__(self, snapshots: Sequence[Snapshot], width: int, height: int, state: ViewState,
                 palette: Palette, anim_frame: int, ascii_mode: bool):
        self.snapshots = list(snapshots)
        self.width = width
        self.height = height
        self.state = state
        self.palette = palette
        self.anim_frame = anim_frame
        self.ascii_mode = ascii_mode
        self.cursor = min(max(state.cursor, 0), len(self.snapshots) - 1)

    def panel(self, index: int, width: int, detailed: bool, span: int = 1) -> Panel:
        offset = self.state.detail_offset if detailed and index == self.cursor else 0
        return _panel(self.snapshots[index], width, self.palette, index == self.cursor, detailed,
                      self.anim_frame, self.ascii_mode, offset=offset, span=span)


def _grid_body(f: Frame) -> list[Text]:
    cols, _, _ = tile_grid(f.width, f.height, len(f.snapshots))
    widths = allocate_column_widths([1] * cols, f.width, gap=TILE_GAP_H)
    rows = []
    for start in range(0, len(f.snapshots), cols):
        indexes = range(start, min(start + cols, len(f.snapshots)))
        rows.append(PanelRow([f.panel(i, widths[i - start], detailed=False) for i in indexes]))

    visible = max(f.height // (TILE_MIN_HEIGHT + TILE_BORDER_V), 1)
    first = min(f.state.tile_offset, max(len(rows) - visible, 0))
    return render_grid(rows[first:first + visible], f.width, f.height, f.palette, gap=TILE_GAP_H)


def _stacked_body(f: Frame) -> list[Text]:
    visible = max(f.height // STACKED_TILE_HEIGHT, 1)
    first = min(f.state.tile_offset, max(len(f.snapshots) - visible, 0))
    rows = [PanelRow([f.panel(i, f.width, detailed=True)])
            for i in range(first, min(first + visible, len(f.snapshots)))]
    return render_grid(rows, f.width, f.height, f.palette)


def _tabs_body(f: Frame) -> list[Text]:
    strip = Text()
    for i, snap in enumerate(f.snapshots):
        style = f"reverse {f.palette('accent')}" if i == f.cursor else f.palette("subtext")
        strip.append(f" {snap.title} ", style=style)
        strip.append(" ")
    body = render_grid([PanelRow([f.panel(f.cursor, f.width, detailed=True)])],
                       f.width, f.height - 1, f.palette)
    return [strip, *body]


def _split_body(f: Frame) -> list[Text]:
    nav_w, focus_w = allocate_column_widths([NAVIGATOR_SPAN, FOCUS_SPAN], f.width)
    gauge_w = max(content_width(nav_w) - 4, 3)
    nav_lines = []
    for i, snap in enumerate(f.snapshots):
        icon, token = status_marker(snap, f.anim_frame)
        info = compute_display_info(snap)
        line = Text("› " if i == f.cursor else "  ", style=f.palette("accent"))
        line.append(icon, style=f.palette(token))
        line.append(f" {snap.title}", style="bold" if i == f.cursor else f.palette("subtext"))
        nav_lines.append(line)
        nav_lines.append(Text("    ").append_text(
            render_mini_gauge(info.gauge_percent, gauge_w, f.palette, info.orientation)))
    navigator = Panel(title="Accounts", content=nav_lines, span=NAVIGATOR_SPAN, accent="border")
    focus = f.panel(f.cursor, focus_w, detailed=True, span=FOCUS_SPAN)
    return render_grid([PanelRow([navigator, focus])], f.width, f.height, f.palette)


def _compare_body(f: Frame) -> list[Text]:
    indexes = [f.cursor]
    if len(f.snapshots) > 1:
        indexes.append((f.cursor + 1) % len(f.snapshots))
    widths = allocate_column_widths([1] * len(indexes), f.width)
    panels = [f.panel(i, w, detailed=True) for i, w in zip(indexes, widths)]
    return render_grid([PanelRow(panels)], f.width, f.height, f.palette)


VIEW_BODIES: dict[ViewMode, Callable[[Frame], list[Text]]] = {
    ViewMode.GRID: _grid_body,
    ViewMode.STACKED: _stacked_body,
    ViewMode.TABS: _tabs_body,
    ViewMode.SPLIT: _split_body,
    ViewMode.COMPARE: _compare_body,
}


def render_header(state: ViewState, width: int, count: int, palette: Palette) -> Text:
    line = Text(" quotaview", style=palette("title"))
    line.append(f"  {count} account{'s' if count != 1 else ''}", style=palette("subtext"))
    line.append("  View: ", style=palette("dim"))
    line.append(view_status_label(state.view, width, count), style=palette("accent"))
    return line


def render_dashboard(snapshots: Sequence[Snapshot], width: int, height: int, state: ViewState,
                     palette: Palette, anim_frame: int = 0, ascii_mode: bool = False) -> list[Text]:
    """The full frame: exactly ``height`` lines, none wider than ``width``."""
    width = max(width, PANEL_MIN_WIDTH)
    height = max(height, 1)
    header = render_header(state, width, len(snapshots), palette)
    body_h = height - 1
    if body_h <= 0:
        return fit_lines([header], width, height)
    if not snapshots:
        return fit_lines([header, *placeholder(width, body_h, palette)], width, height)

    mode = effective_view(state.view, width, len(snapshots))
    frame = Frame(snapshots, width, body_h, state, palette, anim_frame, ascii_mode)
    return fit_lines([header, *VIEW_BODIES[mode](frame)], width, height)
