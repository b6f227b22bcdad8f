"""Panel grid layout.

Panels are bordered, titled boxes around pre-rendered content. A grid is a
list of rows; row heights follow row weights, panel widths follow spans, and
the assembled block is always exactly the requested size.
"""

from dataclasses import dataclass, field
from typing import Sequence

from rich import box
from rich.cells import cell_len
from rich.text import Text

from .blocks import fit_line, fit_lines, placeholder
from .palette import Palette

PANEL_MIN_WIDTH = 8
PANEL_MIN_HEIGHT = 3
PANEL_GAP = 1
PANEL_PAD = 1

# Grid view tiles
TILE_MIN_WIDTH = 30
TILE_MIN_HEIGHT = 7  # content lines
TILE_GAP_H = 2
TILE_GAP_V = 1
TILE_BORDER_H = 2
TILE_BORDER_V = 2
TILE_MAX_COLUMNS = 3
TILE_MIN_MULTI_COLUMN_WIDTH = 62

BOX = box.ROUNDED


@dataclass
class Panel:
    title: str
    content: Sequence[Text | str] = ()
    icon: str = ""
    span: int = 1
    weight: int = 1
    accent: str = "border"


@dataclass
class PanelRow:
    panels: list[Panel] = field(default_factory=list)
    weight: int | None = None

    @property
    def effective_weight(self) -> int:
        if self.weight is not None and self.weight > 0:
            return self.weight
        return max((p.weight for p in self.panels if p.weight > 0), default=1)


# ─────────────────────────────────────────────────────────────────────────────
# Allocation
# ─────────────────────────────────────────────────────────────────────────────

def _proportional(shares: Sequence[int], total: int, floor: int) -> list[int]:
    shares = [s if s > 0 else 1 for s in shares]
    whole = sum(shares)
    sizes = []
    used = 0
    for i, share in enumerate(shares):
        if i == len(shares) - 1:
            size = total - used
        else:
            size = total * share // whole
        size = max(size, floor)
        sizes.append(size)
        used += size
    return sizes


def allocate_row_heights(weights: Sequence[int], total_height: int,
                         min_height: int = PANEL_MIN_HEIGHT) -> list[int]:
    """Split ``total_height`` by weight; the last row takes the rounding remainder.

    Every row gets at least ``min_height`` even if that overshoots the total.
    """
    if not weights:
        return []
    return _proportional(weights, total_height, min_height)


def allocate_column_widths(spans: Sequence[int], total_width: int, gap: int = PANEL_GAP,
                           min_width: int = PANEL_MIN_WIDTH) -> list[int]:
    if not spans:
        return []
    available = total_width - gap * (len(spans) - 1)
    return _proportional(spans, available, min_width)


def tile_grid(width: int, height: int, count: int) -> tuple[int, int, int]:
    """(columns, tile content width, tile content height) for the grid view.

    Content height 0 means "no limit", used for the single-column fallback.
    """
    if count == 0:
        return 1, TILE_MIN_WIDTH, 0
    if width <= 0:
        width = TILE_MIN_WIDTH + TILE_BORDER_H + 2

    usable_w = width - 2
    for cols in range(min(TILE_MAX_COLUMNS, count), 0, -1):
        per_col = (usable_w - (cols - 1) * TILE_GAP_H) // cols - TILE_BORDER_H
        if per_col < TILE_MIN_WIDTH:
            continue
        if cols == 1:
            return 1, per_col, 0
        if per_col < TILE_MIN_MULTI_COLUMN_WIDTH:
            continue

        rows = (count + cols - 1) // cols
        usable_h = height - (rows - 1) * TILE_GAP_V
        if usable_h <= TILE_BORDER_V:
            continue
        per_row = usable_h // rows - TILE_BORDER_V
        if per_row < TILE_MIN_HEIGHT:
            continue
        return cols, per_col, per_row

    return 1, max(usable_w - TILE_BORDER_H, TILE_MIN_WIDTH), 0


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────

def _top_border(panel: Panel, width: int, palette: Palette) -> Text:
    border = palette(panel.accent)
    inner = width - 2
    heading = f" {panel.icon} {panel.title} " if panel.icon else f" {panel.title} "
    line = Text(BOX.top_left + BOX.top, style=border)
    room = inner - 1
    if room > 2:
        title = fit_line(Text(heading), min(cell_len(heading), room), overflow="ellipsis")
        title.stylize(palette("title"))
        line.append_text(title)
        line.append(BOX.top * (room - title.cell_len), style=border)
    else:
        line.append(BOX.top * max(room, 0), style=border)
    line.append(BOX.top_right, style=border)
    return line


def render_panel(panel: Panel, width: int, height: int, palette: Palette) -> list[Text]:
    """Bordered box of exactly ``width`` x ``height`` around the panel content."""
    width = max(width, PANEL_MIN_WIDTH)
    height = max(height, PANEL_MIN_HEIGHT)
    border = palette(panel.accent)
    content_w = width - 2 - 2 * PANEL_PAD
    pad = " " * PANEL_PAD

    lines = [_top_border(panel, width, palette)]
    for content in fit_lines(list(panel.content), content_w, height - 2, overflow="ellipsis"):
        line = Text(BOX.mid_left, style=border)
        line.append(pad)
        line.append_text(content)
        line.append(pad)
        line.append(BOX.mid_right, style=border)
        lines.append(line)
    lines.append(Text(BOX.bottom_left + BOX.bottom * (width - 2) + BOX.bottom_right, style=border))
    return lines


def join_horizontal(blocks: Sequence[list[Text]], gap: int = PANEL_GAP) -> list[Text]:
    height = max((len(b) for b in blocks), default=0)
    joined = []
    for i in range(height):
        line = Text()
        for j, block in enumerate(blocks):
            if j:
                line.append(" " * gap)
            if i < len(block):
                line.append_text(block[i])
            elif block:
                line.append(" " * block[0].cell_len)
        joined.append(line)
    return joined


def render_grid(rows: Sequence[PanelRow], width: int, height: int, palette: Palette,
                gap: int = PANEL_GAP) -> list[Text]:
    rows = [row for row in rows if row.panels]
    if not rows:
        return placeholder(width, height, palette)

    heights = allocate_row_heights([row.effective_weight for row in rows], height)
    lines: list[Text] = []
    for row, row_h in zip(rows, heights):
        widths = allocate_column_widths([p.span for p in row.panels], width, gap=gap)
        blocks = [render_panel(p, w, row_h, palette) for p, w in zip(row.panels, widths)]
        lines.extend(join_horizontal(blocks, gap))
        if len(lines) >= height:
            break

    # rounding and minimum floors can overshoot; the frame is cut to size here
    return fit_lines(lines, width, height)
