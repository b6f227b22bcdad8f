"""Density heatmap: one text row per labelled row of values."""

from dataclasses import dataclass
from typing import Sequence

from rich.text import Text

from .blocks import fit_lines
from .formatting import truncate_label
from .models import to_float
from .palette import Palette

# (glyph, palette token) from empty to hottest
HEAT_TIERS = (
    ("·", "heat0"),
    ("░", "heat1"),
    ("▒", "heat2"),
    ("▓", "heat3"),
    ("█", "heat4"),
)


@dataclass(frozen=True)
class HeatmapRow:
    label: str
    values: tuple[float, ...]


def heat_tier(intensity: float) -> int:
    if intensity <= 0:
        return 0
    return 1 + min(int(intensity * 4), 3)


def downsample(values: Sequence[float], columns: int) -> list[float]:
    """Nearest-neighbor pick of ``columns`` values; shorter input is returned as is."""
    n = len(values)
    if columns <= 0 or n <= columns:
        return list(values)
    return [values[i * n // columns] for i in range(columns)]


def render_heatmap(rows: Sequence[HeatmapRow], width: int, palette: Palette,
                   max_columns: int | None = None, row_scaled: bool = False,
                   height: int | None = None, label_width: int = 12) -> list[Text]:
    """Returns an empty list when the matrix is empty or entirely zero."""
    matrix = [[max(to_float(v) or 0.0, 0.0) for v in row.values] for row in rows]
    if not any(v > 0 for values in matrix for v in values):
        return []

    label_width = min(label_width, max(max(len(r.label) for r in rows), 1))
    columns = max(width - label_width - 1, 1)
    if max_columns is not None:
        columns = min(columns, max(max_columns, 1))
    matrix = [downsample(values, columns) for values in matrix]

    global_max = max(v for values in matrix for v in values) or 1.0
    lines = []
    for row, values in zip(rows, matrix):
        scale = (max(values, default=0.0) or 1.0) if row_scaled else global_max
        line = Text(truncate_label(row.label, label_width).ljust(label_width) + " ", style=palette("subtext"))
        for v in values:
            glyph, token = HEAT_TIERS[heat_tier(v / scale)]
            line.append(glyph, style=palette(token))
        lines.append(line)

    return fit_lines(lines, width, len(lines) if height is None else height)
