"""Braille sub-pixel canvas.

Each character cell holds a 2x4 dot matrix, so a canvas of ``w x h`` cells
can be addressed as ``2w x 4h`` pixels. Every pixel remembers which series
painted it, which is how cells pick their color when rendered.
"""

import math
from typing import Sequence

from rich.text import Text

EMPTY = -1
BRAILLE_BASE = 0x2800

# Dot bit per (row, column) inside a cell, top row first.
BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)


def _round(v: float) -> int:
    # half away from zero
    return int(math.floor(v + 0.5)) if v >= 0 else -int(math.floor(-v + 0.5))


class BrailleCanvas:
    def __init__(self, char_width: int, char_height: int):
        self.char_width = max(char_width, 0)
        self.char_height = max(char_height, 0)
        self.width = self.char_width * 2
        self.height = self.char_height * 4
        self.grid = [EMPTY] * (self.width * self.height)

    def set(self, x: int, y: int, series: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.grid[y * self.width + x] = series

    def get(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.grid[y * self.width + x]
        return EMPTY

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, series: int) -> None:
        """DDA line, thickened by one pixel above and below every sample.

        Only the steps that can touch the canvas are walked, so the cost is
        bounded by the canvas size however far off-canvas the endpoints are.
        """
        dx = x1 - x0
        dy = y1 - y0
        steps = max(abs(dx), abs(dy))
        if steps == 0:
            for py in (y0 - 1, y0, y0 + 1):
                self.set(x0, py, series)
            return

        span = self._clip(x0, y0, dx, dy)
        if span is None:
            return
        first = max(math.floor(span[0] * steps) - 1, 0)
        last = min(math.ceil(span[1] * steps) + 1, steps)
        for i in range(first, last + 1):
            px = _round(x0 + dx * i / steps)
            py = _round(y0 + dy * i / steps)
            self.set(px, py, series)
            self.set(px, py - 1, series)
            self.set(px, py + 1, series)

    def _clip(self, x0: int, y0: int, dx: int, dy: int) -> tuple[float, float] | None:
        """Liang-Barsky: the parameter range of the segment that lies inside
        the canvas grown by the thickening margin, or None if there is none."""
        t0, t1 = 0.0, 1.0
        bounds = (
            (-dx, x0 + 1),
            (dx, self.width - x0),
            (-dy, y0 + 2),
            (dy, self.height + 1 - y0),
        )
        for p, q in bounds:
            if p == 0:
                if q < 0:
                    return None
                continue
            r = q / p
            if p < 0:
                t0 = max(t0, r)
            else:
                t1 = min(t1, r)
            if t0 > t1:
                return None
        return t0, t1

    def fill_below(self, series: int) -> None:
        for px in range(self.width):
            top = None
            for py in range(self.height):
                if self.grid[py * self.width + px] == series:
                    top = py
                    break
            if top is None:
                continue
            for py in range(top, self.height):
                idx = py * self.width + px
                if self.grid[idx] == EMPTY:
                    self.grid[idx] = series

    def _cell(self, cx: int, cy: int) -> tuple[int, int | None]:
        pattern = 0
        counts: dict[int, int] = {}
        for dy in range(4):
            row = (cy * 4 + dy) * self.width
            for dx in range(2):
                si = self.grid[row + cx * 2 + dx]
                if si != EMPTY:
                    pattern |= BRAILLE_DOTS[dy][dx]
                    counts[si] = counts.get(si, 0) + 1
        if not counts:
            return 0, None
        # plurality, lowest series index wins ties
        owner = min(counts, key=lambda si: (-counts[si], si))
        return pattern, owner

    def render(self, styles: Sequence[str], fallback: str = "") -> list[Text]:
        """One Text per character row, cells colored by their dominant series."""
        lines = []
        for cy in range(self.char_height):
            line = Text()
            for cx in range(self.char_width):
                pattern, owner = self._cell(cx, cy)
                if owner is None:
                    line.append(" ")
                    continue
                style = styles[owner] if 0 <= owner < len(styles) else fallback
                line.append(chr(BRAILLE_BASE + pattern), style=style)
            lines.append(line)
        return lines
