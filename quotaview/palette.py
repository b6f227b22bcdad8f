"""Semantic color tokens resolved to rich styles.

Renderers never hard-code colors. They ask the palette for a token and get
back a rich style string, so a theme is just a different mapping.
"""

from typing import Mapping

DEFAULT_COLORS = {
    "text": "white",
    "subtext": "grey70",
    "dim": "dim",
    "track": "bright_black",
    "border": "bright_black",
    "title": "bold cyan",
    "accent": "cyan",
    "ok": "green",
    "warn": "yellow",
    "crit": "red",
    "heat0": "bright_black",
    "heat1": "dark_green",
    "heat2": "green",
    "heat3": "yellow",
    "heat4": "red",
    "series0": "cyan",
    "series1": "magenta",
    "series2": "yellow",
    "series3": "green",
    "series4": "blue",
    "series5": "red",
}

SERIES_TOKENS = tuple(f"series{i}" for i in range(6))


class Palette:
    """Token -> style lookup. Unknown tokens resolve to the ``text`` style."""

    def __init__(self, colors: Mapping[str, str] | None = None):
        self._colors = dict(DEFAULT_COLORS)
        if colors:
            self._colors.update(colors)

    def __call__(self, token: str) -> str:
        return self._colors.get(token, self._colors["text"])

    def series(self, index: int) -> str:
        return SERIES_TOKENS[index % len(SERIES_TOKENS)]

    def status(self, pct: float) -> str:
        """Token for a used-percent: ok below 50, warn below 80, crit above."""
        if pct < 50:
            return "ok"
        if pct < 80:
            return "warn"
        return "crit"
