"""Dashboard view modes and the state that selects between them.

The configured mode is what the user picked. The effective mode is what a
frame actually draws: narrow terminals with several accounts fall back to
Stacked for that frame only, so widening the terminal brings the configured
mode straight back.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .layout import TILE_BORDER_H, TILE_GAP_H, TILE_MIN_MULTI_COLUMN_WIDTH

logger = logging.getLogger(__name__)

LEGACY_LIST = "list"


class ViewMode(str, Enum):
    GRID = "grid"
    STACKED = "stacked"
    TABS = "tabs"
    SPLIT = "split"
    COMPARE = "compare"


@dataclass(frozen=True)
class ViewOption:
    mode: ViewMode
    label: str
    description: str


VIEW_OPTIONS = (
    ViewOption(ViewMode.GRID, "Grid", "Adaptive multi-column layout with per-tile summaries."),
    ViewOption(ViewMode.STACKED, "Stacked", "Full widgets in one scrollable column."),
    ViewOption(ViewMode.TABS, "Tabs", "Full-height focus pane with visible tab strip."),
    ViewOption(ViewMode.SPLIT, "Split", "Navigator pane on the left, focus pane on the right."),
    ViewOption(ViewMode.COMPARE, "Compare", "Side-by-side panes for active and neighboring account."),
)


def normalize_view_mode(raw) -> ViewMode:
    value = str(raw.value if isinstance(raw, ViewMode) else raw or "").strip().lower()
    if value == LEGACY_LIST:
        return ViewMode.SPLIT
    try:
        return ViewMode(value)
    except ValueError:
        return ViewMode.GRID


def view_label(mode: ViewMode) -> str:
    for option in VIEW_OPTIONS:
        if option.mode == mode:
            return option.label
    return VIEW_OPTIONS[0].label


def view_index(mode: ViewMode) -> int:
    for i, option in enumerate(VIEW_OPTIONS):
        if option.mode == mode:
            return i
    return 0


def cycle_view(mode: ViewMode, step: int = 1) -> ViewMode:
    return VIEW_OPTIONS[(view_index(normalize_view_mode(mode)) + step) % len(VIEW_OPTIONS)].mode


def min_two_column_width() -> int:
    return 2 * (TILE_MIN_MULTI_COLUMN_WIDTH + TILE_BORDER_H) + TILE_GAP_H + 2


def should_force_stacked(width: int, item_count: int) -> bool:
    if width <= 0 or item_count <= 1:
        return False
    return width < min_two_column_width()


def effective_view(configured, width: int, item_count: int) -> ViewMode:
    mode = normalize_view_mode(configured)
    if should_force_stacked(width, item_count):
        if mode != ViewMode.STACKED:
            logger.debug("width %d below two-column minimum, drawing %s as stacked", width, mode.value)
        return ViewMode.STACKED
    return mode


def view_status_label(configured, width: int, item_count: int) -> str:
    active = effective_view(configured, width, item_count)
    if active != normalize_view_mode(configured):
        return f"{view_label(active)} (auto)"
    return view_label(active)


@dataclass(frozen=True)
class ViewState:
    """Caller-held dashboard state. Transitions return new states."""

    view: ViewMode = ViewMode.GRID
    cursor: int = 0
    tile_offset: int = 0
    detail_offset: int = 0

    @classmethod
    def from_config(cls, raw) -> "ViewState":
        return cls(view=normalize_view_mode(raw))

    def with_view(self, mode) -> "ViewState":
        return replace(self, view=normalize_view_mode(mode), tile_offset=0, detail_offset=0)

    def next_view(self) -> "ViewState":
        return self.with_view(cycle_view(self.view, 1))

    def previous_view(self) -> "ViewState":
        return self.with_view(cycle_view(self.view, -1))

    def move_cursor(self, delta: int, item_count: int) -> "ViewState":
        if item_count <= 0:
            return replace(self, cursor=0, detail_offset=0)
        cursor = min(max(self.cursor + delta, 0), item_count - 1)
        return replace(self, cursor=cursor, detail_offset=0)

    def scroll_tiles(self, delta: int) -> "ViewState":
        return replace(self, tile_offset=max(self.tile_offset + delta, 0))

    def scroll_detail(self, delta: int) -> "ViewState":
        return replace(self, detail_offset=max(self.detail_offset + delta, 0))
