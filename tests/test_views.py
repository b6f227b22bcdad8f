"""View modes, auto-stacking and view state transitions."""

from __future__ import annotations

import dataclasses

import pytest

from quotaview.views import (VIEW_OPTIONS, ViewMode, ViewState, cycle_view, effective_view, min_two_column_width,
                             normalize_view_mode, should_force_stacked, view_status_label)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("grid", ViewMode.GRID),
        (" Tabs ", ViewMode.TABS),
        ("list", ViewMode.SPLIT),
        ("LIST", ViewMode.SPLIT),
        ("bogus", ViewMode.GRID),
        ("", ViewMode.GRID),
        (None, ViewMode.GRID),
        (ViewMode.COMPARE, ViewMode.COMPARE),
    ],
)
def test_normalize_view_mode(raw, expected) -> None:
    assert normalize_view_mode(raw) == expected


def test_legacy_alias_is_not_an_option() -> None:
    assert [o.mode.value for o in VIEW_OPTIONS] == ["grid", "stacked", "tabs", "split", "compare"]


def test_two_column_minimum() -> None:
    assert min_two_column_width() == 132


def test_narrow_terminal_forces_stacked() -> None:
    assert should_force_stacked(131, 2)
    assert not should_force_stacked(132, 2)
    assert not should_force_stacked(80, 1)
    assert not should_force_stacked(0, 5)
    assert effective_view(ViewMode.COMPARE, 100, 3) == ViewMode.STACKED
    assert effective_view(ViewMode.COMPARE, 200, 3) == ViewMode.COMPARE
    assert effective_view("tabs", 60, 1) == ViewMode.TABS


def test_forced_stacking_never_touches_configured_view() -> None:
    """Widening the terminal again brings the configured view straight back."""

    state = ViewState.from_config("split")
    assert effective_view(state.view, 90, 4) == ViewMode.STACKED
    assert state.view == ViewMode.SPLIT
    assert effective_view(state.view, 180, 4) == ViewMode.SPLIT


def test_status_label_marks_forced_view() -> None:
    assert view_status_label("grid", 100, 2) == "Stacked (auto)"
    assert view_status_label("stacked", 100, 2) == "Stacked"
    assert view_status_label("grid", 200, 2) == "Grid"


def test_cycling_wraps_both_ways() -> None:
    assert cycle_view(ViewMode.COMPARE, 1) == ViewMode.GRID
    assert cycle_view(ViewMode.GRID, -1) == ViewMode.COMPARE
    assert cycle_view(ViewMode.GRID, 2) == ViewMode.TABS
    assert cycle_view("list", 1) == ViewMode.COMPARE


def test_state_transitions_return_new_states() -> None:
    state = ViewState(tile_offset=4, detail_offset=2)
    nxt = state.next_view()
    assert state.view == ViewMode.GRID
    assert nxt.view == ViewMode.STACKED
    assert (nxt.tile_offset, nxt.detail_offset) == (0, 0)
    assert state.previous_view().view == ViewMode.COMPARE
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.view = ViewMode.TABS


def test_cursor_is_clamped() -> None:
    state = ViewState(detail_offset=3)
    assert state.move_cursor(5, 3).cursor == 2
    assert state.move_cursor(5, 3).detail_offset == 0
    assert state.move_cursor(-1, 3).cursor == 0
    assert state.move_cursor(1, 0).cursor == 0


def test_scrolling_never_goes_negative() -> None:
    state = ViewState()
    assert state.scroll_tiles(-3).tile_offset == 0
    assert state.scroll_tiles(2).scroll_tiles(-1).tile_offset == 1
    assert state.scroll_detail(4).detail_offset == 4
