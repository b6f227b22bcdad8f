"""Shared fixtures for the rendering tests."""

from __future__ import annotations

import pytest

from quotaview.models import Series, TimePoint
from quotaview.palette import Palette


@pytest.fixture
def palette() -> Palette:
    return Palette()


@pytest.fixture
def daily():
    """Factory for a series with one point per consecutive January 2025 day."""

    def make(label: str, values, color: str = "series0", start_day: int = 1) -> Series:
        points = tuple(
            TimePoint(f"2025-01-{start_day + i:02d}", float(v)) for i, v in enumerate(values)
        )
        return Series(label, color, points)

    return make
