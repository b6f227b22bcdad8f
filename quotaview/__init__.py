"""Terminal rendering and layout for API usage, quota and spend dashboards."""

from .dashboard import render_dashboard
from .models import Metric, Series, Snapshot, Status, TimePoint
from .palette import Palette
from .views import ViewMode, ViewState

__version__ = "0.1.0"

__all__ = [
    "Metric",
    "Palette",
    "Series",
    "Snapshot",
    "Status",
    "TimePoint",
    "ViewMode",
    "ViewState",
    "render_dashboard",
]
