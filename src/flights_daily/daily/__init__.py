"""Day aggregation and calendar features."""
from __future__ import annotations

from .aggregate import daily_counts, event_dates
from .calendar import WDAY_LABELS, add_calendar_features, day_of_week, term, time_index

__all__ = [
    "WDAY_LABELS",
    "add_calendar_features",
    "daily_counts",
    "day_of_week",
    "event_dates",
    "term",
    "time_index",
]
