"""
TripSchedule: scheduling-conflict detection and calendar views for travel itineraries.
"""

from tripschedule.conflicts import detect_conflicts, has_conflict
from tripschedule.grouping import group_by_stop
from tripschedule.views import derive_daily_view, derive_overview_view, derive_weekly_view

__all__ = [
    "detect_conflicts",
    "has_conflict",
    "group_by_stop",
    "derive_daily_view",
    "derive_weekly_view",
    "derive_overview_view",
]
