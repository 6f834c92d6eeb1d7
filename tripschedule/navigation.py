"""
Calendar navigation helpers.

The selected view mode and the current date are caller-side state
(CLI / interactive session). These helpers only compute the next state
and whether moving is allowed inside the itinerary's date range.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from tripschedule.model import Itinerary


class ViewMode(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    OVERVIEW = "overview"


_STEP_DAYS = {ViewMode.DAILY: 1, ViewMode.WEEKLY: 7, ViewMode.OVERVIEW: 0}


def step(mode: ViewMode, current: date, direction: int) -> date:
    """
    Move one period forward (direction > 0) or back (direction < 0).
    The overview has no period, so the date is returned unchanged.
    """
    if direction == 0:
        return current
    days = _STEP_DAYS[ViewMode(mode)]
    return current + timedelta(days=days if direction > 0 else -days)


def can_navigate_previous(mode: ViewMode, current: date, itinerary: Itinerary) -> bool:
    mode = ViewMode(mode)
    if mode is ViewMode.DAILY:
        return current > itinerary.start_date
    if mode is ViewMode.WEEKLY:
        return current - timedelta(days=7) >= itinerary.start_date
    return False


def can_navigate_next(mode: ViewMode, current: date, itinerary: Itinerary) -> bool:
    mode = ViewMode(mode)
    if mode is ViewMode.DAILY:
        return current < itinerary.end_date
    if mode is ViewMode.WEEKLY:
        return current + timedelta(days=7) <= itinerary.end_date
    return False


def _month_day(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def describe_period(mode: ViewMode, current: date, itinerary: Itinerary) -> str:
    """
    Human-readable label of what the current view shows, e.g.

        daily:    Monday, June 3, 2024
        weekly:   Jun 3 - Jun 9, 2024
        overview: Jun 1 - Jun 10, 2024
    """
    mode = ViewMode(mode)
    if mode is ViewMode.DAILY:
        return f"{current.strftime('%A, %B')} {current.day}, {current.year}"
    if mode is ViewMode.WEEKLY:
        end = current + timedelta(days=6)
        return f"{_month_day(current)} - {_month_day(end)}, {end.year}"
    start, end = itinerary.start_date, itinerary.end_date
    return f"{_month_day(start)} - {_month_day(end)}, {end.year}"
