"""
Temporal grouping.

Partition a flat list of activities by their owning stop and order each
stop's activities chronologically.

Ordering rule inside a group:
    - activities with a start time are sorted ascending (stable on ties)
    - activities without a start time keep the slot they had in the input
"""

from __future__ import annotations

from typing import Iterable

from tripschedule.model import Activity, Stop


def _sort_keeping_untimed_slots(activities: list[Activity]) -> list[Activity]:
    """
    Sort timed activities into the slots they occupy, leave untimed ones in place.
    """
    timed = sorted((a for a in activities if a.start_time is not None), key=lambda a: a.start_time)
    it = iter(timed)
    return [a if a.start_time is None else next(it) for a in activities]


def group_by_stop(activities: Iterable[Activity]) -> dict[str, list[Activity]]:
    """
    Map stop_id -> chronologically sorted activities of that stop.

    Stops appear in first-seen order. A stop without activities has no key,
    so callers should look up with .get(stop_id, []).
    """
    grouped: dict[str, list[Activity]] = {}
    for activity in activities:
        grouped.setdefault(activity.stop_id, []).append(activity)

    return {stop_id: _sort_keeping_untimed_slots(items) for stop_id, items in grouped.items()}


def sort_stops_by_arrival(stops: Iterable[Stop]) -> list[Stop]:
    """
    Chronological display order by arrival date (order_index is not used).
    """
    return sorted(stops, key=lambda s: s.arrival_date)
