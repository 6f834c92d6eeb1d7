"""
View derivation.

Three read-only projections over the same (stops, groups, conflicts) triple:

    derive_daily_view    -> DayCell        (one calendar day)
    derive_weekly_view   -> WeekGrid       (7 consecutive days)
    derive_overview_view -> OverviewTimeline (whole trip)

Groups come from grouping.group_by_stop and conflicts from
conflicts.detect_conflicts. They are computed once by the caller and shared
by whichever view is requested. Nothing here mutates its inputs.

Day matching works on plain calendar dates: a stop is active on `day` when
arrival_date <= day <= departure_date, and an activity belongs to `day` when
its start time falls on that date.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Optional, Sequence, Union

from tripschedule.conflicts import conflicted_activity_ids, detect_conflicts
from tripschedule.grouping import group_by_stop, sort_stops_by_arrival
from tripschedule.model import (
    Activity,
    ConflictPair,
    DayCell,
    DayEntry,
    Itinerary,
    OverviewTimeline,
    Stop,
    StopSummary,
    Trip,
    WeekGrid,
)

WEEK_LENGTH = 7

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_between(start: DateLike, end: DateLike) -> int:
    """
    ceil(|end - start| / 1 day). Works for dates and datetimes.
    """
    delta = abs(end - start)
    return math.ceil(delta.total_seconds() / timedelta(days=1).total_seconds())


def active_stops_for_date(day: DateLike, stops: Iterable[Stop]) -> list[Stop]:
    """
    Stops whose [arrival_date, departure_date] range contains `day`, in input order.
    """
    d = _as_date(day)
    return [s for s in stops if s.arrival_date <= d <= s.departure_date]


def activities_for_date(
    day: DateLike,
    stops: Iterable[Stop],
    groups: Mapping[str, Sequence[Activity]],
) -> list[tuple[Activity, Stop]]:
    """
    (activity, stop) pairs from the given stops whose start time is on `day`,
    sorted by start time (stable). Untimed activities never match.
    """
    d = _as_date(day)
    out: list[tuple[Activity, Stop]] = []
    for stop in stops:
        for activity in groups.get(stop.id, []):
            if activity.start_time is not None and activity.start_time.date() == d:
                out.append((activity, stop))

    out.sort(key=lambda pair: pair[0].start_time)
    return out


def _day_cell(
    day: date,
    stops: Sequence[Stop],
    groups: Mapping[str, Sequence[Activity]],
    conflicted: set[str],
    today: date,
) -> DayCell:
    active = active_stops_for_date(day, stops)
    entries = [
        DayEntry(activity=a, stop=s, has_conflict=a.id in conflicted)
        for a, s in activities_for_date(day, active, groups)
    ]
    return DayCell(day=day, active_stops=active, entries=entries, is_today=(day == today))


def derive_daily_view(
    day: DateLike,
    stops: Sequence[Stop],
    groups: Mapping[str, Sequence[Activity]],
    conflicts: Sequence[ConflictPair],
    today: Optional[date] = None,
) -> DayCell:
    """
    Schedule for a single day.

    If no stop covers `day`, the returned cell has no_stops == True,
    which callers should show as "no stops on this date" rather than
    "no activities".
    """
    today = today if today is not None else date.today()
    return _day_cell(_as_date(day), stops, groups, conflicted_activity_ids(conflicts), today)


def derive_weekly_view(
    start: DateLike,
    stops: Sequence[Stop],
    groups: Mapping[str, Sequence[Activity]],
    conflicts: Sequence[ConflictPair],
    today: Optional[date] = None,
) -> WeekGrid:
    """
    Seven consecutive day cells beginning at `start`.
    Each cell is computed exactly like derive_daily_view for that date.
    """
    first = _as_date(start)
    today = today if today is not None else date.today()
    conflicted = conflicted_activity_ids(conflicts)

    days = [_day_cell(first + timedelta(days=i), stops, groups, conflicted, today) for i in range(WEEK_LENGTH)]
    return WeekGrid(start=first, days=days)


def derive_overview_view(
    itinerary: Itinerary,
    stops: Sequence[Stop],
    groups: Mapping[str, Sequence[Activity]],
    conflicts: Sequence[ConflictPair],
) -> OverviewTimeline:
    """
    Whole-trip summary: aggregates plus one StopSummary per stop,
    stops ordered by arrival date.

    Each summary carries the stop's complete activity list; cutting it down
    for display is left to the renderer.
    """
    conflicted = frozenset(conflicted_activity_ids(conflicts))

    summaries: list[StopSummary] = []
    for position, stop in enumerate(sort_stops_by_arrival(stops), start=1):
        activities = list(groups.get(stop.id, []))
        summaries.append(
            StopSummary(
                stop=stop,
                position=position,
                activities=activities,
                activity_count=len(activities),
                conflict_count=sum(1 for a in activities if a.id in conflicted),
                duration_days=days_between(stop.arrival_date, stop.departure_date),
                conflicted_ids=conflicted,
            )
        )

    return OverviewTimeline(
        itinerary=itinerary,
        duration_days=days_between(itinerary.start_date, itinerary.end_date),
        destination_count=len(stops),
        total_activities=sum(len(g) for g in groups.values()),
        stops=summaries,
    )


@dataclass
class Schedule:
    """
    Groupings and conflicts of one trip, computed once and shared by all views.

    `activities` holds only activities whose stop is part of the trip;
    the others are left out of every grouping, view and conflict.
    """

    trip: Trip
    stops: list[Stop]
    activities: list[Activity]
    groups: dict[str, list[Activity]]
    conflicts: list[ConflictPair]


def build_schedule(trip: Trip) -> Schedule:
    stop_ids = {s.id for s in trip.stops}
    activities = [a for a in trip.activities if a.stop_id in stop_ids]
    groups = group_by_stop(activities)
    return Schedule(
        trip=trip,
        stops=sort_stops_by_arrival(trip.stops),
        activities=activities,
        groups=groups,
        conflicts=detect_conflicts(groups),
    )
