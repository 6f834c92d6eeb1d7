"""
Central data model definitions used across the project.

This module defines the canonical structure of trip data so that:
- loading, conflict detection, view derivation and rendering share the same field names
- inputs (Itinerary, Stop, Activity) stay immutable once loaded
- derived view structures are plain values, rebuilt on every call and never persisted
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, List, Optional


# ---------------------------------------------------------------------------
# Inputs (owned by the data-access layer)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Itinerary:
    """
    One planned trip. start_date..end_date is inclusive and bounds all stops.
    """

    id: str
    title: str
    start_date: date
    end_date: date
    description: Optional[str] = None
    status: str = "draft"


@dataclass(frozen=True)
class Stop:
    """
    A destination visited during a trip.

    arrival_date / departure_date are calendar dates (inclusive).
    order_index is the persisted display order and is not necessarily chronological.
    """

    id: str
    itinerary_id: str
    destination_name: str
    arrival_date: date
    departure_date: date
    order_index: int = 0
    destination_code: Optional[str] = None


@dataclass(frozen=True)
class Activity:
    """
    A scheduled or unscheduled event tied to exactly one stop.

    start_time / end_time are None when the activity is untimed.
    """

    id: str
    stop_id: str
    name: str
    category: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    estimated_cost: Optional[float] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    booking_url: Optional[str] = None

    @property
    def is_timed(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass
class Trip:
    """
    Everything the engine needs for one itinerary, as handed over by storage or the API client.
    """

    itinerary: Itinerary
    stops: List[Stop] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Derived structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConflictPair:
    """
    Two activities of the same stop whose time intervals overlap.
    The pair is unordered; `first` is simply the one that came first in its group.
    """

    first: Activity
    second: Activity

    def involves(self, activity_id: str) -> bool:
        return self.first.id == activity_id or self.second.id == activity_id


@dataclass(frozen=True)
class DayEntry:
    activity: Activity
    stop: Stop
    has_conflict: bool = False


@dataclass
class DayCell:
    """
    Schedule for one calendar day: the stops covering it and the activities starting on it.
    """

    day: date
    active_stops: List[Stop] = field(default_factory=list)
    entries: List[DayEntry] = field(default_factory=list)
    is_today: bool = False

    @property
    def no_stops(self) -> bool:
        # "no stops this date" is a different empty state than "stops but no activities"
        return not self.active_stops

    @property
    def activities(self) -> List[Activity]:
        return [e.activity for e in self.entries]


@dataclass
class WeekGrid:
    start: date
    days: List[DayCell] = field(default_factory=list)

    @property
    def end(self) -> date:
        return self.days[-1].day if self.days else self.start


@dataclass
class StopSummary:
    stop: Stop
    position: int
    activities: List[Activity]
    activity_count: int
    conflict_count: int
    duration_days: int
    conflicted_ids: FrozenSet[str] = frozenset()

    def is_conflicted(self, activity: Activity) -> bool:
        return activity.id in self.conflicted_ids


@dataclass
class OverviewTimeline:
    itinerary: Itinerary
    duration_days: int
    destination_count: int
    total_activities: int
    stops: List[StopSummary] = field(default_factory=list)

    @property
    def no_stops(self) -> bool:
        return not self.stops
