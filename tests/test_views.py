"""
Unit tests for the daily, weekly and overview views.

Trip used below (June 2024):
- itinerary 06-01 .. 06-10
- Paris 06-02 .. 06-05, Rome 06-05 .. 06-09 (Rome has the lower order_index)
"""

import unittest
from datetime import date, datetime

from tripschedule.conflicts import detect_conflicts
from tripschedule.grouping import group_by_stop
from tripschedule.model import Activity, Itinerary, Stop, Trip
from tripschedule.views import (
    active_stops_for_date,
    activities_for_date,
    build_schedule,
    days_between,
    derive_daily_view,
    derive_overview_view,
    derive_weekly_view,
)

ITINERARY = Itinerary(id="trip", title="Summer", start_date=date(2024, 6, 1), end_date=date(2024, 6, 10))
PARIS = Stop("paris", "trip", "Paris", date(2024, 6, 2), date(2024, 6, 5), order_index=1)
ROME = Stop("rome", "trip", "Rome", date(2024, 6, 5), date(2024, 6, 9), order_index=0)


def _act(aid, stop, day, start=None, end=None):
    def at(hhmm):
        if hhmm is None:
            return None
        h, m = hhmm.split(":")
        return datetime(2024, 6, day, int(h), int(m))

    return Activity(id=aid, stop_id=stop.id, name=aid, category="tour", start_time=at(start), end_time=at(end))


ACTIVITIES = [
    _act("louvre", PARIS, 3, "10:00", "12:00"),
    _act("lunch", PARIS, 3, "11:00", "13:00"),
    _act("seine", PARIS, 3, "13:00", "14:00"),
    _act("breakfast", PARIS, 3, "08:00", "09:00"),
    _act("shopping", PARIS, 4),
    _act("colosseum", ROME, 6, "09:00", "11:00"),
    _act("vatican", ROME, 5, "15:00", "17:00"),
    _act("crepe", PARIS, 5, "10:00", "10:30"),
]


def _schedule():
    groups = group_by_stop(ACTIVITIES)
    return [ROME, PARIS], groups, detect_conflicts(groups)


class TestActiveStops(unittest.TestCase):
    def test_inclusive_bounds(self) -> None:
        stops = [PARIS, ROME]
        self.assertEqual(active_stops_for_date(date(2024, 6, 1), stops), [])
        self.assertEqual(active_stops_for_date(date(2024, 6, 2), stops), [PARIS])
        self.assertEqual(active_stops_for_date(date(2024, 6, 5), stops), [PARIS, ROME])
        self.assertEqual(active_stops_for_date(date(2024, 6, 9), stops), [ROME])
        self.assertEqual(active_stops_for_date(date(2024, 6, 10), stops), [])

    def test_datetime_query_uses_calendar_day(self) -> None:
        late = datetime(2024, 6, 5, 23, 59, 59)
        early = datetime(2024, 6, 2, 0, 0, 1)
        self.assertEqual(active_stops_for_date(late, [PARIS]), [PARIS])
        self.assertEqual(active_stops_for_date(early, [PARIS]), [PARIS])

    def test_activities_for_date_only_that_day(self) -> None:
        stops, groups, _ = _schedule()
        found = activities_for_date(date(2024, 6, 3), [PARIS], groups)
        self.assertEqual([a.id for a, _ in found], ["breakfast", "louvre", "lunch", "seine"])
        self.assertTrue(all(s is PARIS for _, s in found))


class TestDailyView(unittest.TestCase):
    def test_no_stops_empty_state(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 1), stops, groups, conflicts)
        self.assertTrue(cell.no_stops)
        self.assertEqual(cell.entries, [])

    def test_stop_active_without_activities(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 2), stops, groups, conflicts)
        self.assertFalse(cell.no_stops)
        self.assertEqual(cell.active_stops, [PARIS])
        self.assertEqual(cell.entries, [])

    def test_paris_day(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 3), stops, groups, conflicts)

        self.assertEqual(cell.active_stops, [PARIS])
        self.assertEqual([e.activity.id for e in cell.entries], ["breakfast", "louvre", "lunch", "seine"])
        flags = {e.activity.id: e.has_conflict for e in cell.entries}
        self.assertEqual(flags, {"breakfast": False, "louvre": True, "lunch": True, "seine": False})

    def test_untimed_activity_never_listed(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 4), stops, groups, conflicts)
        self.assertEqual(cell.active_stops, [PARIS])
        self.assertEqual(cell.entries, [])

    def test_overlap_day_merges_stops_sorted_by_time(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 5), stops, groups, conflicts)
        self.assertEqual({s.id for s in cell.active_stops}, {"paris", "rome"})
        self.assertEqual([e.activity.id for e in cell.entries], ["crepe", "vatican"])
        self.assertEqual([e.stop.id for e in cell.entries], ["paris", "rome"])

    def test_activity_of_inactive_stop_is_hidden(self) -> None:
        # Paris ends 06-05, so a Paris activity dated 06-07 is not shown
        stray = _act("stray", PARIS, 7, "10:00", "11:00")
        groups = group_by_stop(ACTIVITIES + [stray])
        cell = derive_daily_view(date(2024, 6, 7), [PARIS, ROME], groups, detect_conflicts(groups))
        self.assertNotIn("stray", [e.activity.id for e in cell.entries])

    def test_today_flag(self) -> None:
        stops, groups, conflicts = _schedule()
        cell = derive_daily_view(date(2024, 6, 3), stops, groups, conflicts, today=date(2024, 6, 3))
        self.assertTrue(cell.is_today)

    def test_inputs_not_mutated(self) -> None:
        stops, groups, conflicts = _schedule()
        before = {k: list(v) for k, v in groups.items()}
        derive_daily_view(date(2024, 6, 3), stops, groups, conflicts)
        self.assertEqual(groups, before)
        self.assertEqual(stops, [ROME, PARIS])


class TestWeeklyView(unittest.TestCase):
    def test_seven_cells_match_daily(self) -> None:
        stops, groups, conflicts = _schedule()
        today = date(2024, 6, 4)
        start = date(2024, 6, 1)

        grid = derive_weekly_view(start, stops, groups, conflicts, today=today)

        self.assertEqual(len(grid.days), 7)
        self.assertEqual(grid.start, start)
        self.assertEqual(grid.end, date(2024, 6, 7))
        for i, cell in enumerate(grid.days):
            daily = derive_daily_view(cell.day, stops, groups, conflicts, today=today)
            self.assertEqual(cell.day, date(2024, 6, 1 + i))
            self.assertEqual(cell, daily)

    def test_today_highlight(self) -> None:
        stops, groups, conflicts = _schedule()
        grid = derive_weekly_view(date(2024, 6, 1), stops, groups, conflicts, today=date(2024, 6, 4))
        self.assertEqual([c.is_today for c in grid.days], [False, False, False, True, False, False, False])

    def test_week_crossing_month(self) -> None:
        grid = derive_weekly_view(date(2024, 6, 28), [], {}, [], today=date(2000, 1, 1))
        self.assertEqual(grid.days[-1].day, date(2024, 7, 4))
        self.assertTrue(all(c.no_stops for c in grid.days))


class TestOverviewView(unittest.TestCase):
    def test_aggregates(self) -> None:
        stops, groups, conflicts = _schedule()
        timeline = derive_overview_view(ITINERARY, stops, groups, conflicts)

        self.assertEqual(timeline.duration_days, 9)
        self.assertEqual(timeline.destination_count, 2)
        self.assertEqual(timeline.total_activities, len(ACTIVITIES))
        self.assertFalse(timeline.no_stops)

    def test_stops_in_arrival_order(self) -> None:
        stops, groups, conflicts = _schedule()
        timeline = derive_overview_view(ITINERARY, stops, groups, conflicts)
        self.assertEqual([s.stop.id for s in timeline.stops], ["paris", "rome"])
        self.assertEqual([s.position for s in timeline.stops], [1, 2])

    def test_per_stop_summary(self) -> None:
        stops, groups, conflicts = _schedule()
        paris, rome = derive_overview_view(ITINERARY, stops, groups, conflicts).stops

        self.assertEqual(paris.activity_count, 6)
        self.assertEqual(paris.conflict_count, 2)
        self.assertEqual(paris.duration_days, 3)
        self.assertEqual(len(paris.activities), 6)
        self.assertTrue(paris.is_conflicted(groups["paris"][1]))

        self.assertEqual(rome.activity_count, 2)
        self.assertEqual(rome.conflict_count, 0)
        self.assertEqual([a.id for a in rome.activities], ["vatican", "colosseum"])

    def test_no_stops(self) -> None:
        timeline = derive_overview_view(ITINERARY, [], {}, [])
        self.assertTrue(timeline.no_stops)
        self.assertEqual(timeline.total_activities, 0)
        self.assertEqual(timeline.destination_count, 0)

    def test_total_ignores_activities_of_unknown_stops(self) -> None:
        orphan = Activity(id="x", stop_id="ghost", name="x", category="misc")
        schedule = build_schedule(Trip(itinerary=ITINERARY, stops=[PARIS, ROME], activities=ACTIVITIES + [orphan]))
        timeline = derive_overview_view(ITINERARY, schedule.stops, schedule.groups, schedule.conflicts)
        self.assertEqual(timeline.total_activities, len(ACTIVITIES))
        self.assertEqual(sum(s.activity_count for s in timeline.stops), len(ACTIVITIES))


class TestHelpers(unittest.TestCase):
    def test_days_between(self) -> None:
        self.assertEqual(days_between(date(2024, 6, 1), date(2024, 6, 10)), 9)
        self.assertEqual(days_between(date(2024, 6, 10), date(2024, 6, 1)), 9)
        self.assertEqual(days_between(date(2024, 6, 1), date(2024, 6, 1)), 0)
        self.assertEqual(days_between(datetime(2024, 6, 1, 0), datetime(2024, 6, 2, 1)), 2)


class TestBuildSchedule(unittest.TestCase):
    def test_build_schedule(self) -> None:
        trip = Trip(itinerary=ITINERARY, stops=[ROME, PARIS], activities=list(ACTIVITIES))
        schedule = build_schedule(trip)
        self.assertEqual([s.id for s in schedule.stops], ["paris", "rome"])
        self.assertEqual(len(schedule.conflicts), 1)
        self.assertEqual(set(schedule.groups), {"paris", "rome"})
        self.assertEqual(schedule.activities, ACTIVITIES)

    def test_unknown_stop_never_conflicts(self) -> None:
        ghost_a = Activity(
            id="g1",
            stop_id="ghost",
            name="g1",
            category="tour",
            start_time=datetime(2024, 6, 3, 10, 0),
            end_time=datetime(2024, 6, 3, 12, 0),
        )
        ghost_b = Activity(
            id="g2",
            stop_id="ghost",
            name="g2",
            category="tour",
            start_time=datetime(2024, 6, 3, 11, 0),
            end_time=datetime(2024, 6, 3, 13, 0),
        )
        schedule = build_schedule(Trip(itinerary=ITINERARY, stops=[PARIS], activities=[ghost_a, ghost_b]))

        self.assertEqual(schedule.conflicts, [])
        self.assertEqual(schedule.groups, {})
        self.assertEqual(schedule.activities, [])

        cell = derive_daily_view(date(2024, 6, 3), schedule.stops, schedule.groups, schedule.conflicts)
        self.assertEqual(cell.entries, [])


if __name__ == "__main__":
    unittest.main()
