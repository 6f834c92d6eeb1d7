import unittest
from datetime import date

from tripschedule.model import Itinerary
from tripschedule.navigation import (
    ViewMode,
    can_navigate_next,
    can_navigate_previous,
    describe_period,
    step,
)

TRIP = Itinerary(id="t", title="Summer", start_date=date(2024, 6, 1), end_date=date(2024, 6, 10))


class TestStep(unittest.TestCase):
    def test_daily_moves_one_day(self) -> None:
        self.assertEqual(step(ViewMode.DAILY, date(2024, 6, 30), +1), date(2024, 7, 1))
        self.assertEqual(step(ViewMode.DAILY, date(2024, 6, 1), -1), date(2024, 5, 31))

    def test_weekly_moves_seven_days(self) -> None:
        self.assertEqual(step(ViewMode.WEEKLY, date(2024, 6, 1), +1), date(2024, 6, 8))
        self.assertEqual(step("weekly", date(2024, 6, 8), -1), date(2024, 6, 1))

    def test_overview_does_not_move(self) -> None:
        self.assertEqual(step(ViewMode.OVERVIEW, date(2024, 6, 3), +1), date(2024, 6, 3))


class TestBounds(unittest.TestCase):
    def test_daily(self) -> None:
        self.assertFalse(can_navigate_previous(ViewMode.DAILY, date(2024, 6, 1), TRIP))
        self.assertTrue(can_navigate_previous(ViewMode.DAILY, date(2024, 6, 2), TRIP))
        self.assertTrue(can_navigate_next(ViewMode.DAILY, date(2024, 6, 9), TRIP))
        self.assertFalse(can_navigate_next(ViewMode.DAILY, date(2024, 6, 10), TRIP))

    def test_weekly(self) -> None:
        self.assertFalse(can_navigate_previous(ViewMode.WEEKLY, date(2024, 6, 7), TRIP))
        self.assertTrue(can_navigate_previous(ViewMode.WEEKLY, date(2024, 6, 8), TRIP))
        self.assertTrue(can_navigate_next(ViewMode.WEEKLY, date(2024, 6, 3), TRIP))
        self.assertFalse(can_navigate_next(ViewMode.WEEKLY, date(2024, 6, 4), TRIP))

    def test_overview_never_navigates(self) -> None:
        self.assertFalse(can_navigate_previous(ViewMode.OVERVIEW, date(2024, 6, 5), TRIP))
        self.assertFalse(can_navigate_next(ViewMode.OVERVIEW, date(2024, 6, 5), TRIP))


class TestDescribePeriod(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(describe_period(ViewMode.DAILY, date(2024, 6, 3), TRIP), "Monday, June 3, 2024")
        self.assertEqual(describe_period(ViewMode.WEEKLY, date(2024, 6, 3), TRIP), "Jun 3 - Jun 9, 2024")
        self.assertEqual(describe_period(ViewMode.OVERVIEW, date(2024, 6, 3), TRIP), "Jun 1 - Jun 10, 2024")

    def test_week_across_year_end(self) -> None:
        self.assertEqual(describe_period(ViewMode.WEEKLY, date(2024, 12, 29), TRIP), "Dec 29 - Jan 4, 2025")


if __name__ == "__main__":
    unittest.main()
