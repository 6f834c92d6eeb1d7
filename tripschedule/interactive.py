from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

from rich.markup import escape

from tripschedule import render
from tripschedule.export_ics import export_activities_to_ics
from tripschedule.navigation import (
    ViewMode,
    can_navigate_next,
    can_navigate_previous,
    describe_period,
    step,
)
from tripschedule.storage import TripDataError
from tripschedule.views import Schedule, derive_daily_view, derive_overview_view, derive_weekly_view

console = render.console


@dataclass
class CalendarState:
    """
    Caller-side view state: which projection is shown and for which date.
    """

    mode: ViewMode
    current: date


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(escape(msg))


def _show(schedule: Schedule, state: CalendarState) -> None:
    it = schedule.trip.itinerary
    _println(f"\n=== {escape(it.title)} - {state.mode.value.capitalize()} ===")
    _println(describe_period(state.mode, state.current, it))
    render.print_conflict_banner(schedule.conflicts)

    if state.mode is ViewMode.DAILY:
        render.print_daily(derive_daily_view(state.current, schedule.stops, schedule.groups, schedule.conflicts))
    elif state.mode is ViewMode.WEEKLY:
        render.print_weekly(derive_weekly_view(state.current, schedule.stops, schedule.groups, schedule.conflicts))
    else:
        render.print_overview(derive_overview_view(it, schedule.stops, schedule.groups, schedule.conflicts))


def _menu(schedule: Schedule, state: CalendarState) -> str:
    it = schedule.trip.itinerary
    lines = ["", "[1] Daily", "[2] Weekly", "[3] Overview"]
    if can_navigate_previous(state.mode, state.current, it):
        lines.append("[p] Previous")
    if can_navigate_next(state.mode, state.current, it):
        lines.append("[n] Next")
    lines += ["[g] Go to date", "[t] Full timeline", "[c] Conflicts", "[e] Export .ics", "[r] Reload trip", "[0] Exit"]
    return "\n".join(lines) + "\nSelect: "


def _flow_goto(schedule: Schedule, state: CalendarState) -> None:
    raw = _prompt("Date (YYYY-MM-DD) [blank = trip start]: ").strip()
    if not raw:
        state.current = schedule.trip.itinerary.start_date
        return
    try:
        state.current = date.fromisoformat(raw)
    except ValueError:
        _println("Invalid date.")


def _flow_export(schedule: Schedule) -> None:
    if not schedule.activities:
        _println("No activities to export.")
        return

    default_name = "tripschedule.ics"
    out_in = _prompt(f"Please enter desired file name, default is [{default_name}]: ").strip()
    out_path = Path(out_in or default_name)

    # enforce .ics extension
    if out_path.suffix.lower() != ".ics":
        out_path = out_path.with_suffix(".ics")

    n = export_activities_to_ics(
        schedule.activities,
        schedule.stops,
        out_path,
        conflicts=schedule.conflicts,
        calendar_name=schedule.trip.itinerary.title,
    )
    _println(f"\nExported {n} activities.")
    _println(f"Saved to: {out_path.resolve()}")


def run_interactive(schedule: Schedule, reload_fn: Callable[[], Schedule]) -> None:
    """
    Interactive calendar loop. Starts on the overview at the first day of the trip.
    """
    state = CalendarState(mode=ViewMode.OVERVIEW, current=schedule.trip.itinerary.start_date)

    while True:
        _show(schedule, state)
        choice = _prompt(_menu(schedule, state)).strip().lower()
        it = schedule.trip.itinerary

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            state.mode = ViewMode.DAILY
        elif choice == "2":
            state.mode = ViewMode.WEEKLY
        elif choice == "3":
            state.mode = ViewMode.OVERVIEW
        elif choice == "p":
            if can_navigate_previous(state.mode, state.current, it):
                state.current = step(state.mode, state.current, -1)
            else:
                _println("Already at the start of the trip.")
        elif choice == "n":
            if can_navigate_next(state.mode, state.current, it):
                state.current = step(state.mode, state.current, +1)
            else:
                _println("Already at the end of the trip.")
        elif choice == "g":
            _flow_goto(schedule, state)
        elif choice == "t":
            render.print_timeline(derive_overview_view(it, schedule.stops, schedule.groups, schedule.conflicts))
            _prompt("\nPress Enter to go back...")
        elif choice == "c":
            render.print_conflicts(schedule.conflicts, schedule.stops)
            _prompt("\nPress Enter to go back...")
        elif choice == "e":
            _flow_export(schedule)
        elif choice == "r":
            try:
                schedule = reload_fn()
                _println("Trip reloaded.")
            except TripDataError as e:
                _println(f"Reload failed: {escape(str(e))}")
        else:
            _println("Invalid choice.")
