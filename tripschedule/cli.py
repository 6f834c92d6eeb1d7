"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    tripschedule day 2024-06-03
    tripschedule week 2024-06-03
    tripschedule overview
    tripschedule timeline
    tripschedule conflicts
    tripschedule export trip.ics
    tripschedule fetch <itinerary_id>
    tripschedule interactive

Note:
- The interactive calendar lives in tripschedule/interactive.py
- Trip data is read from --trip (or TRIPSCHEDULE_TRIP, or the package default)
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from typing import Optional

import requests
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from tripschedule import render
from tripschedule.client import fetch_trip
from tripschedule.config import Settings, load_settings
from tripschedule.export_ics import export_activities_to_ics
from tripschedule.model import Trip
from tripschedule.navigation import ViewMode, describe_period
from tripschedule.storage import TripDataError, load_trip, resolve_timezone, save_trip
from tripschedule.views import (
    Schedule,
    build_schedule,
    derive_daily_view,
    derive_overview_view,
    derive_weekly_view,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_day(text: Optional[str], default: date) -> Optional[date]:
    """
    Parse YYYY-MM-DD, fall back to `default` when no text is given.
    Returns None for invalid input.
    """
    if not text:
        return default
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def _print_title(schedule: Schedule, mode: ViewMode, current: date) -> None:
    it = schedule.trip.itinerary
    render.console.print(f"[bold]{escape(it.title)}[/] - {describe_period(mode, current, it)}")
    render.print_conflict_banner(schedule.conflicts)


def _cmd_day(args: argparse.Namespace, schedule: Schedule) -> int:
    """
    Print the schedule of one day (default: first day of the trip).
    """
    day = _parse_day(args.date, schedule.trip.itinerary.start_date)
    if day is None:
        render.console.print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    _print_title(schedule, ViewMode.DAILY, day)
    cell = derive_daily_view(day, schedule.stops, schedule.groups, schedule.conflicts)
    render.print_daily(cell)
    return 0


def _cmd_week(args: argparse.Namespace, schedule: Schedule) -> int:
    """
    Print seven days starting at the given date (default: first day of the trip).
    """
    start = _parse_day(args.date, schedule.trip.itinerary.start_date)
    if start is None:
        render.console.print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    _print_title(schedule, ViewMode.WEEKLY, start)
    grid = derive_weekly_view(start, schedule.stops, schedule.groups, schedule.conflicts)
    render.print_weekly(grid)
    return 0


def _cmd_overview(args: argparse.Namespace, schedule: Schedule) -> int:
    it = schedule.trip.itinerary
    _print_title(schedule, ViewMode.OVERVIEW, it.start_date)
    timeline = derive_overview_view(it, schedule.stops, schedule.groups, schedule.conflicts)
    if args.command == "timeline":
        render.print_timeline(timeline)
    else:
        render.print_overview(timeline)
    return 0


def _cmd_conflicts(args: argparse.Namespace, schedule: Schedule) -> int:
    """
    Print all detected conflicts.
    """
    render.print_conflicts(schedule.conflicts, schedule.stops)
    return 0


def _cmd_export(args: argparse.Namespace, schedule: Schedule) -> int:
    """
    Export timed activities into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        render.console.print("Please provide output .ics path.")
        return 1

    if not schedule.activities:
        render.console.print("No activities to export.")
        return 0

    n = export_activities_to_ics(
        schedule.activities,
        schedule.stops,
        out_path,
        conflicts=schedule.conflicts,
        calendar_name=schedule.trip.itinerary.title,
    )
    render.console.print(f"Exported {n} activities to: {out_path}")
    return 0


def _cmd_fetch(args: argparse.Namespace, settings: Settings, trip_path: str) -> int:
    """
    Download a trip from the planner API and store it as the trip file.
    """
    itinerary_id = (args.itinerary_id or "").strip()
    if not itinerary_id:
        render.console.print("Please provide an itinerary ID.")
        return 1

    api_url = args.api_url or settings.api_url
    token = args.token or settings.api_token
    try:
        trip = fetch_trip(api_url, itinerary_id, token=token, timezone=args.tz or settings.timezone)
    except requests.RequestException as e:
        render.console.print(f"Download failed: {escape(str(e))}")
        return 1
    except TripDataError as e:
        render.console.print(f"Invalid data from API: {escape(str(e))}")
        return 1

    out = save_trip(trip, trip_path)
    render.console.print(f"Saved {len(trip.stops)} stops and {len(trip.activities)} activities to: {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="tripschedule", description="TripSchedule CLI")
    parser.add_argument("--trip", type=str, default=None, help="Trip JSON file")
    parser.add_argument("--tz", type=str, default=None, help="Timezone for activity times (e.g. Europe/Paris)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_day = sub.add_parser("day", help="Schedule of one day")
    p_day.add_argument("date", nargs="?", type=str, help="Date (YYYY-MM-DD), default: trip start")

    p_week = sub.add_parser("week", help="Seven-day grid")
    p_week.add_argument("date", nargs="?", type=str, help="First day (YYYY-MM-DD), default: trip start")

    sub.add_parser("overview", help="Trip overview by stop")
    sub.add_parser("timeline", help="Trip timeline with every activity")
    sub.add_parser("conflicts", help="Show scheduling conflicts")

    p_export = sub.add_parser("export", help="Export activities to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. trip.ics)")

    p_fetch = sub.add_parser("fetch", help="Download a trip from the planner API")
    p_fetch.add_argument("itinerary_id", type=str, help="Itinerary ID")
    p_fetch.add_argument("--api-url", type=str, default=None, help="API base URL")
    p_fetch.add_argument("--token", type=str, default=None, help="Bearer token")

    sub.add_parser("interactive", help="Interactive calendar")

    return parser


def _load(trip_path: str, tz_name: Optional[str]) -> Trip:
    return load_trip(trip_path, resolve_timezone(tz_name))


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    settings = load_settings()
    trip_path = args.trip or str(settings.trip_path)

    if args.command == "fetch":
        raise SystemExit(_cmd_fetch(args, settings, trip_path))

    try:
        trip = _load(trip_path, args.tz or settings.timezone)
    except TripDataError as e:
        render.console.print(escape(str(e)))
        raise SystemExit(1)

    logger.debug("Loaded %s from %s", trip.itinerary.id, trip_path)
    schedule = build_schedule(trip)

    if args.command == "day":
        raise SystemExit(_cmd_day(args, schedule))
    if args.command == "week":
        raise SystemExit(_cmd_week(args, schedule))
    if args.command in ("overview", "timeline"):
        raise SystemExit(_cmd_overview(args, schedule))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, schedule))
    if args.command == "export":
        raise SystemExit(_cmd_export(args, schedule))

    if args.command == "interactive":
        from tripschedule.interactive import run_interactive

        run_interactive(schedule, reload_fn=lambda: build_schedule(_load(trip_path, args.tz or settings.timezone)))
        raise SystemExit(0)

    raise SystemExit(2)
