"""
Terminal rendering of the derived views with rich.

Only presentation lives here: time/cost formatting, truncation of long
activity lists, highlighting of conflicted activities and the "today" column.
All data comes from the structures built in tripschedule.views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tripschedule.model import Activity, ConflictPair, DayCell, OverviewTimeline, Stop, WeekGrid

console = Console()

# display limits (data is never truncated, only its rendering)
WEEK_CELL_LIMIT = 3
OVERVIEW_STOP_LIMIT = 4


def _plural(n: int, one: str, many: str) -> str:
    return f"{n} {one if n == 1 else many}"


def format_time(dt: datetime) -> str:
    return dt.strftime("%I:%M %p").lstrip("0")


def format_time_range(activity: Activity) -> str:
    if activity.start_time is None:
        return ""
    text = format_time(activity.start_time)
    if activity.end_time is not None:
        text += f" - {format_time(activity.end_time)}"
    return text


def format_cost(activity: Activity) -> str:
    if not activity.estimated_cost:
        return ""
    amount = f"{activity.estimated_cost:.2f}".rstrip("0").rstrip(".")
    currency = activity.currency or "$"
    # codes like "EUR" read better with a gap, symbols like "$" without
    sep = " " if len(currency) > 1 else ""
    return f"{currency}{sep}{amount}"


def conflict_banner(conflicts: Sequence[ConflictPair]) -> Optional[str]:
    n = len(conflicts)
    if n == 0:
        return None
    return f"{n} scheduling conflict{'s' if n > 1 else ''} detected"


def _activity_label(activity: Activity, conflicted: bool, with_end: bool = True) -> str:
    name = escape(activity.name or "(unnamed)")
    if conflicted:
        name = f"[bold red]! {name}[/]"
    else:
        name = f"[bold]{name}[/]"

    bits = [name]
    if with_end:
        when = format_time_range(activity)
    else:
        when = format_time(activity.start_time) if activity.start_time else ""
    if when:
        bits.append(f"[cyan]{when}[/]")
    cost = format_cost(activity)
    if cost:
        bits.append(f"[green]{escape(cost)}[/]")
    return " | ".join(bits)


def _long_date(d) -> str:
    return f"{d:%b} {d.day}, {d.year}"


def _date_range(stop: Stop) -> str:
    return f"{_long_date(stop.arrival_date)} - {_long_date(stop.departure_date)}"


def print_conflict_banner(conflicts: Sequence[ConflictPair], out: Optional[Console] = None) -> None:
    out = out or console
    banner = conflict_banner(conflicts)
    if banner:
        out.print(f"[bold red]{banner}[/]")
        out.print("[red]Activities with overlapping times are marked with '!'[/]")


def print_daily(cell: DayCell, out: Optional[Console] = None) -> None:
    out = out or console

    if cell.no_stops:
        out.print("[bold]No stops on this date[/]")
        out.print("You're not visiting any destinations on this day.")
        return

    names = ", ".join(escape(s.destination_name) for s in cell.active_stops)
    out.print(f"[bold]Active destinations:[/] [magenta]{names}[/]")

    if not cell.entries:
        out.print("No activities scheduled for this day")
        return

    table = Table(title=f"Schedule ({_plural(len(cell.entries), 'activity', 'activities')})", box=box.SIMPLE)
    table.add_column("Time")
    table.add_column("Activity")
    table.add_column("Destination")
    table.add_column("Category")
    table.add_column("Cost", justify="right")

    for entry in cell.entries:
        act = entry.activity
        name = escape(act.name or "(unnamed)")
        table.add_row(
            format_time_range(act),
            f"[bold red]! {name}[/]" if entry.has_conflict else name,
            escape(entry.stop.destination_name),
            escape(act.category),
            escape(format_cost(act)),
        )
    out.print(table)


def _week_cell_text(cell: DayCell) -> str:
    lines: list[str] = []
    if cell.active_stops:
        lines.extend(f"[magenta]{escape(s.destination_name)}[/]" for s in cell.active_stops)
    if cell.entries:
        lines.append(f"[dim]Activities ({len(cell.entries)})[/]")
        for entry in cell.entries[:WEEK_CELL_LIMIT]:
            lines.append(_activity_label(entry.activity, entry.has_conflict, with_end=False))
        hidden = len(cell.entries) - WEEK_CELL_LIMIT
        if hidden > 0:
            lines.append(f"[dim]+{hidden} more activities[/]")
    if not lines:
        lines.append("[dim]Free day[/]")
    return "\n".join(lines)


def print_weekly(grid: WeekGrid, out: Optional[Console] = None) -> None:
    out = out or console

    table = Table(box=box.SIMPLE, show_lines=True)
    for cell in grid.days:
        header = f"{cell.day:%a} {cell.day:%b} {cell.day.day}"
        if cell.is_today:
            table.add_column(f"[bold blue]{header}\nToday[/]", style="on grey11")
        else:
            table.add_column(header)

    table.add_row(*[_week_cell_text(cell) for cell in grid.days])
    out.print(table)


def _print_trip_header(timeline: OverviewTimeline, out: Console) -> None:
    it = timeline.itinerary
    out.print(f"\n[bold]{escape(it.title)}[/]")
    out.print(
        f"Duration: [bold]{_plural(timeline.duration_days, 'day', 'days')}[/] | "
        f"Destinations: [bold]{timeline.destination_count}[/] | "
        f"Activities: [bold]{timeline.total_activities}[/]"
    )


def print_overview(
    timeline: OverviewTimeline, out: Optional[Console] = None, limit: Optional[int] = OVERVIEW_STOP_LIMIT
) -> None:
    """
    Trip summary plus one block per stop. `limit=None` lists every activity (timeline mode).
    """
    out = out or console

    if timeline.no_stops:
        out.print("[bold]No stops planned yet[/]")
        out.print("Add destinations to your itinerary to see the timeline overview.")
        return

    _print_trip_header(timeline, out)

    for summary in timeline.stops:
        stop = summary.stop
        out.print(
            f"\n[bold cyan]Stop {summary.position}[/] [bold]{escape(stop.destination_name)}[/] "
            f"({_date_range(stop)}, {_plural(summary.duration_days, 'day', 'days')})"
        )
        counts = _plural(summary.activity_count, "activity", "activities")
        if summary.conflict_count:
            counts += f" | [red]{summary.conflict_count} conflicts[/]"
        out.print(f"  {counts}")

        if not summary.activities:
            out.print("  [dim]No activities planned yet[/]")
            continue

        shown = summary.activities if limit is None else summary.activities[:limit]
        for act in shown:
            label = _activity_label(act, summary.is_conflicted(act))
            out.print(f"  - {label} [dim]({escape(act.category)})[/]")
        hidden = len(summary.activities) - len(shown)
        if hidden > 0:
            out.print(f"  [dim]+{hidden} more activities[/]")


def print_timeline(timeline: OverviewTimeline, out: Optional[Console] = None) -> None:
    print_overview(timeline, out=out, limit=None)


def print_conflicts(conflicts: Sequence[ConflictPair], stops: Sequence[Stop], out: Optional[Console] = None) -> None:
    out = out or console

    if not conflicts:
        out.print("No conflicts found.")
        return

    stop_names = {s.id: s.destination_name for s in stops}
    ordered = sorted(conflicts, key=lambda p: (p.first.start_time, p.second.start_time))

    table = Table(title=conflict_banner(conflicts), box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Destination")
    table.add_column("Date")
    table.add_column("Activity")
    table.add_column("")
    table.add_column("Activity")

    for i, pair in enumerate(ordered, start=1):
        a, b = pair.first, pair.second
        table.add_row(
            str(i),
            escape(stop_names.get(a.stop_id, a.stop_id)),
            a.start_time.date().isoformat(),
            f"{escape(a.name)} [cyan]{format_time_range(a)}[/]",
            "<->",
            f"{escape(b.name)} [cyan]{format_time_range(b)}[/]",
        )
    out.print(table)
