"""
iCalendar (.ics) export.

We convert the timed activities of a trip into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Untimed activities are skipped. Activities with a start but no end become
start-only events. Conflicting activities are tagged with the CONFLICT category.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence

from tripschedule.conflicts import conflicted_activity_ids
from tripschedule.model import Activity, ConflictPair, Stop


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(dt: datetime) -> str:
    """
    Floating local time 'YYYYMMDDTHHMMSS'.
    """
    return dt.strftime("%Y%m%dT%H%M%S")


def export_activities_to_ics(
    activities: Sequence[Activity],
    stops: Iterable[Stop],
    out_path: str | Path,
    conflicts: Iterable[ConflictPair] = (),
    calendar_name: str = "",
) -> int:
    """
    Export activities to an .ics file. Returns number of exported events.

    Members of `conflicts` (as computed by views.build_schedule) get the CONFLICT category.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    stop_by_id = {s.id: s for s in stops}
    conflicted = conflicted_activity_ids(conflicts)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//TripSchedule//EN")
    lines.append("CALSCALE:GREGORIAN")
    if calendar_name.strip():
        lines.append(f"X-WR-CALNAME:{_ics_escape(calendar_name.strip())}")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for act in activities:
        if act.start_time is None:
            continue

        stop = stop_by_id.get(act.stop_id)
        summary = act.name.strip() or "Activity"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(act.id)}@tripschedule")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{_dt_local(act.start_time)}")
        if act.end_time is not None:
            lines.append(f"DTEND:{_dt_local(act.end_time)}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if stop is not None and stop.destination_name:
            lines.append(f"LOCATION:{_ics_escape(stop.destination_name)}")
        if act.description:
            lines.append(f"DESCRIPTION:{_ics_escape(act.description)}")

        categories = [c for c in [act.category.strip()] if c]
        if act.id in conflicted:
            categories.append("CONFLICT")
        if categories:
            lines.append(f"CATEGORIES:{','.join(_ics_escape(c) for c in categories)}")
        if act.booking_url:
            lines.append(f"URL:{act.booking_url}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
