"""
Trip data loading and saving.

A trip file is the JSON hand-off between the planner backend and this tool:

    {
      "itinerary":  {"id": ..., "title": ..., "startDate": "2024-06-01", "endDate": "2024-06-10"},
      "stops":      [{"id": ..., "itineraryId": ..., "destinationName": ..., "arrivalDate": ..., ...}],
      "activities": [{"id": ..., "stopId": ..., "name": ..., "category": ..., "startTime": ..., ...}]
    }

Keys use the API's camelCase names; snake_case names are accepted as well.

Parsing rules:
- itinerary/stop dates are calendar dates, read from the "YYYY-MM-DD" prefix
  (so "2024-06-02T00:00:00.000Z" stays June 2 in every timezone)
- activity timestamps are ISO-8601; timezone-aware values are converted to one
  timezone and made naive so all comparisons use a single interpretation
- a missing or empty timestamp stays None
- anything malformed raises TripDataError
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tripschedule.config import default_trip_path
from tripschedule.model import Activity, Itinerary, Stop, Trip

logger = logging.getLogger(__name__)


class TripDataError(ValueError):
    """Raised when a trip file or payload cannot be turned into model objects."""


def _get(raw: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


def _require(raw: dict[str, Any], camel: str, snake: str, what: str) -> Any:
    value = _get(raw, camel, snake)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise TripDataError(f"{what}: missing field {camel!r}")
    return value


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Turn an IANA name into a tzinfo. None means "system local time".
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TripDataError(f"Unknown timezone: {name!r}") from e


def parse_calendar_date(value: Any) -> date:
    """
    Parse a date-only value. Time of day (if any) is ignored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise TripDataError(f"Invalid date: {value!r}") from e


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into a naive datetime in `tz` (system local if None).
    Returns None for absent values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        # fromisoformat on older interpreters does not accept a trailing Z
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as e:
            raise TripDataError(f"Invalid timestamp: {value!r}") from e

    if dt.tzinfo is None:
        return dt
    return dt.astimezone(tz).replace(tzinfo=None)


def _parse_cost(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise TripDataError(f"Invalid estimated cost: {value!r}") from e


def parse_itinerary(raw: dict[str, Any]) -> Itinerary:
    return Itinerary(
        id=str(_require(raw, "id", "id", "itinerary")),
        title=str(_get(raw, "title", "title", "") or ""),
        start_date=parse_calendar_date(_require(raw, "startDate", "start_date", "itinerary")),
        end_date=parse_calendar_date(_require(raw, "endDate", "end_date", "itinerary")),
        description=_opt_str(_get(raw, "description", "description")),
        status=str(_get(raw, "status", "status", "draft") or "draft"),
    )


def parse_stop(raw: dict[str, Any], itinerary_id: str = "") -> Stop:
    if not isinstance(raw, dict):
        raise TripDataError(f"stop entry must be an object: {raw!r}")
    sid = str(_require(raw, "id", "id", "stop"))
    order = _get(raw, "orderIndex", "order_index", 0)
    try:
        order_index = int(order or 0)
    except (TypeError, ValueError) as e:
        raise TripDataError(f"stop {sid}: invalid order index {order!r}") from e

    return Stop(
        id=sid,
        itinerary_id=str(_get(raw, "itineraryId", "itinerary_id", itinerary_id) or itinerary_id),
        destination_name=str(_get(raw, "destinationName", "destination_name", "") or ""),
        arrival_date=parse_calendar_date(_require(raw, "arrivalDate", "arrival_date", f"stop {sid}")),
        departure_date=parse_calendar_date(_require(raw, "departureDate", "departure_date", f"stop {sid}")),
        order_index=order_index,
        destination_code=_opt_str(_get(raw, "destinationCode", "destination_code")),
    )


def parse_activity(raw: dict[str, Any], tz: Optional[tzinfo] = None) -> Activity:
    if not isinstance(raw, dict):
        raise TripDataError(f"activity entry must be an object: {raw!r}")
    aid = str(_require(raw, "id", "id", "activity"))
    return Activity(
        id=aid,
        stop_id=str(_require(raw, "stopId", "stop_id", f"activity {aid}")),
        name=str(_get(raw, "name", "name", "") or ""),
        category=str(_get(raw, "category", "category", "") or ""),
        start_time=parse_timestamp(_get(raw, "startTime", "start_time"), tz),
        end_time=parse_timestamp(_get(raw, "endTime", "end_time"), tz),
        estimated_cost=_parse_cost(_get(raw, "estimatedCost", "estimated_cost")),
        currency=_opt_str(_get(raw, "currency", "currency")),
        description=_opt_str(_get(raw, "description", "description")),
        booking_url=_opt_str(_get(raw, "bookingUrl", "booking_url")),
    )


def trip_from_dict(data: Any, tz: Optional[tzinfo] = None) -> Trip:
    if not isinstance(data, dict):
        raise TripDataError("Trip data must be a JSON object")

    raw_itinerary = data.get("itinerary")
    if not isinstance(raw_itinerary, dict):
        raise TripDataError("Trip data has no 'itinerary' object")
    itinerary = parse_itinerary(raw_itinerary)

    raw_stops = data.get("stops") or []
    raw_activities = data.get("activities") or []
    if not isinstance(raw_stops, list) or not isinstance(raw_activities, list):
        raise TripDataError("'stops' and 'activities' must be lists")

    stops = [parse_stop(s, itinerary.id) for s in raw_stops]
    activities = [parse_activity(a, tz) for a in raw_activities]

    logger.debug("Parsed trip %s: %d stops, %d activities", itinerary.id, len(stops), len(activities))
    return Trip(itinerary=itinerary, stops=stops, activities=activities)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


def trip_to_dict(trip: Trip) -> dict[str, Any]:
    it = trip.itinerary
    return {
        "itinerary": {
            "id": it.id,
            "title": it.title,
            "description": it.description,
            "status": it.status,
            "startDate": it.start_date.isoformat(),
            "endDate": it.end_date.isoformat(),
        },
        "stops": [
            {
                "id": s.id,
                "itineraryId": s.itinerary_id,
                "destinationName": s.destination_name,
                "destinationCode": s.destination_code,
                "arrivalDate": s.arrival_date.isoformat(),
                "departureDate": s.departure_date.isoformat(),
                "orderIndex": s.order_index,
            }
            for s in trip.stops
        ],
        "activities": [
            {
                "id": a.id,
                "stopId": a.stop_id,
                "name": a.name,
                "category": a.category,
                "description": a.description,
                "startTime": _iso(a.start_time),
                "endTime": _iso(a.end_time),
                "estimatedCost": a.estimated_cost,
                "currency": a.currency,
                "bookingUrl": a.booking_url,
            }
            for a in trip.activities
        ],
    }


def load_trip(path: str | Path | None = None, tz: Optional[tzinfo] = None) -> Trip:
    """
    Load a trip file. Raises TripDataError if the file is missing or invalid.
    """
    trip_path = Path(path) if path is not None else default_trip_path()

    try:
        data = json.loads(trip_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise TripDataError(f"Trip file not found: {trip_path}") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise TripDataError(f"Cannot read trip file {trip_path}: {e}") from e

    return trip_from_dict(data, tz)


def save_trip(trip: Trip, path: str | Path | None = None) -> Path:
    """
    Write a trip file, creating parent directories if needed.
    """
    trip_path = Path(path) if path is not None else default_trip_path()
    trip_path.parent.mkdir(parents=True, exist_ok=True)
    trip_path.write_text(json.dumps(trip_to_dict(trip), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Saved trip %s to %s", trip.itinerary.id, trip_path)
    return trip_path
