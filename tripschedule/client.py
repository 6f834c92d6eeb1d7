from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from tripschedule.model import Trip
from tripschedule.storage import TripDataError, resolve_timezone, trip_from_dict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------

TIMEOUT_SECONDS = 30


def _session(token: Optional[str]) -> requests.Session:
    s = requests.Session()
    s.headers["Accept"] = "application/json"
    if token:
        s.headers["Authorization"] = f"Bearer {token}"
    return s


def _payload(body: Any, key: str) -> Any:
    """
    The API wraps results either as {"data": ...} or under a resource key
    such as {"itinerary": ...} / {"stops": [...]}.
    """
    if not isinstance(body, dict):
        return body
    if "data" in body:
        return body["data"]
    return body.get(key)


def _get_json(session: requests.Session, url: str) -> Any:
    resp = session.get(url, timeout=TIMEOUT_SECONDS)
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def fetch_trip_data(base_url: str, itinerary_id: str, token: Optional[str] = None) -> dict[str, Any]:
    """
    Download itinerary, stops and all activities as one raw trip dict.

    Failing itinerary or stops requests raise requests.HTTPError.
    A failing activities request only skips that stop.
    Stop or activity entries that are not JSON objects raise TripDataError.
    """
    base = base_url.rstrip("/")
    session = _session(token)

    logger.info("FETCH itinerary %s", itinerary_id)
    itinerary = _payload(_get_json(session, f"{base}/itineraries/{itinerary_id}"), "itinerary") or {}

    stops_body = _get_json(session, f"{base}/itineraries/{itinerary_id}/stops")
    stops = _payload(stops_body, "stops") or []
    if not isinstance(stops, list):
        raise TripDataError(f"stops payload must be a list: {stops!r}")
    logger.info("Found %d stops", len(stops))

    activities: list[dict[str, Any]] = []
    for stop in stops:
        if not isinstance(stop, dict):
            raise TripDataError(f"stop entry must be an object: {stop!r}")
        stop_id = stop.get("id")
        url = f"{base}/itineraries/{itinerary_id}/stops/{stop_id}/activities"
        try:
            body = _get_json(session, url)
        except requests.RequestException as e:
            logger.warning("Failed to fetch activities for stop %s: %s", stop_id, e)
            continue
        for raw in _payload(body, "activities") or []:
            if not isinstance(raw, dict):
                raise TripDataError(f"activity entry must be an object: {raw!r}")
            # activities listed under a stop route may omit their stop id
            raw.setdefault("stopId", stop_id)
            activities.append(raw)

    if isinstance(itinerary, dict):
        itinerary = {k: v for k, v in itinerary.items() if k != "stops"}

    return {"itinerary": itinerary, "stops": stops, "activities": activities}


def fetch_trip(
    base_url: str,
    itinerary_id: str,
    token: Optional[str] = None,
    timezone: Optional[str] = None,
) -> Trip:
    data = fetch_trip_data(base_url, itinerary_id, token)
    return trip_from_dict(data, resolve_timezone(timezone))
