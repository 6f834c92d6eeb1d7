"""
Runtime settings read from environment variables.

    TRIPSCHEDULE_TRIP       path of the trip JSON file
    TRIPSCHEDULE_API_URL    base URL of the planner REST API (".../api")
    TRIPSCHEDULE_API_TOKEN  bearer token for the API
    TRIPSCHEDULE_TZ         IANA timezone used to interpret activity timestamps

CLI flags take precedence over these values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "http://localhost:3001/api"


def default_trip_path() -> Path:
    """
    Default trip file inside the package data folder.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "trip.json"


@dataclass
class Settings:
    trip_path: Path
    api_url: str
    api_token: Optional[str]
    timezone: Optional[str]


def load_settings() -> Settings:
    trip = os.getenv("TRIPSCHEDULE_TRIP", "").strip()
    token = os.getenv("TRIPSCHEDULE_API_TOKEN", "").strip()
    tz = os.getenv("TRIPSCHEDULE_TZ", "").strip()
    return Settings(
        trip_path=Path(trip) if trip else default_trip_path(),
        api_url=os.getenv("TRIPSCHEDULE_API_URL", DEFAULT_API_URL).strip().rstrip("/"),
        api_token=token or None,
        timezone=tz or None,
    )
