"""USGS summary feed fetchers."""

from __future__ import annotations

import logging
from typing import Any

from requests import Session

from hazard_relay.config import USGS_FEED_URL
from hazard_relay.http import create_session
from hazard_relay.models import EarthquakeEvent, TsunamiAlert
from hazard_relay.severity import tsunami_message, tsunami_severity, wave_height_band

logger = logging.getLogger(__name__)


def _fetch_features(session: Session, url: str, timeout: float) -> list[dict[str, Any]]:
    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.json()["features"]


def parse_earthquakes(features: list[dict[str, Any]]) -> list[EarthquakeEvent]:
    """Map feed features to earthquake records, newest first.

    Missing magnitude, depth, significance and time default to 0, a missing
    place to "Unknown location", a missing URL to "". A felt count of 0 is
    reported as None, the same as an absent one.
    """
    earthquakes: list[EarthquakeEvent] = []
    for feat in features:
        props = feat["properties"]
        coords = feat["geometry"]["coordinates"]
        earthquakes.append(
            EarthquakeEvent(
                id=feat["id"],
                magnitude=props.get("mag") or 0,
                location=props.get("place") or "Unknown location",
                depth=(coords[2] if len(coords) > 2 else None) or 0,
                time=props.get("time") or 0,
                latitude=coords[1],
                longitude=coords[0],
                url=props.get("url") or "",
                tsunami=props.get("tsunami") == 1,
                felt=props.get("felt") or None,
                significance=props.get("sig") or 0,
            )
        )
    earthquakes.sort(key=lambda eq: eq.time, reverse=True)
    return earthquakes


def parse_tsunami_alerts(features: list[dict[str, Any]]) -> list[TsunamiAlert]:
    """Build tsunami alerts for features flagged ``tsunami == 1``, newest first."""
    alerts: list[TsunamiAlert] = []
    for feat in features:
        props = feat["properties"]
        if props.get("tsunami") != 1:
            continue
        mag = props.get("mag")
        place = props.get("place")
        alerts.append(
            TsunamiAlert(
                id=feat["id"],
                event=place or "Tsunami Event",
                severity=tsunami_severity(mag),
                areas=(place or "Unknown",),
                issue_time=props.get("time") or 0,
                # The summary feed carries no expiry information.
                expires=None,
                wave_height=wave_height_band(mag),
                message=tsunami_message(mag),
                url=props.get("url") or "",
            )
        )
    alerts.sort(key=lambda a: a.issue_time, reverse=True)
    return alerts


def fetch_earthquakes(
    url: str = USGS_FEED_URL,
    timeout: float = 30,
    session: Session | None = None,
) -> list[EarthquakeEvent]:
    """Fetch the feed and return its earthquake view.

    Returns an empty list on HTTP errors, network failures or malformed
    payloads (non-fatal).
    """
    if session is None:
        session = create_session()

    try:
        return parse_earthquakes(_fetch_features(session, url, timeout))
    except Exception:
        logger.warning("Failed to fetch earthquake data from %s", url, exc_info=True)
        return []


def fetch_tsunami_alerts(
    url: str = USGS_FEED_URL,
    timeout: float = 30,
    session: Session | None = None,
) -> list[TsunamiAlert]:
    """Fetch the feed and return its tsunami alert view.

    Returns an empty list on HTTP errors, network failures or malformed
    payloads (non-fatal).
    """
    if session is None:
        session = create_session()

    try:
        return parse_tsunami_alerts(_fetch_features(session, url, timeout))
    except Exception:
        logger.warning("Failed to fetch tsunami data from %s", url, exc_info=True)
        return []
