"""In-memory store for the latest feed results."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from hazard_relay.models import EarthquakeEvent, InsertUser, TsunamiAlert, User

logger = logging.getLogger(__name__)


class MemoryStore:
    """Holds the most recent earthquake and tsunami views.

    Every ``set_*`` call swaps in a new tuple, so a reader always sees one
    complete result and never a partially built one. An empty collection is
    indistinguishable from "never fetched": the read-through routes refetch
    whenever they find nothing stored.
    """

    def __init__(self) -> None:
        self._earthquakes: tuple[EarthquakeEvent, ...] = ()
        self._tsunami_alerts: tuple[TsunamiAlert, ...] = ()
        self._users: dict[str, User] = {}
        self.earthquakes_updated_at: datetime | None = None
        self.tsunami_alerts_updated_at: datetime | None = None

    def get_earthquakes(self) -> list[EarthquakeEvent]:
        return list(self._earthquakes)

    def set_earthquakes(self, earthquakes: Iterable[EarthquakeEvent]) -> None:
        self._earthquakes = tuple(earthquakes)
        self.earthquakes_updated_at = datetime.now(tz=timezone.utc)
        logger.debug("Stored %d earthquakes", len(self._earthquakes))

    def get_tsunami_alerts(self) -> list[TsunamiAlert]:
        return list(self._tsunami_alerts)

    def set_tsunami_alerts(self, alerts: Iterable[TsunamiAlert]) -> None:
        self._tsunami_alerts = tuple(alerts)
        self.tsunami_alerts_updated_at = datetime.now(tz=timezone.utc)
        logger.debug("Stored %d tsunami alerts", len(self._tsunami_alerts))

    # User records are not reachable from any route yet.

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, insert_user: InsertUser) -> User:
        user = User(
            id=str(uuid.uuid4()),
            username=insert_user.username,
            password=insert_user.password,
        )
        self._users[user.id] = user
        return user
