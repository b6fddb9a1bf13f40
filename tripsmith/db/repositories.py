"""Repository protocol interfaces for saved itineraries."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from tripsmith.models.itinerary import Itinerary


@dataclass
class ItineraryRecord:
    """Cloud row for one saved itinerary. ``trip_data`` is the full itinerary."""

    id: str
    user_id: str
    destination: str
    trip_data: dict[str, Any]
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_itinerary(cls, itinerary: Itinerary, user_id: str) -> "ItineraryRecord":
        return cls(
            id=itinerary.id,
            user_id=user_id,
            destination=itinerary.destination,
            trip_data=itinerary.model_dump(mode="json"),
        )

    def to_row(self) -> dict[str, Any]:
        """Serialize for the ``itineraries`` table."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "destination": self.destination,
            "trip_data": self.trip_data,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class CloudUser:
    """Authenticated user of the cloud store."""

    id: str
    email: str | None = None


class RecordStore(Protocol):
    """Cloud store of saved itineraries, keyed by itinerary id."""

    def upsert_itinerary(self, itinerary: Itinerary, user_id: str) -> None:
        """Insert or replace the row for ``itinerary.id``.

        Args:
            itinerary: Itinerary to save (must have an id)
            user_id: Owner of the row
        """
        ...

    def list_itineraries(self, user_id: str) -> list[Itinerary]:
        """List the user's itineraries, newest first."""
        ...


class AuthProvider(Protocol):
    """Source of the current authenticated user."""

    def current_user(self) -> CloudUser | None:
        """Return the signed-in user, or None."""
        ...


class KeyValueStore(Protocol):
    """Local string store (one JSON blob per key)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
