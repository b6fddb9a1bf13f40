"""In-memory implementations of repository interfaces."""

from tripsmith.db.repositories import CloudUser, ItineraryRecord
from tripsmith.models.itinerary import Itinerary


class InMemoryRecordStore:
    """In-memory RecordStore and AuthProvider."""

    def __init__(self, user: CloudUser | None = None) -> None:
        # Insertion order is save order; an upsert moves the row to the end
        self._records: dict[str, ItineraryRecord] = {}
        self.user = user

    def current_user(self) -> CloudUser | None:
        return self.user

    def upsert_itinerary(self, itinerary: Itinerary, user_id: str) -> None:
        """Insert or replace a saved itinerary."""
        if not itinerary.id:
            raise ValueError("Itinerary has no id")
        self._records.pop(itinerary.id, None)
        self._records[itinerary.id] = ItineraryRecord.from_itinerary(itinerary, user_id)

    def list_itineraries(self, user_id: str) -> list[Itinerary]:
        """List the user's itineraries, newest first."""
        return [
            Itinerary.model_validate(record.trip_data)
            for record in reversed(self._records.values())
            if record.user_id == user_id
        ]


class InMemoryKeyValueStore:
    """In-memory KeyValueStore."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
