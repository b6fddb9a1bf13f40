"""Supabase-backed itinerary store (optional cloud persistence)."""

import logging

from supabase import Client, create_client

from tripsmith.db.repositories import CloudUser, ItineraryRecord
from tripsmith.models.itinerary import Itinerary

logger = logging.getLogger(__name__)


class SupabaseRecordStore:
    """RecordStore and AuthProvider over a Supabase project.

    Rows live in one table (default ``itineraries``) with columns
    ``id, user_id, destination, trip_data, created_at``. Row-level security on
    the project restricts reads to the signed-in user; the ``user_id`` filter
    here mirrors it.
    """

    def __init__(self, client: Client, table: str = "itineraries") -> None:
        self.client = client
        self.table = table

    def current_user(self) -> CloudUser | None:
        """Return the user of the current auth session, if any."""
        session = self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return CloudUser(id=str(session.user.id), email=session.user.email)

    def upsert_itinerary(self, itinerary: Itinerary, user_id: str) -> None:
        """Insert or replace the row for ``itinerary.id``."""
        if not itinerary.id:
            raise ValueError("Itinerary has no id")
        row = ItineraryRecord.from_itinerary(itinerary, user_id).to_row()
        self.client.table(self.table).upsert(row).execute()
        logger.info(f"Saved itinerary {itinerary.id} to cloud")

    def list_itineraries(self, user_id: str) -> list[Itinerary]:
        """List the user's itineraries, newest first."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Itinerary.model_validate(row["trip_data"]) for row in response.data or []]


def create_supabase_store(
    url: str | None, key: str | None, table: str = "itineraries"
) -> SupabaseRecordStore | None:
    """Connect to Supabase when configured.

    Returns:
        Store, or None when url/key are missing or the client cannot be created
    """
    if not url or not key:
        return None
    try:
        client = create_client(url, key)
    except Exception as e:
        logger.error(f"Failed to init Supabase client: {e}", extra={"error_type": type(e).__name__})
        return None
    return SupabaseRecordStore(client, table=table)
