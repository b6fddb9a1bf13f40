"""Saved-plan history: cloud for signed-in users, local blob otherwise."""

import logging

from pydantic import TypeAdapter, ValidationError

from tripsmith.config import Settings, get_settings
from tripsmith.db.local import JsonFileKeyValueStore
from tripsmith.db.repositories import AuthProvider, CloudUser, KeyValueStore, RecordStore
from tripsmith.db.supabase_store import create_supabase_store
from tripsmith.errors import StorageUnavailableError
from tripsmith.models.itinerary import Itinerary

logger = logging.getLogger(__name__)

_ITINERARY_LIST = TypeAdapter(list[Itinerary])


class ItineraryHistory:
    """List of saved itineraries, newest first, unique by id."""

    def __init__(
        self,
        local: KeyValueStore,
        namespace: str,
        records: RecordStore | None = None,
        auth: AuthProvider | None = None,
    ) -> None:
        """Initialize history.

        Args:
            local: Local store holding the whole list as one JSON blob
            namespace: Key of that blob
            records: Optional cloud store
            auth: Source of the signed-in user for the cloud store
        """
        self.local = local
        self.namespace = namespace
        self.records = records
        self.auth = auth
        self.plans: list[Itinerary] = []

    def current_user(self) -> CloudUser | None:
        if self.records is None or self.auth is None:
            return None
        return self.auth.current_user()

    def _load_local(self) -> list[Itinerary]:
        blob = self.local.get(self.namespace)
        if not blob:
            return []
        try:
            return _ITINERARY_LIST.validate_json(blob)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable local history: {e.error_count()} error(s)")
            return []

    def load(self) -> list[Itinerary]:
        """Load saved plans: the local blob, replaced by cloud plans when signed in."""
        self.plans = self._load_local()

        user = self.current_user()
        if user is not None and self.records is not None:
            try:
                self.plans = self.records.list_itineraries(user.id)
            except Exception as e:
                logger.error(f"Failed to load cloud plans: {e}")

        return list(self.plans)

    def _remember(self, itinerary: Itinerary) -> list[Itinerary]:
        self.plans = [itinerary, *(p for p in self.plans if p.id != itinerary.id)]
        return self.plans

    def save(self, itinerary: Itinerary) -> None:
        """Auto-save after a change. Cloud failures are logged, not raised."""
        updated = self._remember(itinerary)

        user = self.current_user()
        if user is not None and self.records is not None:
            try:
                self.records.upsert_itinerary(itinerary, user.id)
            except Exception as e:
                logger.error(f"Cloud save failed for itinerary {itinerary.id}: {e}")
            return

        self.local.set(self.namespace, _ITINERARY_LIST.dump_json(updated).decode("utf-8"))

    def save_to_cloud(self, itinerary: Itinerary) -> None:
        """Explicit cloud save.

        Raises:
            StorageUnavailableError: No cloud store configured or no user signed in
        """
        if self.records is None:
            raise StorageUnavailableError("Cloud storage is not configured")
        user = self.current_user()
        if user is None:
            raise StorageUnavailableError("Sign in to save to the cloud")

        self.records.upsert_itinerary(itinerary, user.id)
        self._remember(itinerary)


def build_history(settings: Settings | None = None) -> ItineraryHistory:
    """History wired to the configured local file and optional Supabase project."""
    settings = settings or get_settings()
    key = settings.supabase_anon_key.get_secret_value() if settings.supabase_anon_key else None
    store = create_supabase_store(settings.supabase_url, key, table=settings.itineraries_table)
    return ItineraryHistory(
        local=JsonFileKeyValueStore(settings.local_store_path),
        namespace=settings.local_store_namespace,
        records=store,
        auth=store,
    )
