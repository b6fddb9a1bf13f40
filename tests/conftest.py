"""Shared pytest fixtures for all test suites."""

from datetime import date

import pytest

from tripsmith.config import Settings
from tripsmith.llm.client import ScriptedCompletionClient
from tripsmith.models import (
    Accommodation,
    Activity,
    ActivityType,
    Coordinates,
    DayPlan,
    Itinerary,
    Logistics,
    TravelLeg,
    TravelMode,
    TripInput,
)
from tripsmith.orchestration.orchestrator import ItineraryOrchestrator


class RecordingMetrics:
    """Metrics sink that records calls instead of touching Prometheus."""

    def __init__(self) -> None:
        self.latencies: list[tuple[str, str]] = []
        self.failures: list[tuple[str, str]] = []
        self.degraded: list[str] = []

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        self.latencies.append((operation, outcome))

    def inc_failure(self, operation: str, reason: str) -> None:
        self.failures.append((operation, reason))

    def inc_degraded(self, operation: str) -> None:
        self.degraded.append(operation)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openai_api_key=None,
        supabase_url=None,
        supabase_anon_key=None,
        local_store_path=tmp_path / "store.json",
    )


@pytest.fixture
def lisbon_logistics() -> Logistics:
    """Arrival, departure and stay for a Lisbon trip."""
    return Logistics(
        arrival=TravelLeg(mode=TravelMode.flight, location="LIS", time="09:30"),
        departure=TravelLeg(mode=TravelMode.flight, location="LIS", time="19:00"),
        accommodation=Accommodation(
            name="Casa do Largo",
            address="Largo do Carmo 5, Lisbon",
            coordinates=Coordinates(lat=38.7122, lng=-9.1406),
        ),
    )


@pytest.fixture
def lisbon_trip(lisbon_logistics: Logistics) -> TripInput:
    """Two-day Lisbon trip input."""
    return TripInput(
        destination="Lisbon",
        start_date=date(2026, 5, 10),
        duration_days=2,
        travelers=2,
        interests=["history", "food"],
        must_visit=["Castelo de S. Jorge"],
        logistics=lisbon_logistics,
    )


@pytest.fixture
def lisbon_itinerary(lisbon_logistics: Logistics) -> Itinerary:
    """Generated two-day Lisbon itinerary."""
    return Itinerary(
        id="trip-1",
        destination="Lisbon",
        title="Two days in Lisbon",
        total_budget=420,
        currency="EUR",
        logistics=lisbon_logistics,
        days=[
            DayPlan(
                date=date(2026, 5, 10),
                day_number=1,
                activities=[
                    Activity(id="arr1", time="10:00", title="Arrive at LIS", type=ActivityType.logistics),
                    Activity(
                        id="castle",
                        time="14:00",
                        title="Castle Tour",
                        type=ActivityType.culture,
                        location="Castelo de S. Jorge",
                        coordinates=Coordinates(lat=38.7139, lng=-9.1335),
                        transport_to_next="Walk: 15 min (Free) | Tram 28: 10 min (€3)",
                    ),
                    Activity(id="dinner", time="19:30", title="Fado dinner", type=ActivityType.food),
                ],
            ),
            DayPlan(
                date=date(2026, 5, 11),
                day_number=2,
                activities=[
                    Activity(id="belem", time="09:30", title="Belem Tower", type=ActivityType.culture),
                    Activity(id="dep1", time="17:00", title="Depart from LIS", type=ActivityType.logistics),
                ],
            ),
        ],
    )


@pytest.fixture
def scripted_client() -> ScriptedCompletionClient:
    """Completion client with an empty script."""
    return ScriptedCompletionClient()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def orchestrator(
    scripted_client: ScriptedCompletionClient, settings: Settings, metrics: RecordingMetrics
) -> ItineraryOrchestrator:
    """Orchestrator wired to the scripted client."""
    return ItineraryOrchestrator(scripted_client, settings=settings, metrics=metrics)
