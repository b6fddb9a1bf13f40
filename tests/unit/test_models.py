"""Tests for trip and itinerary models."""

from datetime import date

import pytest
from pydantic import ValidationError

from tripsmith.models import BudgetTier, Itinerary, Logistics, TripInput, WishlistItem, WishlistKind


def test_trip_input_defaults(lisbon_logistics: Logistics) -> None:
    trip = TripInput(
        destination="Porto", start_date=date(2026, 6, 1), duration_days=3, logistics=lisbon_logistics
    )

    assert trip.budget == BudgetTier.moderate
    assert trip.travelers == 1
    assert trip.interests == []


def test_trip_input_dedupes_interests(lisbon_trip: TripInput) -> None:
    trip = lisbon_trip.model_copy(update={"interests": []})
    trip = TripInput.model_validate({**trip.model_dump(), "interests": ["food", " food", "art", ""]})

    assert trip.interests == ["food", "art"]


@pytest.mark.parametrize(
    "overrides",
    [{"destination": ""}, {"duration_days": 0}, {"travelers": 0}, {"start_date": "soon"}],
)
def test_trip_input_rejects_invalid(lisbon_trip: TripInput, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        TripInput.model_validate({**lisbon_trip.model_dump(), **overrides})


def test_trip_settings_echo(lisbon_trip: TripInput) -> None:
    settings = lisbon_trip.settings()

    assert settings.start_date == date(2026, 5, 10)
    assert settings.duration_days == 2
    assert settings.must_visit == ["Castelo de S. Jorge"]


def test_find_activity(lisbon_itinerary: Itinerary) -> None:
    assert lisbon_itinerary.find_activity("belem").title == "Belem Tower"
    assert lisbon_itinerary.find_activity("missing") is None
    assert [a.id for a in lisbon_itinerary.activities()] == ["arr1", "castle", "dinner", "belem", "dep1"]


def test_wishlist_item_defaults() -> None:
    item = WishlistItem(content="Tiny bar in Alfama")

    assert item.id
    assert item.kind == WishlistKind.text
    assert item.analysis is None
