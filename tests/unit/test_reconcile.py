"""Tests for reconciliation of regenerated itineraries with user state."""

import logging
from datetime import date

import pytest

from tripsmith.models import Activity, DayPlan, Feedback, Itinerary, ScheduleUpdate, WishlistItem
from tripsmith.orchestration.reconcile import (
    ACTIVITY_FIELD_OWNERSHIP,
    ITINERARY_FIELD_OWNERSHIP,
    USER_FIELD_DEFAULTS,
    USER_OWNED_FIELDS,
    merge_schedule_updates,
    reconcile,
    reconcile_activity,
)


def _candidate(*days: list[Activity]) -> Itinerary:
    return Itinerary(
        destination="Lisbon",
        title="Regenerated",
        days=[
            DayPlan(date=date(2026, 5, 10 + i), day_number=i + 1, activities=list(acts))
            for i, acts in enumerate(days)
        ],
    )


def test_every_activity_field_has_an_owner() -> None:
    """Test that the ownership table covers every Activity field."""
    assert set(ACTIVITY_FIELD_OWNERSHIP) == set(Activity.model_fields)


def test_every_itinerary_field_has_an_owner() -> None:
    assert set(ITINERARY_FIELD_OWNERSHIP) == set(Itinerary.model_fields)


def test_user_defaults_cover_user_fields() -> None:
    assert set(USER_FIELD_DEFAULTS) == set(USER_OWNED_FIELDS)


def test_unlocked_prior_copies_user_fields_only() -> None:
    """Test that user state is carried forward while AI content is refreshed."""
    prior = Activity(
        id="a",
        time="10:00",
        title="Old title",
        user_notes="bring cash",
        feedback=Feedback.like,
        actual_cost=12.0,
        mandatory=True,
        selected_transport="Walk: 5 min",
    )
    candidate = Activity(id="a", time="11:00", title="New title", feedback=Feedback.dislike)

    merged = reconcile_activity(prior, candidate)

    assert merged.time == "11:00"
    assert merged.title == "New title"
    assert merged.user_notes == "bring cash"
    assert merged.feedback == Feedback.like
    assert merged.actual_cost == 12.0
    assert merged.mandatory is True
    assert merged.selected_transport == "Walk: 5 min"


def test_locked_prior_is_kept_whole() -> None:
    """Test that a locked prior activity replaces the candidate entirely."""
    prior = Activity(id="a", time="14:00", title="Castle Tour", locked=True)
    candidate = Activity(id="a", time="16:00", title="Castle visit", locked=False)

    merged = reconcile_activity(prior, candidate)

    assert merged == prior
    assert merged is not prior


def test_new_activity_gets_defaults() -> None:
    """Test that candidate-only activities get user defaults even if the model set them."""
    candidate = Activity(id="new", title="Pasteis", locked=True, user_notes="hallucinated")

    merged = reconcile_activity(None, candidate)

    assert merged.locked is False
    assert merged.user_notes == ""
    assert merged.feedback == Feedback.neutral
    assert merged.title == "Pasteis"


def test_reconcile_first_generation_passthrough() -> None:
    """Test that without a previous itinerary every activity gets defaults."""
    candidate = _candidate([Activity(id="a", user_notes="x")])

    merged = reconcile(None, candidate)

    assert merged.days[0].activities[0].user_notes == ""
    assert merged.title == "Regenerated"


def test_reconcile_copies_root_fields(lisbon_itinerary: Itinerary) -> None:
    """Test that id, logistics and wishlist come from the previous itinerary."""
    previous = lisbon_itinerary.model_copy(
        update={"wishlist": [WishlistItem(content="Time Out Market")]}
    )
    candidate = _candidate([Activity(id="castle", title="Castle visit")])

    merged = reconcile(previous, candidate)

    assert merged.id == previous.id
    assert merged.logistics == previous.logistics
    assert merged.wishlist == previous.wishlist
    assert merged.title == "Regenerated"


def test_reconcile_matches_ids_across_days(lisbon_itinerary: Itinerary) -> None:
    """Test that an activity moved to another day keeps its user state."""
    previous = lisbon_itinerary.model_copy(deep=True)
    previous.days[1].activities[0].user_notes = "sunrise"
    candidate = _candidate([Activity(id="belem", time="08:00")], [])

    merged = reconcile(previous, candidate)

    assert merged.days[0].activities[0].user_notes == "sunrise"
    assert merged.days[0].activities[0].time == "08:00"


def test_reconcile_fills_undated_days_from_previous(lisbon_itinerary: Itinerary) -> None:
    """Test that undated candidate days take the date of the same previous day."""
    candidate = Itinerary(
        destination="Lisbon",
        days=[
            DayPlan(day_number=1, activities=[Activity(id="castle")]),
            DayPlan(date=date(2026, 6, 1), day_number=2),
            DayPlan(day_number=3),
        ],
    )

    merged = reconcile(lisbon_itinerary, candidate)

    assert [d.date for d in merged.days] == [date(2026, 5, 10), date(2026, 6, 1), None]


def test_reconcile_does_not_mutate_inputs(lisbon_itinerary: Itinerary) -> None:
    previous = lisbon_itinerary.model_copy(deep=True)
    previous.days[0].activities[1].locked = True
    snapshot = previous.model_copy(deep=True)
    candidate = _candidate([Activity(id="castle", time="18:00")])
    candidate_snapshot = candidate.model_copy(deep=True)

    merged = reconcile(previous, candidate)
    merged.days[0].activities[0].user_notes = "changed"

    assert previous == snapshot
    assert candidate == candidate_snapshot


def test_reconcile_logs_dropped_days_and_ids(
    lisbon_itinerary: Itinerary, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that lost days and activity ids are reported, not repaired."""
    candidate = _candidate([Activity(id="castle")])

    with caplog.at_level(logging.WARNING, logger="tripsmith.orchestration.reconcile"):
        merged = reconcile(lisbon_itinerary, candidate)

    assert len(merged.days) == 1
    assert "dropped 1 day(s)" in caplog.text
    dropped = [r for r in caplog.records if hasattr(r, "structured")]
    assert dropped
    assert "belem" in dropped[0].structured["dropped_ids"]


def test_merge_schedule_updates_by_id() -> None:
    """Test that only time and transport change, matched by id."""
    activities = [
        Activity(id="a", time="09:00", title="A", user_notes="keep"),
        Activity(id="b", time="10:00", title="B", transport_to_next="Walk: 5 min"),
        Activity(id="c", time="11:00", title="C"),
    ]
    updates = [
        ScheduleUpdate(id="b", time="12:00"),
        ScheduleUpdate(id="a", time="09:30", transport_to_next="Taxi: 10 min"),
        ScheduleUpdate(id="zzz", time="23:00"),
    ]

    merged = merge_schedule_updates(activities, updates)

    assert [a.id for a in merged] == ["a", "b", "c"]
    assert merged[0].time == "09:30"
    assert merged[0].transport_to_next == "Taxi: 10 min"
    assert merged[0].user_notes == "keep"
    assert merged[1].time == "12:00"
    assert merged[1].transport_to_next == "Walk: 5 min"
    assert merged[2] == activities[2]


def test_merge_schedule_updates_keeps_locked_time() -> None:
    """Test that a locked activity keeps its time but accepts new transport."""
    activities = [Activity(id="a", time="14:00", locked=True)]
    updates = [ScheduleUpdate(id="a", time="16:00", transport_to_next="Metro: 8 min")]

    merged = merge_schedule_updates(activities, updates)

    assert merged[0].time == "14:00"
    assert merged[0].transport_to_next == "Metro: 8 min"
