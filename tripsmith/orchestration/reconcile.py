"""Reconciliation of regenerated itineraries with prior user state.

One generic routine driven by explicit field-ownership tables:

- ``ai``: refreshed from the candidate on every regeneration
- ``user``: copied forward from the prior activity with the same id
- ``root``: itinerary-level fields only the user supplies; always copied
  forward from the previous itinerary

Locked prior activities are kept whole. Reconciliation never raises; mismatched
day counts or id drift degrade to defaults for unmatched activities.
"""

import logging
from copy import deepcopy
from enum import Enum
from typing import Any

from tripsmith.models.common import Feedback
from tripsmith.models.itinerary import Activity, DayPlan, Itinerary, ScheduleUpdate

logger = logging.getLogger(__name__)


class Ownership(str, Enum):
    """Who is authoritative for a field across regenerations."""

    identity = "identity"
    ai = "ai"
    user = "user"
    root = "root"


ACTIVITY_FIELD_OWNERSHIP: dict[str, Ownership] = {
    "id": Ownership.identity,
    "time": Ownership.ai,
    "title": Ownership.ai,
    "description": Ownership.ai,
    "location": Ownership.ai,
    "type": Ownership.ai,
    "duration_minutes": Ownership.ai,
    "estimated_cost": Ownership.ai,
    "price_detail": Ownership.ai,
    "coordinates": Ownership.ai,
    "transport_to_next": Ownership.ai,
    "maps_url": Ownership.ai,
    "image_url": Ownership.ai,
    "locked": Ownership.user,
    "mandatory": Ownership.user,
    "user_notes": Ownership.user,
    "feedback": Ownership.user,
    "actual_cost": Ownership.user,
    "selected_transport": Ownership.user,
}

ITINERARY_FIELD_OWNERSHIP: dict[str, Ownership] = {
    "id": Ownership.root,
    "destination": Ownership.ai,
    "title": Ownership.ai,
    "total_budget": Ownership.ai,
    "currency": Ownership.ai,
    "days": Ownership.ai,
    "logistics": Ownership.root,
    "wishlist": Ownership.root,
    "trip_settings": Ownership.root,
}

USER_FIELD_DEFAULTS: dict[str, Any] = {
    "locked": False,
    "mandatory": False,
    "user_notes": "",
    "feedback": Feedback.neutral,
    "actual_cost": None,
    "selected_transport": None,
}

USER_OWNED_FIELDS = tuple(
    name for name, owner in ACTIVITY_FIELD_OWNERSHIP.items() if owner is Ownership.user
)
ROOT_OWNED_FIELDS = tuple(
    name for name, owner in ITINERARY_FIELD_OWNERSHIP.items() if owner is Ownership.root
)


def _index_activities(itinerary: Itinerary) -> dict[str, Activity]:
    """Map activity id to activity across all days (first occurrence wins)."""
    lookup: dict[str, Activity] = {}
    for activity in itinerary.activities():
        lookup.setdefault(activity.id, activity)
    return lookup


def reconcile_activity(prior: Activity | None, candidate: Activity) -> Activity:
    """Merge one candidate activity against its prior version.

    Args:
        prior: Activity with the same id in the previous itinerary, if any
        candidate: Freshly generated activity

    Returns:
        New Activity; neither input is mutated
    """
    if prior is None:
        return candidate.model_copy(update=deepcopy(USER_FIELD_DEFAULTS), deep=True)

    if prior.locked:
        return prior.model_copy(deep=True)

    user_state = {name: deepcopy(getattr(prior, name)) for name in USER_OWNED_FIELDS}
    return candidate.model_copy(update=user_state, deep=True)


def reconcile(previous: Itinerary | None, candidate: Itinerary) -> Itinerary:
    """Merge a freshly parsed itinerary against the previous one.

    Args:
        previous: Itinerary before regeneration, or None on first generation
        candidate: Parsed completion output

    Returns:
        Merged itinerary: AI-owned fields from ``candidate``, user-owned
        activity fields and root-owned itinerary fields from ``previous``.
        Undated candidate days take the date of the previous day at the
        same position.
    """
    lookup = _index_activities(previous) if previous is not None else {}

    days: list[DayPlan] = []
    seen_ids: set[str] = set()
    for index, day in enumerate(candidate.days):
        activities = []
        for activity in day.activities:
            seen_ids.add(activity.id)
            activities.append(reconcile_activity(lookup.get(activity.id), activity))
        update: dict[str, Any] = {"activities": activities}
        if day.date is None and previous is not None and index < len(previous.days):
            update["date"] = previous.days[index].date
        days.append(day.model_copy(update=update))

    merged = candidate.model_copy(update={"days": days}, deep=True)
    if previous is None:
        return merged

    _log_dropped_state(previous, candidate, lookup, seen_ids)

    root_state = {name: deepcopy(getattr(previous, name)) for name in ROOT_OWNED_FIELDS}
    return merged.model_copy(update=root_state)


def _log_dropped_state(
    previous: Itinerary,
    candidate: Itinerary,
    lookup: dict[str, Activity],
    seen_ids: set[str],
) -> None:
    """Report prior state lost by the regeneration. Diagnostic only, no repair."""
    if len(candidate.days) < len(previous.days):
        logger.warning(
            f"Regeneration dropped {len(previous.days) - len(candidate.days)} day(s) "
            f"of itinerary {previous.id}"
        )

    dropped = [activity_id for activity_id in lookup if activity_id not in seen_ids]
    if dropped:
        locked = [activity_id for activity_id in dropped if lookup[activity_id].locked]
        logger.warning(
            f"Regeneration dropped {len(dropped)} activity id(s) of itinerary {previous.id}",
            extra={"structured": {"dropped_ids": dropped, "dropped_locked_ids": locked}},
        )


def merge_schedule_updates(
    activities: list[Activity], updates: list[ScheduleUpdate]
) -> list[Activity]:
    """Apply reschedule results onto the original activities by id.

    Only ``time`` and ``transport_to_next`` change; every other field is kept.
    Locked activities keep their time. Activities without an update are
    returned unchanged, and updates for unknown ids are ignored.
    """
    by_id = {update.id: update for update in updates}

    merged: list[Activity] = []
    for original in activities:
        update = by_id.get(original.id)
        if update is None:
            merged.append(original)
            continue

        changes: dict[str, Any] = {}
        if update.time is not None and not original.locked:
            changes["time"] = update.time
        if update.transport_to_next is not None:
            changes["transport_to_next"] = update.transport_to_next
        merged.append(original.model_copy(update=changes))

    return merged
