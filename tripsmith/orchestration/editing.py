"""User edits applied as new itinerary snapshots. Inputs are never mutated."""

from typing import Any

from tripsmith.models.itinerary import Activity, Itinerary, WishlistItem


def update_activity(
    itinerary: Itinerary, day_index: int, activity_id: str, updates: dict[str, Any]
) -> Itinerary:
    """Apply field updates to one activity of one day.

    Args:
        itinerary: Current itinerary snapshot
        day_index: 0-based index into ``itinerary.days``
        activity_id: Activity to update
        updates: Field name to new value

    Returns:
        New itinerary snapshot

    Raises:
        ValueError: If an update names an unknown field or tries to change the id
        IndexError: If day_index is out of range
    """
    unknown = [name for name in updates if name not in Activity.model_fields]
    if unknown:
        raise ValueError(f"Unknown activity field(s): {', '.join(sorted(unknown))}")
    if "id" in updates:
        raise ValueError("Activity id cannot be changed")

    day = itinerary.days[day_index]
    activities = [
        Activity.model_validate({**a.model_dump(), **updates}) if a.id == activity_id else a
        for a in day.activities
    ]
    return replace_day_activities(itinerary, day_index, activities)


def replace_day_activities(
    itinerary: Itinerary, day_index: int, activities: list[Activity]
) -> Itinerary:
    """Replace the ordered activity list of one day (e.g. after a reorder)."""
    if not 0 <= day_index < len(itinerary.days):
        raise IndexError(f"Day index {day_index} out of range")

    days = list(itinerary.days)
    days[day_index] = days[day_index].model_copy(update={"activities": list(activities)})
    return itinerary.model_copy(update={"days": days})


def add_wishlist_item(itinerary: Itinerary, item: WishlistItem) -> Itinerary:
    """Append an item to the wishlist."""
    return itinerary.model_copy(update={"wishlist": [*itinerary.wishlist, item]})


def schedule_start_location(itinerary: Itinerary) -> str:
    """Where a day's schedule starts: the accommodation, else the destination."""
    if itinerary.logistics and itinerary.logistics.accommodation.address:
        return itinerary.logistics.accommodation.address
    return itinerary.destination
