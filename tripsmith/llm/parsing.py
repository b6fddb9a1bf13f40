"""Parse sanitized model output into validated models.

Shape validation only. Business content (coordinates, booking links) is not
checked and passes through as the model produced it.
"""

import json
import logging
from datetime import date, timedelta
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from tripsmith.errors import MalformedResponseError
from tripsmith.models.common import Feedback
from tripsmith.models.itinerary import DayPlan, Itinerary, ScheduleUpdate, WishlistAnalysis

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Never authoritative when coming from the completion service
_ROOT_OWNED_KEYS = ("logistics", "wishlist", "trip_settings", "tripSettings")


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}", raw_text=text) from e


def parse_payload(text: str, shape: type[T] | TypeAdapter[T]) -> T:
    """Parse a narrow payload (e.g. a list of schedule updates).

    Args:
        text: Sanitized model output
        shape: Pydantic model class or TypeAdapter describing the payload

    Returns:
        Validated payload

    Raises:
        MalformedResponseError: If the text is not JSON or does not match shape
    """
    data = _load_json(text)
    adapter = shape if isinstance(shape, TypeAdapter) else TypeAdapter(shape)
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Response does not match expected shape: {e.error_count()} error(s)",
            raw_text=text,
        ) from e


def parse_itinerary(text: str, start_date: date | None = None) -> Itinerary:
    """Parse a full itinerary and apply first-parse defaults.

    Args:
        text: Sanitized model output
        start_date: Trip start, used to date days the model left undated

    Normalization:
        - activities without an id get a fresh one
        - lock and mandatory flags default to False when absent
        - feedback is always reset to neutral
        - day numbers missing or non-positive become the 1-based position
        - missing or non-ISO day dates become start_date plus the day offset
          (left empty without a start_date)
        - unreadable costs, durations and coordinates fall back to defaults
        - logistics, wishlist and trip settings in the payload are ignored

    Raises:
        MalformedResponseError: Invalid JSON, not an object, or missing
            destination/days
    """
    data = _load_json(text)
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(data).__name__}", raw_text=text
        )

    missing = [key for key in ("destination", "days") if data.get(key) in (None, "")]
    if missing:
        raise MalformedResponseError(
            f"Missing required field(s): {', '.join(missing)}", raw_text=text
        )

    payload = {k: v for k, v in data.items() if k not in _ROOT_OWNED_KEYS}
    try:
        itinerary = Itinerary.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Itinerary failed validation: {e.error_count()} error(s)", raw_text=text
        ) from e

    days: list[DayPlan] = []
    for index, day in enumerate(itinerary.days):
        activities = [
            activity.model_copy(update={"feedback": Feedback.neutral})
            for activity in day.activities
        ]
        day_number = day.day_number if day.day_number > 0 else index + 1
        day_date = day.date
        if day_date is None and start_date is not None:
            day_date = start_date + timedelta(days=index)
        days.append(
            day.model_copy(
                update={"date": day_date, "day_number": day_number, "activities": activities}
            )
        )

    logger.debug(
        f"Parsed itinerary for {itinerary.destination}: {len(days)} day(s), "
        f"{sum(len(d.activities) for d in days)} activities"
    )
    return itinerary.model_copy(update={"days": days})


def parse_schedule_updates(text: str) -> list[ScheduleUpdate]:
    """Parse the array of {id, time, transport_to_next} returned by a reschedule.

    Entries are validated one at a time; an entry without a usable id is
    skipped so the rest of the day still gets rescheduled.

    Raises:
        MalformedResponseError: If the text is not JSON or not an array
    """
    data = _load_json(text)
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Expected a JSON array, got {type(data).__name__}", raw_text=text
        )

    updates: list[ScheduleUpdate] = []
    for position, entry in enumerate(data):
        try:
            updates.append(ScheduleUpdate.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping schedule update {position}: {e.error_count()} error(s)")
    return updates


def parse_wishlist_analysis(text: str) -> WishlistAnalysis:
    """Parse a {possible_name, summary, tags} analysis object."""
    return parse_payload(text, WishlistAnalysis)
