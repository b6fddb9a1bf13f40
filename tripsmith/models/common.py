"""Common types and enums shared across all models."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


_NUMBER = re.compile(r"-?\d+(?:[.,]\d+)?")
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")


def coerce_number(value: Any) -> float | None:
    """Read a number from loosely typed model output.

    Accepts ints, floats and strings carrying a number with decoration such
    as a currency symbol ("€15", "15.50 EUR", "90 min"). A decimal comma is
    read as a decimal point unless it separates thousands ("1,200").
    Returns None when no number can be found.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER.search(_THOUSANDS_SEPARATOR.sub("", value.replace(" ", "")))
        if match:
            return float(match.group().replace(",", "."))
    return None


class ModelOutput(BaseModel):
    """Base for models parsed from completion-service output.

    Accepts snake_case or camelCase keys and treats explicit nulls as absent,
    so defaults apply instead of failing validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Remove null-valued keys before field validation."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Coordinates(ModelOutput):
    """Geographic coordinates (WGS84). Values are not range-checked."""

    lat: float
    lng: float

    @classmethod
    def from_loose(cls, value: Any) -> "Coordinates | None":
        """Build coordinates from model output, or None if lat or lng is unusable."""
        if isinstance(value, Coordinates):
            return value
        if not isinstance(value, dict):
            return None
        lat = coerce_number(value.get("lat"))
        lng = coerce_number(value.get("lng"))
        if lat is None or lng is None:
            return None
        return cls(lat=lat, lng=lng)


class ActivityType(str, Enum):
    """Kind of scheduled activity."""

    food = "food"
    culture = "culture"
    nature = "nature"
    transport = "transport"
    leisure = "leisure"
    logistics = "logistics"
    blocked = "blocked"
    custom = "custom"


class Feedback(str, Enum):
    """User feedback on an activity."""

    neutral = "neutral"
    like = "like"
    dislike = "dislike"


class TravelMode(str, Enum):
    """Arrival/departure leg mode."""

    flight = "flight"
    train = "train"
    car = "car"
    bus = "bus"


class BudgetTier(str, Enum):
    """Trip budget tier."""

    budget = "budget"
    moderate = "moderate"
    luxury = "luxury"


class PriceCategory(str, Enum):
    """Admission pricing category."""

    free = "free"
    paid = "paid"
    partial_free = "partial_free"


class WishlistKind(str, Enum):
    """Wishlist content kind."""

    url = "url"
    text = "text"
