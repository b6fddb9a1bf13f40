"""Itinerary models - the aggregate produced by generation and edited by users."""

import datetime
import uuid
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from tripsmith.models.common import (
    ActivityType,
    Coordinates,
    Feedback,
    ModelOutput,
    PriceCategory,
    WishlistKind,
    coerce_number,
)
from tripsmith.models.trip import Logistics, TripSettings


def new_activity_id() -> str:
    """Generate a client-side activity id."""
    return uuid.uuid4().hex[:12]


def new_itinerary_id() -> str:
    """Generate an itinerary id."""
    return uuid.uuid4().hex


class PriceDetail(ModelOutput):
    """Pricing information for an activity."""

    category: PriceCategory = PriceCategory.paid
    amount: float | None = None
    currency: str | None = None
    booking_link: str | None = None
    description: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> PriceCategory:
        """Unknown categories are treated as paid."""
        if isinstance(v, PriceCategory):
            return v
        try:
            return PriceCategory(str(v).strip().lower())
        except ValueError:
            return PriceCategory.paid


class Activity(ModelOutput):
    """Single scheduled activity within a day.

    Field ownership on regeneration is declared in
    ``tripsmith.orchestration.reconcile.ACTIVITY_FIELD_OWNERSHIP``.
    """

    id: str = Field(default_factory=new_activity_id)

    # Refreshed by every regeneration
    time: str = Field(default="", description="24h HH:MM")
    title: str = ""
    description: str = ""
    location: str = ""
    type: ActivityType = ActivityType.custom
    duration_minutes: int = 60
    estimated_cost: float = 0.0
    price_detail: PriceDetail | None = None
    coordinates: Coordinates | None = None
    transport_to_next: str | None = None
    maps_url: str | None = Field(
        default=None, validation_alias=AliasChoices("maps_url", "mapsUrl", "googleMapsUrl")
    )
    image_url: str | None = None

    # Owned by the user
    locked: bool = Field(default=False, validation_alias=AliasChoices("locked", "isLocked"))
    mandatory: bool = Field(
        default=False, validation_alias=AliasChoices("mandatory", "isMandatory")
    )
    user_notes: str = ""
    feedback: Feedback = Feedback.neutral
    actual_cost: float | None = None
    selected_transport: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Blank ids get a fresh one; numeric ids become strings."""
        if isinstance(v, str) and v.strip():
            return v.strip()
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return new_activity_id()

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> ActivityType:
        """Unknown activity types fall back to custom."""
        if isinstance(v, ActivityType):
            return v
        try:
            return ActivityType(str(v).strip().lower())
        except ValueError:
            return ActivityType.custom

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> int:
        """Fractional or decorated durations are rounded; unreadable ones use the default."""
        minutes = coerce_number(v)
        return 60 if minutes is None else round(minutes)

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def coerce_cost(cls, v: Any) -> float:
        """Currency-decorated costs are read as numbers; unreadable ones become 0."""
        cost = coerce_number(v)
        return 0.0 if cost is None else cost

    @field_validator("coordinates", mode="before")
    @classmethod
    def coerce_coordinates(cls, v: Any) -> Coordinates | None:
        """Partial or non-numeric coordinates are dropped."""
        return Coordinates.from_loose(v)


class DayPlan(ModelOutput):
    """One calendar day of the itinerary. Activity order is the schedule."""

    date: datetime.date | None = None
    day_number: int = 0
    activities: list[Activity] = Field(default_factory=list)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> datetime.date | None:
        """Labels such as "Day 1" are not dates; the caller fills those in."""
        if isinstance(v, datetime.datetime):
            return v.date()
        if isinstance(v, datetime.date):
            return v
        try:
            return datetime.date.fromisoformat(str(v).strip()[:10])
        except ValueError:
            return None


class WishlistAnalysis(ModelOutput):
    """AI-produced summary of a wishlist entry."""

    possible_name: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)


PLACEHOLDER_ANALYSIS = WishlistAnalysis(
    possible_name="Unknown Spot", summary="Could not analyze", tags=[]
)


class WishlistItem(BaseModel):
    """User-submitted external reference, independent of the day schedule."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    kind: WishlistKind = WishlistKind.text
    analysis: WishlistAnalysis | None = None


class ScheduleUpdate(ModelOutput):
    """Per-activity update returned by a reschedule call."""

    id: str
    time: str | None = None
    transport_to_next: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Ids are compared as strings."""
        return str(v)


class Itinerary(ModelOutput):
    """Complete multi-day travel plan (aggregate root)."""

    id: str = ""
    destination: str
    title: str = ""
    total_budget: float = 0.0
    currency: str = "USD"
    days: list[DayPlan]
    logistics: Logistics | None = None
    wishlist: list[WishlistItem] = Field(default_factory=list)
    trip_settings: TripSettings | None = None

    @field_validator("total_budget", mode="before")
    @classmethod
    def coerce_budget(cls, v: Any) -> float:
        budget = coerce_number(v)
        return 0.0 if budget is None else budget

    def activities(self) -> list[Activity]:
        """All activities across days, in schedule order."""
        return [activity for day in self.days for activity in day.activities]

    def find_activity(self, activity_id: str) -> Activity | None:
        """Look up an activity by id."""
        for activity in self.activities():
            if activity.id == activity_id:
                return activity
        return None
