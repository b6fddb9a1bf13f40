"""Trip input models - user-supplied parameters and logistics."""

from datetime import date
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from tripsmith.models.common import BudgetTier, Coordinates, TravelMode


class TravelLeg(BaseModel):
    """Arrival or departure leg."""

    mode: TravelMode
    location: str = Field(..., description="Airport/station code or city")
    time: str = Field(..., description="Local time of day, HH:MM")
    address: str | None = None


class Accommodation(BaseModel):
    """Where the travellers stay."""

    name: str
    address: str
    coordinates: Coordinates | None = None


class Logistics(BaseModel):
    """User-supplied logistics. Never produced by the completion service."""

    arrival: TravelLeg
    departure: TravelLeg
    accommodation: Accommodation


class TripSettings(BaseModel):
    """Echo of the trip parameters kept on the itinerary."""

    start_date: date
    duration_days: int
    budget: BudgetTier
    travelers: int
    interests: list[str] = Field(default_factory=list)
    must_visit: list[str] = Field(default_factory=list)


class TripInput(BaseModel):
    """Trip parameters submitted for generation."""

    destination: Annotated[str, Field(min_length=1)]
    start_date: date
    duration_days: Annotated[int, Field(gt=0)]
    budget: BudgetTier = BudgetTier.moderate
    travelers: Annotated[int, Field(gt=0)] = 1
    interests: list[str] = Field(default_factory=list)
    must_visit: list[str] = Field(default_factory=list)
    logistics: Logistics

    @field_validator("interests")
    @classmethod
    def dedupe_interests(cls, v: list[str]) -> list[str]:
        """Interests are a set; keep first occurrence order."""
        seen: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    def settings(self) -> TripSettings:
        """Build the settings echo stored on generated itineraries."""
        return TripSettings(
            start_date=self.start_date,
            duration_days=self.duration_days,
            budget=self.budget,
            travelers=self.travelers,
            interests=list(self.interests),
            must_visit=list(self.must_visit),
        )
