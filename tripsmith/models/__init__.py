"""Models package - re-exports for convenience."""

from tripsmith.models.chat import ChatMessage
from tripsmith.models.common import (
    ActivityType,
    BudgetTier,
    Coordinates,
    Feedback,
    PriceCategory,
    TravelMode,
    WishlistKind,
)
from tripsmith.models.itinerary import (
    PLACEHOLDER_ANALYSIS,
    Activity,
    DayPlan,
    Itinerary,
    PriceDetail,
    ScheduleUpdate,
    WishlistAnalysis,
    WishlistItem,
    new_activity_id,
    new_itinerary_id,
)
from tripsmith.models.trip import Accommodation, Logistics, TravelLeg, TripInput, TripSettings

__all__ = [
    # Common
    "ActivityType",
    "BudgetTier",
    "Coordinates",
    "Feedback",
    "PriceCategory",
    "TravelMode",
    "WishlistKind",
    # Trip input
    "TripInput",
    "TripSettings",
    "Logistics",
    "TravelLeg",
    "Accommodation",
    # Itinerary
    "Itinerary",
    "DayPlan",
    "Activity",
    "PriceDetail",
    "ScheduleUpdate",
    "WishlistItem",
    "WishlistAnalysis",
    "PLACEHOLDER_ANALYSIS",
    "new_activity_id",
    "new_itinerary_id",
    # Chat
    "ChatMessage",
]
