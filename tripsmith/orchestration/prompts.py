"""Prompt rendering for completion calls.

Pure functions: each maps a request shape to instruction text plus the
options (capabilities, system instruction) the call may use. Rendering is
deterministic for equal inputs.
"""

import json
from dataclasses import dataclass

from tripsmith.llm.client import Capability, CompletionOptions, ModelTier
from tripsmith.models.common import ActivityType
from tripsmith.models.itinerary import Activity, Itinerary, WishlistAnalysis
from tripsmith.models.trip import TravelLeg, TripInput

PERSONA = "You are Tripsmith, an expert AI travel architect."

CHAT_PERSONA = (
    "You are Tripsmith, an intelligent travel assistant. You give specific, "
    "actionable advice and use map and search data when relevant. Keep responses concise."
)

TRANSPORT_FORMAT = "Mode: Duration (Cost) | Mode: Duration (Cost)"

_ACTIVITY_TYPES = " | ".join(f'"{t.value}"' for t in ActivityType)

ITINERARY_OUTPUT_CONTRACT = f"""Output strictly valid JSON (no markdown, no code fences, no commentary) with exactly this structure:
{{
  "destination": "string",
  "title": "string",
  "total_budget": number,
  "currency": "ISO 4217 code",
  "days": [
    {{
      "date": "YYYY-MM-DD",
      "day_number": number,
      "activities": [
        {{
          "id": "string",
          "time": "HH:MM (24h)",
          "title": "string",
          "description": "string",
          "location": "string",
          "maps_url": "string",
          "image_url": "string",
          "coordinates": {{ "lat": number, "lng": number }},
          "type": {_ACTIVITY_TYPES},
          "duration_minutes": number,
          "estimated_cost": number,
          "price_detail": {{ "category": "free" | "paid" | "partial_free", "amount": number, "currency": "string", "booking_link": "string", "description": "string" }},
          "locked": boolean,
          "mandatory": boolean,
          "transport_to_next": "{TRANSPORT_FORMAT}"
        }}
      ]
    }}
  ]
}}"""

_ITINERARY_CAPABILITIES = frozenset({Capability.place_lookup, Capability.web_search})


@dataclass(frozen=True)
class PromptSpec:
    """Rendered prompt plus the options for its completion call."""

    text: str
    options: CompletionOptions


def _describe_leg(label: str, preposition: str, leg: TravelLeg) -> str:
    return (
        f"- {label}: {leg.mode.value} {preposition} {leg.location} ({leg.time}). "
        f"Address: {leg.address or 'N/A'}."
    )


def build_generate_prompt(trip: TripInput) -> PromptSpec:
    """Render the full-itinerary generation prompt."""
    logistics = trip.logistics
    must_visit = ", ".join(trip.must_visit) if trip.must_visit else "None"
    interests = ", ".join(trip.interests) if trip.interests else "General sightseeing"

    text = f"""Create a detailed travel itinerary for {trip.destination}.
Duration: {trip.duration_days} days starting {trip.start_date.isoformat()}.
Budget tier: {trip.budget.value}.
Travelers: {trip.travelers}.
Interests: {interests}.
Must-visit places: {must_visit}.

Logistics:
{_describe_leg("Arrival", "at", logistics.arrival)}
{_describe_leg("Departure", "from", logistics.departure)}
- Stay: {logistics.accommodation.name} at {logistics.accommodation.address}.

Requirements:
1. Produce exactly {trip.duration_days} days, one entry per calendar date, starting {trip.start_date.isoformat()}.
2. Include the arrival and departure as "logistics" activities on the first and last day.
3. Use place lookup to verify that every place exists and that its address is correct. Provide "maps_url".
4. Use web search to find a representative "image_url" for activities where possible.
5. Provide approximate coordinates (lat/lng) for every location.
6. For every activity except the last of the day, set "transport_to_next" to the realistic transport options to the next activity in the format "{TRANSPORT_FORMAT}" (for example "Walk: 15 min (Free) | Metro: 8 min (€1.80)").
7. Include price details: free or paid, student/senior discounts, and a real booking link when one exists. Set "estimated_cost" for paid items.
8. Keep total spending consistent with the "{trip.budget.value}" budget tier.
9. Give every activity a short unique "id".

{ITINERARY_OUTPUT_CONTRACT}"""

    return PromptSpec(
        text=text,
        options=CompletionOptions(
            capabilities=_ITINERARY_CAPABILITIES,
            system_instruction=f"{PERSONA} Output strictly valid JSON matching the itinerary structure.",
        ),
    )


def build_refine_prompt(itinerary: Itinerary, user_request: str) -> PromptSpec:
    """Render the refinement prompt for an existing itinerary."""
    text = f"""Refine this itinerary based on the user's request: "{user_request}".

Current itinerary (JSON):
{itinerary.model_dump_json()}

HARD CONSTRAINTS:
1. Activities with "locked": true must keep their exact "time" and "location". Return them unchanged with the same "id".
2. Activities of type "blocked" are unavailable time. Never overwrite, move or schedule anything over them.
3. Activities with "mandatory": true must appear somewhere in the output, even if their time has to move.
4. Keep the "id" of every activity you keep; give new activities new unique ids.
5. Use place lookup to verify any new location you add, and update "transport_to_next" using the format "{TRANSPORT_FORMAT}".
6. Output the FULL updated itinerary, not a diff.

{ITINERARY_OUTPUT_CONTRACT}"""

    return PromptSpec(
        text=text,
        options=CompletionOptions(
            capabilities=_ITINERARY_CAPABILITIES,
            system_instruction=(
                f"{PERSONA} Refine the plan while respecting locked, blocked and mandatory "
                "activities. Output strictly valid JSON."
            ),
        ),
    )


def build_reschedule_prompt(activities: list[Activity], start_location: str | None) -> PromptSpec:
    """Render the reschedule prompt for a user-reordered day."""
    ordered = [
        {
            "id": a.id,
            "title": a.title,
            "location": a.location,
            "duration_minutes": a.duration_minutes,
            "locked": a.locked,
            "time": a.time,
        }
        for a in activities
    ]

    text = f"""Recalculate the schedule for this list of activities for a single day.
The user has reordered them manually.

Start location for the day: {start_location or "City Center"}
Start time: usually 09:00 or 10:00 unless a locked activity is earlier.

Activities (in the desired order):
{json.dumps(ordered, ensure_ascii=False)}

Tasks:
1. Keep the given order exactly. Do not add, drop or reorder activities.
2. Compute a realistic start "time" (HH:MM, 24h) for each activity sequentially.
3. Account for travel time from the previous location (or the start location).
4. Locked activities are fixed anchors: their "time" MUST NOT change. Arrange the other activities around them and adjust only unlocked activities when there is an overlap.
5. For each activity, set "transport_to_next" to the options for reaching the next activity in the format "{TRANSPORT_FORMAT}".

Output strictly a JSON array of objects: [{{"id": "string", "time": "HH:MM", "transport_to_next": "string"}}]"""

    return PromptSpec(
        text=text,
        options=CompletionOptions(
            capabilities=frozenset({Capability.place_lookup}),
            system_instruction=(
                "You are a logistics expert. Update schedule times based on travel distance "
                "and duration. Output strict JSON."
            ),
        ),
    )


def build_analysis_prompt(content: str, use_web_search: bool = True) -> PromptSpec:
    """Render the wishlist analysis prompt.

    With web search the response is free text parsed downstream; without it
    the call uses structured output. The two are never combined.
    """
    text = f"""Analyze this social media content, link or text and extract travel information:
"{content}"

Return a JSON object with:
- "possible_name": name of the place or activity
- "summary": brief description of what makes it worth visiting
- "tags": array of short tags (e.g. "Food", "View", "Hidden Gem")"""

    if use_web_search:
        options = CompletionOptions(
            capabilities=frozenset({Capability.web_search}), tier=ModelTier.fast
        )
    else:
        options = CompletionOptions(
            response_schema=WishlistAnalysis.model_json_schema(by_alias=False),
            tier=ModelTier.fast,
        )
    return PromptSpec(text=text, options=options)


def build_chat_options() -> CompletionOptions:
    """Options for the conversational assistant."""
    return CompletionOptions(
        capabilities=_ITINERARY_CAPABILITIES,
        system_instruction=CHAT_PERSONA,
    )
