"""Parsing of the inter-activity transport mini-format.

``transport_to_next`` holds options separated by ``|``, each shaped like
``Mode: Duration (Cost)``, e.g. ``Walk: 15 min | Taxi: 6 min (€9)``.
"""

import re
from dataclasses import dataclass

from tripsmith.models.itinerary import Activity

_OPTION = re.compile(r"^([^:]+):\s*([^(\n]+?)(?:\s*\(([^)]+)\))?$")


@dataclass(frozen=True)
class TransportOption:
    """One way of reaching the next activity."""

    mode: str
    duration: str
    cost: str | None
    raw: str


def parse_transport_option(option: str) -> TransportOption:
    """Parse a single ``Mode: Duration (Cost)`` option.

    Options that do not match fall back to splitting on the first colon.
    """
    option = option.strip()
    match = _OPTION.match(option)
    if match:
        cost = match.group(3).strip() if match.group(3) else None
        return TransportOption(
            mode=match.group(1).strip(),
            duration=match.group(2).strip(),
            cost=cost,
            raw=option,
        )

    mode, _, rest = option.partition(":")
    return TransportOption(mode=mode.strip() or "Transport", duration=rest.strip(), cost=None, raw=option)


def parse_transport_options(text: str | None) -> list[TransportOption]:
    """Split a ``transport_to_next`` string into its options."""
    if not text:
        return []
    return [parse_transport_option(part) for part in text.split("|") if part.strip()]


def selected_transport_option(activity: Activity) -> TransportOption | None:
    """Return the user's chosen option, defaulting to the first one offered."""
    options = parse_transport_options(activity.transport_to_next)
    if activity.selected_transport:
        for option in options:
            if option.raw == activity.selected_transport.strip():
                return option
        return parse_transport_option(activity.selected_transport)
    return options[0] if options else None
