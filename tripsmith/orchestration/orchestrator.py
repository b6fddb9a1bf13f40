"""Itinerary orchestrator - the public operations of the itinerary core.

Each operation is a sequential pipeline with a single completion call:
prompt -> completion -> sanitize -> parse -> (reconcile) -> result.

Concurrency: operations are independent coroutines and the orchestrator keeps
no state between calls. It does not serialize concurrent operations on the
same itinerary snapshot; if a caller runs ``refine`` and
``recalculate_schedule`` concurrently, whichever result is written back last
wins. Callers that need ordering must serialize (e.g. disable refinement while
a reschedule is in flight). Completion calls are not retried; a repeated call
re-runs the whole pipeline since the service is not idempotent.
"""

import logging
import time
from datetime import date
from typing import Any, Protocol

from tripsmith.config import Settings, get_settings
from tripsmith.errors import MalformedResponseError, NoResponseError
from tripsmith.llm.client import CompletionClient, get_completion_client
from tripsmith.llm.parsing import parse_itinerary, parse_schedule_updates, parse_wishlist_analysis
from tripsmith.llm.sanitize import sanitize
from tripsmith.models.chat import ChatMessage
from tripsmith.models.common import WishlistKind
from tripsmith.models.itinerary import (
    PLACEHOLDER_ANALYSIS,
    Activity,
    Itinerary,
    WishlistItem,
    new_itinerary_id,
)
from tripsmith.models.trip import TripInput
from tripsmith.orchestration.editing import (
    replace_day_activities,
    schedule_start_location,
)
from tripsmith.orchestration.editing import update_activity as apply_activity_update
from tripsmith.orchestration.prompts import (
    PromptSpec,
    build_analysis_prompt,
    build_chat_options,
    build_generate_prompt,
    build_refine_prompt,
    build_reschedule_prompt,
)
from tripsmith.orchestration.reconcile import merge_schedule_updates, reconcile
from tripsmith.utils.logging import StructuredCompletionLogger
from tripsmith.utils.metrics import PrometheusCompletionMetrics

logger = logging.getLogger(__name__)


class CompletionMetrics(Protocol):
    """Metrics sink used by the orchestrator."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None: ...

    def inc_failure(self, operation: str, reason: str) -> None: ...

    def inc_degraded(self, operation: str) -> None: ...


class ItineraryOrchestrator:
    """Sequences prompt building, completion, parsing and reconciliation."""

    def __init__(
        self,
        client: CompletionClient,
        settings: Settings | None = None,
        metrics: CompletionMetrics | None = None,
        call_logger: StructuredCompletionLogger | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            client: Completion-service client
            settings: Application settings (defaults to environment settings)
            metrics: Metrics sink (defaults to Prometheus)
            call_logger: Structured call logger
        """
        self._client = client
        self._settings = settings or get_settings()
        self._metrics = metrics or PrometheusCompletionMetrics()
        self._log = call_logger or StructuredCompletionLogger()

    async def _complete(self, operation: str, prompt: PromptSpec) -> str:
        """Run one completion call; raise NoResponseError on empty text."""
        started = time.perf_counter()
        try:
            text = await self._client.complete(prompt.text, prompt.options)
        except Exception as e:
            latency_ms = (time.perf_counter() - started) * 1000
            self._log.log_call(operation, "error", latency_ms, error_reason=type(e).__name__)
            self._metrics.record_latency(operation, "error", latency_ms)
            self._metrics.inc_failure(operation, "service_error")
            raise

        latency_ms = (time.perf_counter() - started) * 1000
        if not text or not text.strip():
            self._log.log_call(operation, "empty", latency_ms)
            self._metrics.record_latency(operation, "empty", latency_ms)
            self._metrics.inc_failure(operation, "no_response")
            raise NoResponseError(f"No response from completion service ({operation})")

        self._log.log_call(operation, "success", latency_ms, response_chars=len(text))
        self._metrics.record_latency(operation, "success", latency_ms)
        return text

    def _parse_itinerary(
        self, operation: str, text: str, start_date: date | None = None
    ) -> Itinerary:
        try:
            return parse_itinerary(sanitize(text), start_date)
        except MalformedResponseError as e:
            # Callers get the unsanitized model output for diagnostics
            e.raw_text = text
            self._log.log_malformed(operation, str(e), text)
            self._metrics.inc_failure(operation, "malformed")
            raise

    def _degraded(self, operation: str, error: Exception) -> None:
        logger.warning(
            f"{operation} degraded to fallback result: {type(error).__name__}: {error}",
            extra={
                "structured": {
                    "operation": operation,
                    "outcome": "degraded",
                    "error_reason": type(error).__name__,
                }
            },
        )
        self._metrics.inc_degraded(operation)

    async def generate(self, trip: TripInput) -> Itinerary:
        """Generate a new itinerary from trip parameters.

        Logistics, an empty wishlist and the trip settings are attached from
        the input; the itinerary receives a fresh id.

        Raises:
            NoResponseError: Completion service returned empty text
            MalformedResponseError: Response could not be parsed
            CompletionServiceError: Provider call failed
        """
        logger.info(f"Generating itinerary for {trip.destination} ({trip.duration_days} days)")
        text = await self._complete("generate", build_generate_prompt(trip))
        parsed = self._parse_itinerary("generate", text, trip.start_date)

        return parsed.model_copy(
            update={
                "id": new_itinerary_id(),
                "logistics": trip.logistics.model_copy(deep=True),
                "wishlist": [],
                "trip_settings": trip.settings(),
            }
        )

    async def refine(self, current: Itinerary, user_request: str) -> Itinerary:
        """Regenerate an itinerary from a free-text request, keeping user state.

        The returned itinerary keeps ``current.id``. On any error ``current``
        is left untouched and the error propagates.

        Raises:
            NoResponseError: Completion service returned empty text
            MalformedResponseError: Response could not be parsed
            CompletionServiceError: Provider call failed
        """
        logger.info(f"Refining itinerary {current.id}")
        text = await self._complete("refine", build_refine_prompt(current, user_request))
        parsed = self._parse_itinerary("refine", text, _start_date(current))
        return reconcile(current, parsed)

    async def recalculate_schedule(
        self, activities: list[Activity], previous_location_hint: str | None = None
    ) -> list[Activity]:
        """Recompute start times and transport for a reordered day.

        Fails open: on any failure the original activities are returned
        unchanged.
        """
        if not activities:
            return list(activities)

        try:
            text = await self._complete(
                "reschedule", build_reschedule_prompt(activities, previous_location_hint)
            )
            updates = parse_schedule_updates(sanitize(text))
        except Exception as e:
            self._degraded("reschedule", e)
            return list(activities)

        return merge_schedule_updates(activities, updates)

    async def analyze_external_content(self, content: str) -> WishlistItem:
        """Summarize a pasted link or text into a wishlist item. Never raises."""
        kind = WishlistKind.url if content.strip().startswith("http") else WishlistKind.text
        prompt = build_analysis_prompt(content, use_web_search=self._settings.analysis_uses_web_search)

        try:
            text = await self._complete("analyze", prompt)
            analysis = parse_wishlist_analysis(sanitize(text))
        except Exception as e:
            self._degraded("analyze", e)
            analysis = PLACEHOLDER_ANALYSIS.model_copy(deep=True)

        return WishlistItem(content=content, kind=kind, analysis=analysis)

    async def chat(self, history: list[ChatMessage], message: str) -> str:
        """Conversational pass-through; returns the raw reply text."""
        started = time.perf_counter()
        try:
            reply = await self._client.chat(history, message, build_chat_options())
        except Exception as e:
            latency_ms = (time.perf_counter() - started) * 1000
            self._log.log_call("chat", "error", latency_ms, error_reason=type(e).__name__)
            self._metrics.record_latency("chat", "error", latency_ms)
            self._metrics.inc_failure("chat", "service_error")
            raise

        latency_ms = (time.perf_counter() - started) * 1000
        self._log.log_call("chat", "success", latency_ms, response_chars=len(reply or ""))
        self._metrics.record_latency("chat", "success", latency_ms)
        return reply or ""

    async def reorder_day(
        self, itinerary: Itinerary, day_index: int, activities: list[Activity]
    ) -> Itinerary:
        """Apply a user reorder to one day, then reschedule it (fail-open)."""
        reordered = replace_day_activities(itinerary, day_index, activities)
        rescheduled = await self.recalculate_schedule(
            activities, schedule_start_location(itinerary)
        )
        return replace_day_activities(reordered, day_index, rescheduled)

    async def update_activity(
        self,
        itinerary: Itinerary,
        day_index: int,
        activity_id: str,
        updates: dict[str, Any],
    ) -> Itinerary:
        """Apply a user edit; a changed transport choice reschedules the day.

        Clearing the transport choice or re-selecting the current one does
        not trigger a reschedule.
        """
        updated = apply_activity_update(itinerary, day_index, activity_id, updates)
        new_transport = updates.get("selected_transport")
        prior = next(
            (a for a in itinerary.days[day_index].activities if a.id == activity_id), None
        )
        if not new_transport or prior is None or new_transport == prior.selected_transport:
            return updated

        rescheduled = await self.recalculate_schedule(
            updated.days[day_index].activities, schedule_start_location(itinerary)
        )
        return replace_day_activities(updated, day_index, rescheduled)


def _start_date(itinerary: Itinerary) -> date | None:
    if itinerary.trip_settings is not None:
        return itinerary.trip_settings.start_date
    if itinerary.days:
        return itinerary.days[0].date
    return None


def build_orchestrator(settings: Settings | None = None) -> ItineraryOrchestrator:
    """Construct the orchestrator with the configured completion client.

    Intended to be called once per process.
    """
    settings = settings or get_settings()
    return ItineraryOrchestrator(client=get_completion_client(settings), settings=settings)
