"""Completion-service clients.

Security: the API key comes from settings (environment) only, never hardcoded.
The orchestrator depends on the ``CompletionClient`` protocol, so tests and
the eval runner inject ``ScriptedCompletionClient`` instead of a network client.
"""

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from openai import AsyncOpenAI, OpenAIError

from tripsmith.config import Settings
from tripsmith.errors import CompletionServiceError, ConfigurationError
from tripsmith.models.chat import ChatMessage

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """External lookup tools a completion call may use."""

    place_lookup = "place_lookup"
    web_search = "web_search"


class ModelTier(str, Enum):
    """Which configured model serves a call."""

    planning = "planning"
    fast = "fast"


@dataclass(frozen=True)
class CompletionOptions:
    """Per-call options for the completion service.

    Structured output (``response_schema``) cannot be combined with
    capabilities; the provider rejects tool-augmented calls that also
    constrain the response format.
    """

    capabilities: frozenset[Capability] = frozenset()
    system_instruction: str | None = None
    response_schema: dict[str, Any] | None = None
    tier: ModelTier = ModelTier.planning

    def __post_init__(self) -> None:
        if self.capabilities and self.response_schema is not None:
            raise ValueError("response_schema cannot be combined with capabilities")


class CompletionClient(Protocol):
    """Protocol for completion-service implementations."""

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Send one prompt and return the raw response text (may be empty)."""
        ...

    async def chat(
        self, history: list[ChatMessage], message: str, options: CompletionOptions
    ) -> str:
        """Continue a conversation and return the reply text."""
        ...


@dataclass
class CompletionCall:
    """Recorded call made against a ScriptedCompletionClient."""

    prompt: str
    options: CompletionOptions
    history: list[ChatMessage] | None = None


@dataclass
class ScriptedCompletionClient:
    """Deterministic client replaying scripted responses (no API key required).

    Each call consumes the next scripted item: a string is returned as-is, an
    exception instance is raised. Once the script is exhausted, calls return
    an empty string.
    """

    responses: Iterable[str | Exception] = ()
    calls: list[CompletionCall] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._queue: deque[str | Exception] = deque(self.responses)

    def push(self, *responses: str | Exception) -> None:
        """Append more scripted responses."""
        self._queue.extend(responses)

    def _next(self) -> str:
        if not self._queue:
            return ""
        item = self._queue.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Return the next scripted response."""
        self.calls.append(CompletionCall(prompt=prompt, options=options))
        return self._next()

    async def chat(
        self, history: list[ChatMessage], message: str, options: CompletionOptions
    ) -> str:
        """Return the next scripted response."""
        self.calls.append(CompletionCall(prompt=message, options=options, history=list(history)))
        return self._next()


class OpenAICompletionClient:
    """OpenAI-backed completion client using the Responses API."""

    def __init__(
        self,
        api_key: str,
        planning_model: str = "gpt-4.1",
        fast_model: str = "gpt-4.1-mini",
        timeout_seconds: float = 120.0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            planning_model: Model for itinerary generation, refinement and chat
            fast_model: Model for short extraction calls
            timeout_seconds: Per-request timeout
            client: Optional preconfigured AsyncOpenAI (for testing)
        """
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout_seconds)
        self.models = {ModelTier.planning: planning_model, ModelTier.fast: fast_model}

    def _request_kwargs(self, options: CompletionOptions) -> dict[str, Any]:
        """Translate CompletionOptions into Responses API arguments."""
        kwargs: dict[str, Any] = {"model": self.models[options.tier]}

        if options.system_instruction:
            kwargs["instructions"] = options.system_instruction

        # Place verification has no dedicated tool here; both go through web search
        if options.capabilities:
            kwargs["tools"] = [{"type": "web_search"}]

        if options.response_schema is not None:
            kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "payload",
                    "schema": options.response_schema,
                    "strict": False,
                }
            }

        return kwargs

    async def _create(self, input_: str | list[dict[str, str]], options: CompletionOptions) -> str:
        kwargs = self._request_kwargs(options)
        try:
            response = await self.client.responses.create(input=input_, **kwargs)
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise CompletionServiceError(f"Completion request failed: {e}") from e
        return response.output_text or ""

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Send a single prompt."""
        return await self._create(prompt, options)

    async def chat(
        self, history: list[ChatMessage], message: str, options: CompletionOptions
    ) -> str:
        """Send the conversation so far plus a new user message."""
        messages = [
            {"role": "assistant" if m.role == "model" else "user", "content": m.text}
            for m in history
        ]
        messages.append({"role": "user", "content": message})
        return await self._create(messages, options)


def get_completion_client(settings: Settings) -> CompletionClient:
    """Build the configured completion client.

    Raises:
        ConfigurationError: If no API key is configured
    """
    api_key = settings.openai_api_key
    if api_key is None or not api_key.get_secret_value():
        raise ConfigurationError("OPENAI_API_KEY is not configured")

    logger.info(f"Using OpenAI completion client (planning model {settings.openai_planning_model})")
    return OpenAICompletionClient(
        api_key=api_key.get_secret_value(),
        planning_model=settings.openai_planning_model,
        fast_model=settings.openai_fast_model,
        timeout_seconds=settings.completion_timeout_seconds,
    )
