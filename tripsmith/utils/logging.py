"""Structured logging for completion calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

_MAX_RAW_CHARS = 2000


class StructuredCompletionLogger:
    """Structured logger for completion-service calls."""

    def log_call(
        self,
        operation: str,
        outcome: str,
        latency_ms: float,
        response_chars: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one completion call with structured data."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if response_chars is not None:
            log_data["response_chars"] = response_chars
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Completion call: {operation} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_malformed(self, operation: str, message: str, raw_text: str) -> None:
        """Log a malformed response with the (truncated) raw text for diagnostics."""
        raw = raw_text if len(raw_text) <= _MAX_RAW_CHARS else raw_text[:_MAX_RAW_CHARS] + "..."
        logger.warning(
            f"Malformed completion response: {operation} - {message}",
            extra={"structured": {"operation": operation, "raw_text": raw}},
        )
