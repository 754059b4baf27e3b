"""
Custom exception hierarchy for ListSmith.

All application-specific exceptions inherit from ListSmithError,
enabling catch-all handling at the API layer while allowing
fine-grained handling in business logic.
"""


class ListSmithError(Exception):
    """Base exception for all ListSmith application errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ─── Request Errors ───────────────────────────────────────────


class InputValidationError(ListSmithError):
    """A required request field is missing or empty."""

    pass


class ConfigurationError(ListSmithError):
    """The server is missing configuration required for the operation."""

    pass


# ─── Upstream Errors ──────────────────────────────────────────


class UpstreamError(ListSmithError):
    """An outbound call to an external service failed."""

    pass


class TextGenerationError(UpstreamError):
    """The text-generation API returned an error or an unusable response."""

    pass


class TransientTextGenerationError(TextGenerationError):
    """A text-generation failure worth retrying (timeout, 429, 5xx)."""

    pass


class MalformedReplyError(UpstreamError):
    """A generated reply did not contain the expected JSON payload."""

    pass


# ─── Generation / Research Errors ─────────────────────────────


class DescriptionGenerationError(ListSmithError):
    """Description generation failed; surfaced to clients with a generic message."""

    pass


class ResearchUnavailableError(ListSmithError):
    """
    A research strategy could not produce a record.

    Raised by each strategy in the research fallback chain and consumed
    by the chain itself and never reaches the HTTP layer.
    """

    def __init__(self, strategy: str, reason: str = "", **kwargs):
        self.strategy = strategy
        self.reason = reason
        message = f"Research strategy '{strategy}' unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, **kwargs)


# ─── Resilience Errors ────────────────────────────────────────


class CircuitBreakerOpenError(ListSmithError):
    """
    Circuit breaker is in OPEN state; requests are being blocked.

    This indicates the target service has had too many consecutive failures
    and is being temporarily bypassed to prevent cascading failures.
    """

    def __init__(self, source: str, cooldown_remaining: float = 0, **kwargs):
        self.source = source
        self.cooldown_remaining = cooldown_remaining
        message = (
            f"Circuit breaker OPEN for '{source}'. "
            f"Retry in {cooldown_remaining:.0f} seconds."
        )
        super().__init__(message=message, **kwargs)
