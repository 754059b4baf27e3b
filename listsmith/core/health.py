"""
Health check with dependency status.

Checks:
- Application: always up if responding
- Text generation: configured or not, plus the OpenAI circuit-breaker state

Returns 200 with ``"healthy"`` or ``"degraded"`` status, never 503.
Load balancers check for 200; the body indicates component health.
No outbound call is made, so probing /health never spends API quota.
"""

from datetime import UTC, datetime

from listsmith.core.interfaces import ITextGenerator
from listsmith.core.resilience import CircuitBreaker, CircuitState


def check_text_generation(generator: ITextGenerator | None) -> dict:
    """
    Report text-generation readiness.

    Returns:
        ``{"status": "not_configured"}`` without a generator, else
        ``{"status": "up" | "down", "model": str, "circuit": str}``
        (down while the circuit breaker is open).
    """
    if generator is None:
        return {"status": "not_configured"}

    component = {"status": "up", "model": generator.model}
    breaker = getattr(generator, "breaker", None)
    if isinstance(breaker, CircuitBreaker):
        state = breaker.state
        component["circuit"] = state.value
        if state == CircuitState.OPEN:
            component["status"] = "down"
            component["cooldown_remaining"] = round(breaker.cooldown_remaining, 1)
    return component


def get_health_status(
    app_name: str,
    app_version: str,
    app_env: str,
    generator: ITextGenerator | None = None,
) -> dict:
    """
    Build complete health status response.

    Overall status is ``"healthy"`` unless a configured component is down.
    """
    components = {"text_generation": check_text_generation(generator)}

    any_down = any(c["status"] == "down" for c in components.values())
    overall = "degraded" if any_down else "healthy"

    return {
        "status": overall,
        "app": app_name,
        "version": app_version,
        "environment": app_env,
        "timestamp": datetime.now(UTC).isoformat(),
        "components": components,
    }
