"""
Sentry error tracking for ListSmith.

Disabled entirely when no DSN is configured. When enabled, expected
client errors (4xx HTTPExceptions and missing-input errors) are dropped
and ListSmithError events are tagged with their type.
"""

import logging

import sentry_sdk
from fastapi import HTTPException
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from listsmith.config import AppEnv
from listsmith.core.exceptions import InputValidationError, ListSmithError


def init_sentry(
    dsn: str,
    app_env: AppEnv,
    app_version: str,
    traces_sample_rate: float = 0.1,
    profiles_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize the Sentry SDK.

    Args:
        dsn: Sentry DSN. Empty string disables Sentry entirely.
        app_env: Current environment (used as Sentry ``environment``).
        app_version: Application version (used as Sentry ``release``).
        traces_sample_rate: Fraction of transactions to trace (0.0–1.0).
        profiles_sample_rate: Fraction of transactions to profile (0.0–1.0).

    Returns:
        True if the SDK was initialized.
    """
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=app_env.value,
        release=f"listsmith@{app_version}",
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            AsyncioIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        before_send=_filter_events,
        send_default_pii=False,
    )
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Drop client-side errors; tag ListSmithError events with type and details."""
    if "exc_info" not in hint:
        return event

    _, exc_value, _ = hint["exc_info"]

    if isinstance(exc_value, HTTPException) and exc_value.status_code < 500:
        return None
    if isinstance(exc_value, InputValidationError):
        return None

    if isinstance(exc_value, ListSmithError):
        event.setdefault("tags", {})
        event["tags"]["error_type"] = type(exc_value).__name__
        if exc_value.details:
            event["extra"] = {**event.get("extra", {}), **exc_value.details}

    return event
