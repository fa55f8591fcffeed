"""
Sentry SDK configuration.

Sentry stays disabled unless SENTRY_DSN is set. Events are scrubbed of
personal data before leaving the process.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

HEALTH_PATHS = ("/health", "/api/health")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub PII before sending to Sentry.

    Keeps only the user ID, drops cookies and masks the Authorization header.

    Args:
        event: Sentry event.
        hint: Additional context about the event.

    Returns:
        The scrubbed event.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict) and "Authorization" in headers:
            headers["Authorization"] = "[Filtered]"

    return event


def _before_send_transaction(event: Event, hint: Hint) -> Event | None:
    """
    Drop health-check transactions and tag slow ones.

    Args:
        event: Sentry transaction event.
        hint: Additional context.

    Returns:
        Event to send, or None to drop it.
    """
    transaction_name = event.get("transaction", "")
    if any(transaction_name.endswith(path) for path in HEALTH_PATHS):
        return None

    start_timestamp = event.get("start_timestamp")
    end_timestamp = event.get("timestamp")
    if isinstance(start_timestamp, (int, float)) and isinstance(
        end_timestamp, (int, float)
    ):
        duration_s = float(end_timestamp) - float(start_timestamp)
        if duration_s > 1.0:
            event.setdefault("tags", {})["performance"] = "slow"
        elif duration_s > 0.5:
            event.setdefault("tags", {})["performance"] = "moderate"

    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """
    Dynamic sampling based on endpoint.

    Spreadsheet exports and time series are the expensive queries, so they
    are sampled more heavily than the cheap count endpoints.

    Args:
        sampling_context: Context about the request being sampled.

    Returns:
        Sample rate between 0.0 and 1.0.
    """
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    asgi_scope = sampling_context.get("asgi_scope", {})
    path = asgi_scope.get("path", "")

    if path in HEALTH_PATHS:
        return 0.0

    if path.startswith("/api/stats/") and (
        path.endswith("_as_xlsx") or "by_time" in path
    ):
        return 0.5

    return 0.2


def init_sentry() -> None:
    """
    Initialize Sentry SDK with FastAPI integration.

    Call this BEFORE creating the FastAPI app instance.
    """
    dsn = os.getenv("SENTRY_DSN")

    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[
            KeyboardInterrupt,
            SystemExit,
        ],
    )
