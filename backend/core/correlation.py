"""
Request correlation IDs.

Each request gets a short ID that ties together its log lines, the Sentry
event (if any) and the error body returned to the client.
"""

import uuid
from contextvars import ContextVar

# Request-scoped; an empty string means "no request in flight"
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short correlation ID.

    Returns:
        8 lowercase hexadecimal characters, e.g. "3f9a01c2".
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the correlation ID of the current context, or "" if unset."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context."""
    correlation_id_var.set(correlation_id)
