"""
Correlation IDs shared by request handling, logging and error responses.

A correlation ID is a short hex token that ties a log line, a Sentry event and
an error body together so an admin can quote it when reporting a problem.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Request-scoped (or console-session-scoped) correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        8-character hexadecimal string.
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current correlation ID, or an empty string if none is set."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context."""
    correlation_id_var.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    Used outside HTTP requests (the moderation console) so that engine log
    lines carry the same ID as the requests they issue.

    Args:
        correlation_id: ID to bind; a new one is generated when omitted.

    Yields:
        The bound correlation ID.
    """
    value = correlation_id or generate_correlation_id()
    token = correlation_id_var.set(value)
    try:
        yield value
    finally:
        correlation_id_var.reset(token)
