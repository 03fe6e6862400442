"""
Per-request correlation id held in a ContextVar.

The id is set by CorrelationMiddleware and read by the logging filter, so
every log line emitted while serving a request carries the same id.
"""

from contextvars import ContextVar
import re
import uuid

# Incoming ids are echoed into headers and logs, keep them short and plain.
_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation id to the current context and return it.

    A missing or malformed incoming id is replaced with a fresh UUID4.
    """
    if correlation_id and _VALID_ID.match(correlation_id):
        value = correlation_id
    else:
        value = str(uuid.uuid4())
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Return the bound id, or an empty string outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
