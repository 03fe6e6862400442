"""
Logging utilities for safe structured logging.

Keeps image payloads and long model replies out of log records: data URLs
and raw bytes are reduced to their size, collections to their length.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
import re
from typing import Any

_DATA_URL = re.compile(r"data:([\w.+-]+/[\w.+-]+);base64,([A-Za-z0-9+/=_-]+)")


def _redact_data_urls(text: str) -> str:
    return _DATA_URL.sub(lambda m: f"data:{m.group(1)};base64,<{len(m.group(2))} chars>", text)


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a short string fit for a log record.

    Args:
        value: Value to convert
        max_length: Length after which the text is cut

    Returns:
        str: Redacted and truncated representation
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return f"bytes({len(value)})"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        text = ", ".join(f"{key}={safe_log_value(val, 40)}" for key, val in value.items())
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unrepresentable {type(value).__name__}: {type(e).__name__}>"

    text = _redact_data_urls(text)
    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with context fields passed through safe_log_value.

    The context is attached as record attributes and appended to the message
    as key=value pairs so it survives plain text formatters.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context fields
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    suffix = " ".join(f"{key}={val}" for key, val in safe_context.items())
    logger.log(level, f"{message} {suffix}" if suffix else message, extra=safe_context)
