"""
Scan error handling utilities.

Provides a decorator for consistent error handling across the scan
endpoints. Domain errors carry their own HTTP status and are rendered by the
application exception handlers; anything else becomes a generic 500.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from binder_scan.core.exceptions import CardScanException
from binder_scan.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_scan_errors(func: F) -> F:
    """
    Decorator to log scan errors and normalize unexpected failures.

    This centralizes:
    - Logging of errors with their status and context
    - Passing domain errors through to the application handlers
    - Hiding unexpected exception details behind a generic 500
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except CardScanException as e:
            log_with_context(
                logger,
                logging.ERROR if e.status_code >= 500 else logging.WARNING,
                f"{func.__name__} failed: {e.message}",
                status=e.status_code,
                error_type=type(e).__name__,
                details=e.details,
            )
            raise

        except HTTPException:
            raise

        except Exception as e:
            logger.exception(
                f"Unexpected failure in {func.__name__}",
                extra={"error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to scan image",
            ) from e

    return wrapper  # type: ignore
