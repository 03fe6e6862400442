"""
Shared HTTP helpers for the catalog clients.

Wraps httpx GET requests in a tenacity retry loop for transport errors,
429 and 5xx responses. Exhausted retries and any other httpx failure
(redirect loops, undecodable bodies) surface as CatalogLookupError.

Dependencies: httpx, tenacity, binder_scan.core.exceptions
System role: Resilient HTTP access to external card databases
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from binder_scan.core.exceptions import CatalogLookupError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryableStatusError(Exception):
    """Internal signal for a response status worth retrying."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}")


def default_retry_wait() -> wait_base:
    """Exponential backoff with jitter used between catalog attempts."""
    return wait_exponential_jitter(initial=0.5, max=8, jitter=1)


async def get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    source: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    max_attempts: int = 3,
    wait: wait_base | None = None,
) -> httpx.Response:
    """
    GET a URL, retrying transient failures.

    Args:
        client: Shared async HTTP client
        url: Absolute URL
        source: Catalog name used in logs and errors
        params: Query parameters
        headers: Extra request headers
        max_attempts: Total attempts including the first
        wait: Tenacity wait strategy between attempts

    Returns:
        httpx.Response: Final response (status below 500 and not 429)

    Raises:
        CatalogLookupError: When every attempt failed
    """
    try:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
            stop=stop_after_attempt(max_attempts),
            wait=wait or default_retry_wait(),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:get_with_retry - {source} retry "
                f"{retry_state.attempt_number}/{max_attempts} url={url}"
            ),
            reraise=True,
        ):
            with attempt:
                response = await client.get(url, params=params, headers=headers)
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise RetryableStatusError(response.status_code)
    except RetryableStatusError as e:
        raise CatalogLookupError(
            f"{source} request failed with HTTP {e.status_code}",
            source=source,
            status=e.status_code,
            details={"url": url},
        ) from e
    except httpx.HTTPError as e:
        raise CatalogLookupError(
            f"{source} request failed: {type(e).__name__}",
            source=source,
            details={"url": url, "error": str(e)},
        ) from e

    return response


def read_json(response: httpx.Response, source: str) -> Any:
    """
    Decode a successful JSON response.

    Raises:
        CatalogLookupError: On a 4xx status or a body that is not JSON
    """
    if response.status_code >= 400:
        raise CatalogLookupError(
            f"{source} request failed with HTTP {response.status_code}",
            source=source,
            status=response.status_code,
            details={"url": str(response.request.url)},
        )
    try:
        return response.json()
    except ValueError as e:
        raise CatalogLookupError(
            f"{source} returned invalid JSON",
            source=source,
            status=response.status_code,
        ) from e
