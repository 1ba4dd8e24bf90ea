"""Retrying transport for the remote profile store.

Only the transport retries; the schedule core and the session never do.

Retry policy:
- Retry on transient errors (429, 500, 502, 503, 504, timeouts)
- Never retry a write or delete the store answered with a non-transient status
- Exponential backoff with jitter, attempts and max wait from settings

Status interpretation is left to RemoteProfileStore: a 404 is "no profile"
on fetch and "already gone" on delete, so responses are returned unraised.
"""

import logging

import httpx
import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from shared.config import settings

logger = structlog.get_logger()

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


class TransientHTTPError(Exception):
    """The profile store answered with a status worth retrying."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


@retry(
    retry=retry_if_exception_type((TransientHTTPError, httpx.TimeoutException)),
    wait=wait_exponential_jitter(initial=1, max=settings.retry_max_wait_seconds, jitter=2),
    stop=stop_after_attempt(settings.retry_max_attempts),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs,
) -> httpx.Response:
    """Send one profile store request, retrying transient failures.

    Raises TransientHTTPError or httpx.TimeoutException once attempts run out.
    Any other response, 4xx included, is handed back to the caller.
    """
    response = await client.request(method, url, **kwargs)

    if response.status_code in TRANSIENT_STATUS_CODES:
        raise TransientHTTPError(response.status_code, response.text[:200])

    return response
