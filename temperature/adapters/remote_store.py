"""Remote profile store — the user's profile behind an authenticated HTTP API.

Uses request_with_retry for transient-only retry (429/5xx/timeout).
A 404 on fetch means "no profile yet" and a 404 on delete means "already gone";
every other non-2xx is a store error.
"""

import httpx
import pydantic
import structlog

from shared.config import settings
from shared.metrics import profile_store_calls_total, profile_store_duration_seconds
from temperature.adapters.http_client import TransientHTTPError, request_with_retry
from temperature.adapters.protocol import ProfileStoreError
from temperature.domain.models import StoredProfile, WritePayload

logger = structlog.get_logger()

PROFILE_PATH = "/v1/users/me/temperature-profile"


class RemoteProfileStore:
    """Profile store backed by the remote profile API."""

    store_name = "remote"

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{(base_url or settings.profile_api_base_url).rstrip('/')}{PROFILE_PATH}"
        self._headers = {"Authorization": f"Bearer {access_token or settings.profile_api_token}"}
        self._client = client

    async def fetch(self) -> StoredProfile | None:
        resp = await self._call("fetch", "GET")
        if resp.status_code == 404:
            profile_store_calls_total.labels(operation="fetch", outcome="missing").inc()
            return None
        self._raise_for_status("fetch", resp)
        try:
            profile = StoredProfile.model_validate(resp.json())
        except (ValueError, pydantic.ValidationError) as exc:
            profile_store_calls_total.labels(operation="fetch", outcome="error").inc()
            raise ProfileStoreError("fetch", f"malformed profile record: {exc}") from exc
        profile_store_calls_total.labels(operation="fetch", outcome="ok").inc()
        return profile

    async def write(self, payload: WritePayload) -> None:
        resp = await self._call("write", "PUT", json=payload.model_dump(by_alias=True))
        self._raise_for_status("write", resp)
        profile_store_calls_total.labels(operation="write", outcome="ok").inc()

    async def delete(self) -> None:
        resp = await self._call("delete", "DELETE")
        if resp.status_code == 404:
            # nothing stored; the caller resets to defaults either way
            profile_store_calls_total.labels(operation="delete", outcome="missing").inc()
            return
        self._raise_for_status("delete", resp)
        profile_store_calls_total.labels(operation="delete", outcome="ok").inc()

    async def _call(self, operation: str, method: str, **kwargs) -> httpx.Response:
        try:
            with profile_store_duration_seconds.labels(operation=operation).time():
                if self._client is not None:
                    return await self._send(self._client, method, **kwargs)
                async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as client:
                    return await self._send(client, method, **kwargs)
        except (TransientHTTPError, httpx.HTTPError) as exc:
            profile_store_calls_total.labels(operation=operation, outcome="error").inc()
            logger.warning("profile_store_unreachable", operation=operation, error=str(exc))
            raise ProfileStoreError(operation, str(exc)) from exc

    async def _send(self, client: httpx.AsyncClient, method: str, **kwargs) -> httpx.Response:
        return await request_with_retry(client, method, self._url, headers=self._headers, **kwargs)

    @staticmethod
    def _raise_for_status(operation: str, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        profile_store_calls_total.labels(operation=operation, outcome="error").inc()
        raise ProfileStoreError(operation, f"HTTP {resp.status_code}: {resp.text[:200]}")
