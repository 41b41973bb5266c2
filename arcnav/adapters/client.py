"""httpx-backed ArcGIS REST adapter set used by the navigation controller."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import ArcgisRequestError
from .portal import PortalAdaptersMixin
from .server import ServerAdaptersMixin

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 100


class ArcgisAdapters(ServerAdaptersMixin, PortalAdaptersMixin):
    """Server and portal listings over one shared ``httpx.AsyncClient``.

    ``token`` is passed through as a query parameter when set; obtaining it is
    the caller's business.
    """

    def __init__(
        self,
        *,
        server_host: str | None = None,
        portal_host: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.server_host = server_host
        self.portal_host = portal_host
        self.token = token
        self.timeout = timeout
        self.page_size = max(1, page_size)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ArcgisAdapters:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def fetch_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET ``url`` with ``f=json`` and unwrap ArcGIS error envelopes."""
        query: dict[str, Any] = {"f": "json"}
        if self.token:
            query["token"] = self.token
        if params:
            query.update(params)

        logger.debug("GET %s", url)
        try:
            response = await self.client.get(url, params=query)
        except httpx.TimeoutException as exc:
            raise ArcgisRequestError(f"Request to {url} timed out", url=url) from exc
        except httpx.HTTPError as exc:
            raise ArcgisRequestError(f"Request to {url} failed: {exc}", url=url) from exc

        if response.status_code >= 400:
            raise ArcgisRequestError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                url=url,
                code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ArcgisRequestError(f"Invalid JSON from {url}", url=url) from exc
        if not isinstance(data, dict):
            raise ArcgisRequestError(f"Unexpected response shape from {url}", url=url)

        error = data.get("error")
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message") or f"ArcGIS error {code}"
            raise ArcgisRequestError(
                str(message),
                url=url,
                code=code if isinstance(code, int) else None,
            )
        return data


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ArcgisAdapters",
]
