"""Shared HTTP plumbing for the upstream feed adapters."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from nzaurora.middleware.logging import log_error, log_warning

USER_AGENT = "nzaurora/0.1 (+https://github.com/nzaurora)"


class JsonFeedAdapter:
    """Base class issuing JSON GET/POST requests.

    Requests never raise: network errors, non-2xx statuses and bodies that
    are not JSON are logged and reported as ``None`` so a failed poll
    leaves the previous state in place. ``transport`` is forwarded to
    :class:`httpx.AsyncClient` and lets tests substitute a mock.
    """

    feed = "feed"

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            headers={"User-Agent": USER_AGENT},
        )

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET ``url`` and decode the JSON body, or ``None`` on any failure."""
        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            log_error(
                f"{self.feed}_fetch_error",
                error=f"HTTP {e.response.status_code}",
                url=url,
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            log_error(f"{self.feed}_fetch_error", error=str(e), url=url)
            return None

    async def _post_json(self, url: str, payload: Dict[str, Any]) -> Optional[Any]:
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            log_warning(
                f"{self.feed}_rejected",
                status_code=e.response.status_code,
                url=url,
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            log_error(f"{self.feed}_post_error", error=str(e), url=url)
            return None
