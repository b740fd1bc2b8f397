from __future__ import annotations

import logging

import httpx

from medium_crawler.crawler.errors import (
    FetchError,
    ERROR_HTTP,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)
from medium_crawler.storage.types import FetchResult


logger = logging.getLogger(__name__)


def _redact_detail(detail: str) -> str:
    detail = detail.strip()
    if len(detail) > 240:
        detail = detail[:240] + "…"
    return detail


class HttpPageFetcher:
    def __init__(
        self,
        user_agent: str,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(timeout_seconds),
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_html(self, url: str) -> str:
        try:
            resp = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(ERROR_TIMEOUT, _redact_detail(str(e) or type(e).__name__)) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(ERROR_HTTP, _redact_detail(str(e) or type(e).__name__)) from e

        if resp.status_code == 429:
            raise FetchError(ERROR_HTTP, "429 too many requests")
        if resp.status_code >= 500:
            raise FetchError(ERROR_HTTP, f"{resp.status_code} server error")
        if resp.status_code >= 400:
            raise FetchError(ERROR_HTTP, f"{resp.status_code} client error")
        if not resp.is_success:
            raise FetchError(ERROR_HTTP, f"{resp.status_code} unexpected status")

        return resp.text

    async def fetch(self, url: str) -> FetchResult:
        """GET ``url`` once and return its HTML or a failure result.

        Never raises for network or status problems; those come back
        as ``FetchResult.failure`` with a short reason.
        """
        try:
            html = await self._get_html(url)
        except FetchError as e:
            logger.warning("page fetch failed type=%s detail=%s url=%s", e.error_type, e.detail, url)
            return FetchResult.failure(e.error_type, e.detail)
        except Exception as e:  # pragma: no cover
            logger.warning("page fetch failed type=%s detail=%s url=%s", ERROR_UNKNOWN, e, url)
            return FetchResult.failure(ERROR_UNKNOWN, _redact_detail(str(e)))

        return FetchResult.success(html)
