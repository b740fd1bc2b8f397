from __future__ import annotations

import logging

import feedparser
import httpx

from medium_crawler.crawler.errors import FeedRetrievalFailure
from medium_crawler.crawler.parser import html_to_text
from medium_crawler.metrics.metrics import Metrics
from medium_crawler.storage.types import ArticleStub
from medium_crawler.utils import collapse_ws


logger = logging.getLogger(__name__)


def _entry_preview(entry: dict) -> str:
    # content:encoded carries the full post body; fall back to the description.
    contents = entry.get("content") or []
    for c in contents:
        value = c.get("value") if isinstance(c, dict) else None
        if value:
            return html_to_text(str(value))
    summary = entry.get("summary") or entry.get("description") or ""
    return html_to_text(str(summary))


class AsyncFeedPoller:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: int = 20,
        user_agent: str = "",
        metrics: Metrics | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._metrics = metrics if metrics is not None else Metrics()
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def feed_url(self, username: str) -> str:
        return f"{self._base_url}/@{username}"

    async def poll(self, username: str) -> list[ArticleStub]:
        url = self.feed_url(username)
        self._metrics.feed_polls_total.inc()
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            body = resp.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedRetrievalFailure(url, str(e) or type(e).__name__) from e

        feed = feedparser.parse(body)
        if getattr(feed, "bozo", 0):
            if not feed.entries and not feed.get("version"):
                raise FeedRetrievalFailure(url, f"unparseable feed: {getattr(feed, 'bozo_exception', None)}")
            logger.warning("rss parse bozo=%s error=%s", feed.bozo, getattr(feed, "bozo_exception", None))

        items: list[ArticleStub] = []
        for entry in feed.entries:
            link = entry.get("link")
            if not link:
                logger.debug("skipping feed entry without link title=%r", entry.get("title"))
                continue
            items.append(
                ArticleStub(
                    title=collapse_ws(str(entry.get("title") or "")),
                    link=str(link),
                    preview=_entry_preview(entry),
                )
            )

        self._metrics.articles_discovered_total.inc(len(items))
        logger.info("rss poll @%s: %s items", username, len(items))
        return items

    async def fetch_stubs(self, username: str) -> list[ArticleStub]:
        """Like ``poll`` but degrades to an empty list when the feed is unavailable."""
        try:
            return await self.poll(username)
        except FeedRetrievalFailure as e:
            self._metrics.feed_failures_total.inc()
            logger.error("Error fetching RSS feed: %s", e)
            return []
