from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from medium_crawler.config import Config
from medium_crawler.crawler.http_fetcher import HttpPageFetcher
from medium_crawler.crawler.service import EnrichmentService
from medium_crawler.metrics.metrics import Metrics
from medium_crawler.rss.poller import AsyncFeedPoller
from medium_crawler.storage.types import CrawlResult
from medium_crawler.utils import extract_username


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: Config
    feed: AsyncFeedPoller
    fetcher: HttpPageFetcher
    enricher: EnrichmentService
    metrics: Metrics


def build_app_context(
    config: Config,
    metrics: Metrics | None = None,
    page_transport: httpx.AsyncBaseTransport | None = None,
    feed_transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    if metrics is None:
        metrics = Metrics()

    fetcher = HttpPageFetcher(
        user_agent=config.user_agent,
        timeout_seconds=config.http_timeout_seconds,
        transport=page_transport,
    )

    feed = AsyncFeedPoller(
        config.feed_base_url,
        timeout_seconds=config.feed_timeout_seconds,
        user_agent=config.user_agent,
        metrics=metrics,
        transport=feed_transport,
    )

    return AppContext(
        config=config,
        feed=feed,
        fetcher=fetcher,
        enricher=EnrichmentService(fetcher, metrics=metrics),
        metrics=metrics,
    )


async def close_app_context(ctx: AppContext) -> None:
    await ctx.fetcher.aclose()
    await ctx.feed.aclose()


async def crawl_profile(ctx: AppContext, username_or_url: str) -> CrawlResult:
    return await _crawl_username(ctx, extract_username(username_or_url))


async def _crawl_username(ctx: AppContext, username: str) -> CrawlResult:
    stubs = await ctx.feed.fetch_stubs(username)
    articles = await ctx.enricher.enrich(stubs, ctx.config.concurrency_limit)
    logger.info("crawl @%s done: %s articles", username, len(articles))
    return CrawlResult(username=username, articles=articles)


async def run(
    config: Config,
    username_or_url: str,
    metrics: Metrics | None = None,
    page_transport: httpx.AsyncBaseTransport | None = None,
    feed_transport: httpx.AsyncBaseTransport | None = None,
) -> CrawlResult:
    """Crawl one profile end to end.

    The username is resolved before any HTTP client is opened, so a malformed
    profile URL raises ``InvalidProfileReference`` without network activity.
    """
    username = extract_username(username_or_url)

    ctx = build_app_context(
        config,
        metrics=metrics,
        page_transport=page_transport,
        feed_transport=feed_transport,
    )
    try:
        return await _crawl_username(ctx, username)
    finally:
        await close_app_context(ctx)
