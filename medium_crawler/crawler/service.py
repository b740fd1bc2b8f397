from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Protocol

from medium_crawler.crawler.errors import ExtractionFailure, ERROR_UNKNOWN
from medium_crawler.crawler.parser import extract_article_text
from medium_crawler.metrics.metrics import Metrics
from medium_crawler.storage.types import ArticleStub, EnrichedArticle, FetchResult
from medium_crawler.utils import chunked


logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...


class EnrichmentService:
    """Fetch and extract full article text for feed stubs, batch by batch.

    At most ``concurrency_limit`` fetches are in flight at once: each batch is
    gathered to completion before the next one starts. Results are placed by
    position, so output order always matches input order. A failing article
    only loses its ``full_content``; nothing raises out of ``enrich``.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        metrics: Metrics | None = None,
        extractor: Callable[[str], str] = extract_article_text,
    ) -> None:
        self._fetcher = fetcher
        self._metrics = metrics if metrics is not None else Metrics()
        self._extract = extractor

    async def _fetch(self, url: str) -> FetchResult:
        m = self._metrics
        m.fetches_in_flight.inc()
        started = time.perf_counter()
        try:
            return await self._fetcher.fetch(url)
        except Exception as e:
            # Fetchers are expected to return failures, not raise them.
            logger.warning("page fetcher raised url=%s err=%s", url, e)
            return FetchResult.failure(ERROR_UNKNOWN, str(e)[:240])
        finally:
            m.fetch_latency_seconds.observe(time.perf_counter() - started)
            m.fetches_in_flight.dec()

    def _extract_text(self, url: str, html: str) -> str:
        try:
            return self._extract(html)
        except Exception as e:
            err = ExtractionFailure(url, str(e)[:240])
            logger.warning("%s", err)
            return ""

    async def enrich_one(self, stub: ArticleStub) -> EnrichedArticle:
        result = await self._fetch(stub.link)
        if result.failed:
            self._metrics.fetch_fail_total.labels(error_type=result.error_type or ERROR_UNKNOWN).inc()
            content = ""
        else:
            self._metrics.fetch_success_total.inc()
            content = self._extract_text(stub.link, result.html or "")

        if not content:
            self._metrics.extract_empty_total.inc()
        return EnrichedArticle.from_stub(stub, content)

    async def enrich(self, stubs: list[ArticleStub], concurrency_limit: int) -> list[EnrichedArticle]:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")

        stubs = list(stubs)
        results: list[EnrichedArticle] = []
        if not stubs:
            return results

        started = time.perf_counter()
        for batch_no, batch in enumerate(chunked(stubs, concurrency_limit), start=1):
            logger.debug("batch %s: %s articles", batch_no, len(batch))
            self._metrics.batches_total.inc()
            # gather keeps the input order of its awaitables.
            batch_results = await asyncio.gather(*(self.enrich_one(stub) for stub in batch))
            results.extend(batch_results)

        empty = sum(1 for a in results if not a.full_content)
        logger.info(
            "enriched %s articles (%s without content) in %.2fs",
            len(results),
            empty,
            time.perf_counter() - started,
        )
        return results
