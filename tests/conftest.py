from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest


def pytest_sessionstart(session) -> None:
    # Ensure project root is importable for tests
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))


def article_html(*paragraphs: str) -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return f"<html><head><title>t</title></head><body><nav><p>menu</p></nav><article>{body}</article></body></html>"


class FakeFetcher:
    """In-memory page fetcher that records how many fetches overlap."""

    def __init__(self, pages: dict, delays: dict | None = None) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.batches: list[list[str]] = []
        self._current: list[str] = []

    async def fetch(self, url: str):
        from medium_crawler.storage.types import FetchResult

        if self.in_flight == 0:
            self._current = []
            self.batches.append(self._current)
        self._current.append(url)
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            page = self.pages.get(url)
            if isinstance(page, Exception):
                raise page
            if page is None:
                return FetchResult.failure("HTTP_ERROR", "404 client error")
            return FetchResult.success(page)
        finally:
            self.in_flight -= 1


@pytest.fixture
def make_stubs():
    from medium_crawler.storage.types import ArticleStub

    def _make(n: int) -> list:
        return [
            ArticleStub(title=f"Post {i}", link=f"https://medium.com/@u/post-{i}", preview=f"preview {i}")
            for i in range(n)
        ]

    return _make
