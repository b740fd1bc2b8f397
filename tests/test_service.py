from __future__ import annotations

import asyncio

import pytest

from conftest import FakeFetcher, article_html
from medium_crawler.crawler.service import EnrichmentService
from medium_crawler.metrics.metrics import Metrics


def _pages_for(stubs) -> dict:
    return {s.link: article_html(f"Body of {s.title}") for s in stubs}


def test_enrich_preserves_order_when_completion_is_reversed(make_stubs):
    stubs = make_stubs(7)
    # Earlier items finish last.
    delays = {s.link: 0.01 * (len(stubs) - i) for i, s in enumerate(stubs)}
    fetcher = FakeFetcher(_pages_for(stubs), delays)

    out = asyncio.run(EnrichmentService(fetcher).enrich(stubs, 3))

    assert [a.link for a in out] == [s.link for s in stubs]
    assert [a.full_content for a in out] == [f"Body of {s.title}" for s in stubs]
    assert [a.title for a in out] == [s.title for s in stubs]
    assert [a.preview for a in out] == [s.preview for s in stubs]


@pytest.mark.parametrize("n,k", [(0, 1), (1, 1), (4, 1), (5, 5), (6, 5), (3, 10), (13, 4)])
def test_enrich_returns_one_entry_per_stub_and_respects_ceiling(make_stubs, n, k):
    stubs = make_stubs(n)
    fetcher = FakeFetcher(_pages_for(stubs))

    out = asyncio.run(EnrichmentService(fetcher).enrich(stubs, k))

    assert len(out) == n
    assert [a.link for a in out] == [s.link for s in stubs]
    assert fetcher.max_in_flight <= k
    assert len(fetcher.calls) == n


def test_twelve_stubs_limit_five_with_one_failure(make_stubs):
    stubs = make_stubs(12)
    pages = _pages_for(stubs)
    # Third task of the second batch.
    failing = stubs[7].link
    del pages[failing]
    fetcher = FakeFetcher(pages, {s.link: 0.001 * (i % 3) for i, s in enumerate(stubs)})
    metrics = Metrics()

    out = asyncio.run(EnrichmentService(fetcher, metrics=metrics).enrich(stubs, 5))

    assert [len(b) for b in fetcher.batches] == [5, 5, 2]
    assert fetcher.batches[1][2] == failing
    assert [a.link for a in out] == [s.link for s in stubs]
    assert out[7].full_content == ""
    assert all(a.full_content for i, a in enumerate(out) if i != 7)

    snap = metrics.snapshot()
    assert snap["batches"] == 3
    assert snap["fetch_success"] == 11
    assert snap["fetch_failures"] == 1


def test_batches_do_not_overlap(make_stubs):
    stubs = make_stubs(6)
    # A slow first item holds back the whole first batch.
    delays = {stubs[0].link: 0.05}
    fetcher = FakeFetcher(_pages_for(stubs), delays)

    asyncio.run(EnrichmentService(fetcher).enrich(stubs, 3))

    assert fetcher.batches == [[s.link for s in stubs[:3]], [s.link for s in stubs[3:]]]


def test_empty_input_fetches_nothing():
    fetcher = FakeFetcher({})
    out = asyncio.run(EnrichmentService(fetcher).enrich([], 5))
    assert out == []
    assert fetcher.calls == []


def test_fetcher_exception_degrades_to_empty_content(make_stubs):
    stubs = make_stubs(3)
    pages = _pages_for(stubs)
    pages[stubs[1].link] = RuntimeError("connection reset")
    fetcher = FakeFetcher(pages)

    out = asyncio.run(EnrichmentService(fetcher).enrich(stubs, 2))

    assert [a.full_content for a in out] == ["Body of Post 0", "", "Body of Post 2"]


def test_extractor_exception_degrades_to_empty_content(make_stubs):
    stubs = make_stubs(2)
    fetcher = FakeFetcher(_pages_for(stubs))

    def broken_extractor(html: str) -> str:
        raise ValueError("boom")

    service = EnrichmentService(fetcher, extractor=broken_extractor)
    out = asyncio.run(service.enrich(stubs, 2))

    assert [a.full_content for a in out] == ["", ""]
    assert len(out) == 2


def test_page_without_article_paragraphs_is_empty(make_stubs):
    stubs = make_stubs(1)
    fetcher = FakeFetcher({stubs[0].link: "<html><body><div>no article here</div></body></html>"})

    out = asyncio.run(EnrichmentService(fetcher).enrich(stubs, 1))

    assert out[0].full_content == ""


def test_each_stub_is_fetched_once(make_stubs):
    stubs = make_stubs(4)
    fetcher = FakeFetcher({})

    asyncio.run(EnrichmentService(fetcher).enrich(stubs, 2))

    assert sorted(fetcher.calls) == sorted(s.link for s in stubs)


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_is_rejected(make_stubs, limit):
    fetcher = FakeFetcher({})
    with pytest.raises(ValueError):
        asyncio.run(EnrichmentService(fetcher).enrich(make_stubs(2), limit))
    assert fetcher.calls == []
