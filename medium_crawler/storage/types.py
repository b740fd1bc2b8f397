from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ArticleStub:
    title: str
    link: str
    preview: str


@dataclass(frozen=True)
class EnrichedArticle:
    title: str
    link: str
    preview: str
    full_content: str

    @classmethod
    def from_stub(cls, stub: ArticleStub, full_content: str) -> EnrichedArticle:
        return cls(
            title=stub.title,
            link=stub.link,
            preview=stub.preview,
            full_content=full_content or "",
        )

    def to_dict(self) -> dict[str, Any]:
        # Key order is the on-disk record order.
        return {
            "title": self.title,
            "link": self.link,
            "preview": self.preview,
            "fullContent": self.full_content,
        }


@dataclass(frozen=True)
class FetchResult:
    html: str | None
    error_type: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, html: str) -> FetchResult:
        return cls(html=html)

    @classmethod
    def failure(cls, error_type: str, reason: str) -> FetchResult:
        return cls(html=None, error_type=error_type, reason=reason)

    @property
    def failed(self) -> bool:
        return self.html is None


@dataclass(frozen=True)
class CrawlResult:
    username: str
    articles: list[EnrichedArticle]
