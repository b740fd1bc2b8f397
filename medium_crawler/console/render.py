from __future__ import annotations

from medium_crawler.storage.types import CrawlResult, EnrichedArticle


def render_article(index: int, article: EnrichedArticle, snippet_chars: int = 200) -> str:
    lines: list[str] = [
        f"[{index}] {article.title}",
        f"Link: {article.link}",
        f"Preview: {article.preview}",
        f"Full content snippet: {article.full_content[:snippet_chars]}...",
    ]
    return "\n".join(lines)


def render_summary(result: CrawlResult, snippet_chars: int = 200) -> str:
    blocks: list[str] = [f"Found {len(result.articles)} articles for @{result.username}\n"]
    for i, article in enumerate(result.articles, start=1):
        blocks.append(render_article(i, article, snippet_chars) + "\n")
    return "\n".join(blocks)
