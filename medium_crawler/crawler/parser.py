from __future__ import annotations

from selectolax.parser import HTMLParser

from medium_crawler.utils import collapse_ws


# Paragraphs nested inside the article container. Medium pages that render
# their body elsewhere yield no text here.
ARTICLE_PARAGRAPH_SELECTOR = "article p"


def _parse(html: str) -> HTMLParser:
    tree = HTMLParser(html)
    # Remove some noise
    for node in tree.css("script, style, noscript"):
        node.decompose()
    return tree


def extract_article_text(html: str) -> str:
    if not html:
        return ""

    tree = _parse(html)
    paragraphs = [node.text() for node in tree.css(ARTICLE_PARAGRAPH_SELECTOR)]
    if not paragraphs:
        return ""
    return "\n".join(paragraphs).strip()


def html_to_text(fragment: str) -> str:
    """Plain text of an HTML fragment, e.g. a feed item's ``content:encoded``."""
    if not fragment:
        return ""
    tree = _parse(fragment)
    return collapse_ws(tree.text(separator=" "))
