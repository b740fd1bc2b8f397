from __future__ import annotations

import re
from datetime import datetime, timezone

from medium_crawler.crawler.errors import InvalidProfileReference


_HANDLE_RE = re.compile(r"@([\w\-]+)")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def extract_username(value: str) -> str:
    """Return the Medium handle from a profile URL, or ``value`` unchanged.

    ``https://medium.com/@jane-doe/?source=feed`` -> ``jane-doe``. Anything not
    starting with ``http`` is taken to be a bare username already. Bare
    usernames name the output file, so path separators are rejected.
    """
    if not value.startswith("http"):
        if "/" in value or "\\" in value:
            raise InvalidProfileReference(value)
        return value

    url = value.split("?", 1)[0]
    if url.endswith("/"):
        url = url[:-1]
    m = _HANDLE_RE.search(url)
    if m is None:
        raise InvalidProfileReference(value)
    return m.group(1)


def collapse_ws(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def chunked(items: list, size: int):
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]
