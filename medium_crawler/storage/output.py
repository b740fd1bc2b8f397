from __future__ import annotations

import json
import logging
from pathlib import Path

from medium_crawler.crawler.errors import FileWriteFailure
from medium_crawler.storage.types import EnrichedArticle


logger = logging.getLogger(__name__)


def output_path(output_dir: Path, username: str) -> Path:
    return Path(output_dir) / f"{username}_articles.json"


def write_articles_json(path: Path, articles: list[EnrichedArticle]) -> Path:
    data = [a.to_dict() for a in articles]
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(path)
    except OSError as e:
        raise FileWriteFailure(str(path), str(e)) from e

    logger.info("wrote %s articles to %s", len(data), path)
    return path
