from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from medium_crawler.config import load_config
from medium_crawler.console.render import render_summary
from medium_crawler.crawler.errors import CrawlerError
from medium_crawler.jobs.pipeline import run
from medium_crawler.logging_setup import setup_logging
from medium_crawler.metrics.metrics import Metrics, write_status_json
from medium_crawler.storage.output import output_path, write_articles_json
from medium_crawler.utils import now_utc


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="medium-crawler",
        description="Fetch a Medium author's articles with their full text.",
    )
    parser.add_argument(
        "profile",
        nargs="?",
        help="Medium username or profile URL (e.g. https://medium.com/@jane).",
    )
    parser.add_argument(
        "--env",
        default=".env",
        help="Path to .env file (default: .env).",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum simultaneous page fetches (default: CONCURRENCY_LIMIT or 5).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for <username>_articles.json (default: OUTPUT_DIR or .).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.profile:
        parser.print_usage(sys.stderr)
        return 2

    env_path = Path(args.env)
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    try:
        config = load_config().with_overrides(
            concurrency_limit=args.concurrency,
            output_dir=args.output_dir,
        )
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    setup_logging(config.log_level, config.log_file)

    metrics = Metrics()
    try:
        result = asyncio.run(run(config, args.profile, metrics=metrics))
    except CrawlerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render_summary(result, config.snippet_chars))

    path = output_path(config.output_dir, result.username)
    try:
        write_articles_json(path, result.articles)
    except CrawlerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if config.status_json_path:
        status = {"username": result.username, "finished_at": now_utc().isoformat()}
        status.update(metrics.snapshot())
        try:
            write_status_json(Path(config.status_json_path), status)
        except OSError:
            logger.exception("status write failed")

    print(f"All articles saved to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
