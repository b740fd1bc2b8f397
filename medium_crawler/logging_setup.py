from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import TextIO


_HANDLER_ATTR = "_medium_crawler_handler"


def setup_logging(level: str, log_file: str, stream: TextIO | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Calling twice (e.g. main() from tests) replaces our handlers instead of stacking them.
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    # stdout carries the article summary, so logs go to stderr.
    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handlers.append(stream_handler)

    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_ATTR, True)
        root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
