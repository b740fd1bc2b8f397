from __future__ import annotations

import io
import logging

from medium_crawler.logging_setup import setup_logging


def test_setup_logging_writes_to_given_stream_and_does_not_stack(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    stream = io.StringIO()
    log_file = tmp_path / "crawler.log"
    try:
        setup_logging("info", str(log_file), stream=stream)
        setup_logging("info", str(log_file), stream=stream)
        logging.getLogger("medium_crawler.test").info("hello %s", "there")

        added = [h for h in root.handlers if h not in before]
        assert len(added) == 2
        assert stream.getvalue().count("hello there") == 1
        assert "INFO medium_crawler.test: hello there" in stream.getvalue()
        assert "hello there" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
                h.close()
        root.setLevel(level)
