from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import logging
import os


DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"


def _env_str(name: str, default: str | None = None) -> str:
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required env: {name}")
        return default
    return value


def _env_int(name: str, default: int | None = None) -> int:
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required env: {name}")
        return default
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for env {name}: {value!r}") from e


@dataclass(frozen=True)
class Config:
    # Feed
    feed_base_url: str
    feed_timeout_seconds: int

    # Page fetching
    user_agent: str
    http_timeout_seconds: int
    concurrency_limit: int

    # Output
    output_dir: Path
    snippet_chars: int
    status_json_path: str

    # Logging
    log_level: str
    log_file: str

    def with_overrides(self, **changes) -> Config:
        changes = {k: v for k, v in changes.items() if v is not None}
        config = replace(self, **changes)
        _validate(config)
        return config


def _validate(config: Config) -> None:
    if config.concurrency_limit < 1:
        raise RuntimeError(f"CONCURRENCY_LIMIT must be >= 1, got {config.concurrency_limit}")
    if not isinstance(logging.getLevelName(config.log_level.upper()), int):
        raise RuntimeError(f"Unknown LOG_LEVEL: {config.log_level!r}")


def load_config() -> Config:
    config = Config(
        feed_base_url=_env_str("FEED_BASE_URL", "https://medium.com/feed"),
        feed_timeout_seconds=_env_int("FEED_TIMEOUT_SECONDS", 20),
        user_agent=_env_str("USER_AGENT", DEFAULT_USER_AGENT),
        http_timeout_seconds=_env_int("HTTP_TIMEOUT_SECONDS", 30),
        concurrency_limit=_env_int("CONCURRENCY_LIMIT", 5),
        output_dir=Path(_env_str("OUTPUT_DIR", ".")),
        snippet_chars=_env_int("SNIPPET_CHARS", 200),
        status_json_path=_env_str("STATUS_JSON_PATH", ""),
        log_level=_env_str("LOG_LEVEL", "WARNING"),
        log_file=_env_str("LOG_FILE", ""),
    )
    _validate(config)
    return config
