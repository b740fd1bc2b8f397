from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram


logger = logging.getLogger(__name__)


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        r = self.registry

        self.feed_polls_total = Counter("feed_polls_total", "Total feed polls", registry=r)
        self.feed_failures_total = Counter("feed_failures_total", "Feed retrieval failures", registry=r)
        self.articles_discovered_total = Counter("articles_discovered_total", "Discovered articles", registry=r)

        self.fetch_success_total = Counter("fetch_success_total", "Page fetch success", registry=r)
        self.fetch_fail_total = Counter("fetch_fail_total", "Page fetch failures", ["error_type"], registry=r)
        self.extract_empty_total = Counter("extract_empty_total", "Articles enriched with empty content", registry=r)
        self.batches_total = Counter("batches_total", "Fetch batches run", registry=r)

        self.fetch_latency_seconds = Histogram(
            "fetch_latency_seconds", "Page fetch latency", buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60), registry=r
        )
        self.fetches_in_flight = Gauge("fetches_in_flight", "Page fetches currently in flight", registry=r)

    def _value(self, name: str, labels: dict[str, str] | None = None) -> float:
        value = self.registry.get_sample_value(name, labels or {})
        return float(value or 0.0)

    def snapshot(self) -> dict[str, Any]:
        fetch_failures = 0.0
        for metric in self.fetch_fail_total.collect():
            for sample in metric.samples:
                if sample.name == "fetch_fail_total":
                    fetch_failures += sample.value

        return {
            "feed_polls": int(self._value("feed_polls_total")),
            "feed_failures": int(self._value("feed_failures_total")),
            "articles_discovered": int(self._value("articles_discovered_total")),
            "fetch_success": int(self._value("fetch_success_total")),
            "fetch_failures": int(fetch_failures),
            "extract_empty": int(self._value("extract_empty_total")),
            "batches": int(self._value("batches_total")),
        }


def write_status_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp.replace(path)
    logger.info("status written to %s", path)
