from __future__ import annotations


class CrawlerError(Exception):
    pass


class InvalidProfileReference(CrawlerError, ValueError):
    def __init__(self, value: str):
        super().__init__("Invalid Medium profile URL. Could not extract username.")
        self.value = value


class FeedRetrievalFailure(CrawlerError):
    def __init__(self, feed_url: str, detail: str = ""):
        super().__init__(f"feed retrieval failed for {feed_url}: {detail}")
        self.feed_url = feed_url
        self.detail = detail


class FetchError(CrawlerError):
    def __init__(self, error_type: str, detail: str = ""):
        super().__init__(f"{error_type}: {detail}")
        self.error_type = error_type
        self.detail = detail


class ExtractionFailure(CrawlerError):
    def __init__(self, url: str, detail: str = ""):
        super().__init__(f"extraction failed for {url}: {detail}")
        self.url = url
        self.detail = detail


class FileWriteFailure(CrawlerError):
    def __init__(self, path: str, detail: str = ""):
        super().__init__(f"could not write {path}: {detail}")
        self.path = path
        self.detail = detail


ERROR_HTTP = "HTTP_ERROR"
ERROR_TIMEOUT = "TIMEOUT"
ERROR_UNKNOWN = "UNKNOWN"
