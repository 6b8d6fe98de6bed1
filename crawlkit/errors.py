from __future__ import annotations

from typing import Optional


class CrawlError(Exception):
    """Base class for every error raised by crawlkit itself."""


class ConfigurationError(CrawlError, ValueError):
    """Invalid argument given to a setup call (urls, middlewares, options...).

    Raised synchronously at call time and never recovered by the scraper."""


class JobError(CrawlError):
    """Failure of a single job. Stored on ``job.res["error"]``."""

    def __init__(self, message: str = "", status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LifecycleError(CrawlError):
    """Failure of a scraper-start middleware. Aborts the whole run.

    Never raised by crawlkit itself: meant to be raised by user ``before``
    middlewares."""
