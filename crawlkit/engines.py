from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

import requests
from curl_cffi import requests as curl_requests

from .errors import JobError
from .models import Job

if TYPE_CHECKING:
    from .scraper import Scraper


class Engine(ABC):
    """Performs the actual fetch of one job.

    ``fetch`` writes what it found into ``job.res`` and raises on failure.
    It may be called from several worker threads at once, so implementations
    must not keep per-job state on the instance."""

    @abstractmethod
    def fetch(self, job: Job) -> None:
        ...


class StaticEngine(Engine):
    """Plain HTTP engine: download the page, hand the body to the parser.

    Engine settings (``options.engine``):
    - method: HTTP method, GET by default.
    - headers: extra request headers.
    - impersonate: browser profile for curl_cffi (e.g. "chrome120"). When
      unset the request goes through requests.
    """

    def __init__(self, scraper: "Scraper") -> None:
        self._scraper = scraper

    def fetch(self, job: Job) -> None:
        options = self._scraper.options
        settings = options.engine
        timeout_s = (job.req.timeout or options.timeout) / 1000.0

        start_ms = self._now_ms()
        response = self._request(
            method=str(settings.get("method", "GET")).upper(),
            url=job.req.url,
            params=job.req.params or None,
            headers=settings.get("headers"),
            timeout=timeout_s,
            impersonate=settings.get("impersonate"),
        )
        status_code = getattr(response, "status_code", None)

        job.res["url"] = str(getattr(response, "url", job.req.url))
        job.res["status_code"] = status_code
        job.res["headers"] = dict(getattr(response, "headers", None) or {})
        job.res["body"] = getattr(response, "text", "")
        job.res["latency_ms"] = self._now_ms() - start_ms

        # Any 2xx is a success.
        if status_code is None or not 200 <= int(status_code) < 300:
            raise JobError(f"HTTP_{status_code}", status_code=status_code)

        job.res["data"] = self._scraper.parser(job.res["body"], job.req)

    @staticmethod
    def _request(
        method: str,
        url: str,
        params: Optional[dict],
        headers: Optional[dict],
        timeout: float,
        impersonate: Optional[str],
    ) -> Any:
        if impersonate:
            session = curl_requests.Session()
            try:
                return session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    impersonate=impersonate,
                    timeout=timeout,
                )
            finally:
                session.close()
        return requests.request(method, url, params=params, headers=headers, timeout=timeout)

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
