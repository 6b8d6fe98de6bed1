from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class FeedSpec:
    url: str
    data: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    timeout: Optional[int] = None


Feed = Union[str, Mapping[str, Any], FeedSpec]


@dataclass
class JobRequest:
    url: str
    data: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    retries: int = 0
    timeout: Optional[int] = None


@dataclass
class Job:
    """One feed travelling through the pipeline.

    ``res`` and ``state`` are free-form: engines and middlewares write
    whatever they find into them. A failed job carries ``res["error"]``."""

    req: JobRequest
    original: Any = None
    id: str = field(default_factory=lambda: f"Job[{uuid.uuid4()}]")
    res: Dict[str, Any] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ScraperState:
    fulfilled: bool = False
    locked: bool = False
    paused: bool = False
    running: bool = False


@dataclass(frozen=True)
class ScraperOptions:
    """Scraper configuration. Never mutated: ``merge`` returns a new value."""

    max_concurrency: int = 1
    timeout: int = 20000  # ms
    engine: Mapping[str, Any] = field(default_factory=dict)

    def merge(self, patch: Mapping[str, Any]) -> "ScraperOptions":
        if not isinstance(patch, Mapping):
            raise ConfigurationError("config: wrong argument.")

        known = {f.name for f in fields(self)}
        unknown = sorted(set(patch) - known)
        if unknown:
            raise ConfigurationError(f"config: unknown option(s) {', '.join(unknown)}.")

        changes: Dict[str, Any] = dict(patch)
        if "max_concurrency" in changes:
            value = changes["max_concurrency"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError("config: max_concurrency must be a positive integer.")
        if "timeout" in changes:
            _check_timeout(changes["timeout"], "config")
        if "engine" in changes:
            if not isinstance(changes["engine"], Mapping):
                raise ConfigurationError("config: engine must be a mapping.")
            # Engine settings are merged key by key.
            changes["engine"] = {**self.engine, **changes["engine"]}

        return replace(self, **changes)


def _check_timeout(value: Any, where: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"{where}: timeout must be a positive number of milliseconds.")


def normalize_feed(feed: Feed) -> FeedSpec:
    """Turn a caller feed (url string, mapping or FeedSpec) into a FeedSpec."""
    if isinstance(feed, FeedSpec):
        spec = feed
    elif isinstance(feed, str):
        spec = FeedSpec(url=feed)
    elif isinstance(feed, Mapping):
        url = feed.get("url")
        if not url:
            raise ConfigurationError("url(s): no url provided.")
        spec = FeedSpec(
            url=url,
            data=feed.get("data") or {},
            params=feed.get("params") or {},
            timeout=feed.get("timeout"),
        )
    else:
        raise ConfigurationError("url(s): wrong argument.")

    if not isinstance(spec.url, str) or not spec.url:
        raise ConfigurationError("url(s): no url provided.")
    if not isinstance(spec.data, Mapping) or not isinstance(spec.params, Mapping):
        raise ConfigurationError("url(s): data and params must be mappings.")
    if spec.timeout is not None:
        _check_timeout(spec.timeout, "url(s)")
    return spec


def create_job(feed: Feed) -> Job:
    spec = normalize_feed(feed)
    req = JobRequest(
        url=spec.url,
        data=dict(spec.data),
        params=dict(spec.params),
    )
    if spec.timeout is not None:
        req.timeout = spec.timeout
    return Job(req=req, original=feed)
