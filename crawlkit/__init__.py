"""Bounded-concurrency scraping pipeline.

Feeds become jobs that run through ``before_scraping`` middlewares, a fetch
engine and ``after_scraping`` middlewares on a pool of worker threads, while
the scraper tracks its lifecycle and emits events.

Key modules:
    scraper     -- Scraper: configuration surface and lifecycle
    job_queue   -- JobQueue bounded worker pool with pause/resume/drain
    pipeline    -- Middlewares and apply_each_series
    events      -- EventBus and event names
    models      -- Job, JobRequest, FeedSpec, ScraperOptions, create_job
    engines     -- Engine contract and StaticEngine (requests / curl_cffi)
    scripts     -- AutomationScript loading
    plugins     -- validate plugin (pydantic)
    metrics     -- MetricsCollector plugin
    storage     -- JsonlStorage result sink
    factory     -- static_scraper, automated_scraper, create_scraper
"""
from .errors import ConfigurationError, CrawlError, JobError, LifecycleError  # noqa: F401
from .factory import automated_scraper, create_scraper, static_scraper  # noqa: F401
from .models import FeedSpec, Job, JobRequest, ScraperOptions, create_job  # noqa: F401
from .scraper import Scraper  # noqa: F401

__version__ = "0.1.0"
