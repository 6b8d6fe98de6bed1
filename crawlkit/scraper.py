from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from . import events, plugins
from .engines import Engine
from .errors import ConfigurationError
from .events import EventBus
from .job_queue import JobQueue
from .models import Feed, Job, JobRequest, ScraperOptions, ScraperState, create_job
from .pipeline import Middlewares, Stage, apply_each_series
from .scripts import AutomationScript

logger = logging.getLogger(__name__)

RunCallback = Callable[[Optional[BaseException]], Any]


def _no_parser(body: str, req: JobRequest) -> Any:
    return None


class Scraper:
    """Scraper abstraction on which a fetch engine is mounted.

    Configuration calls (urls, middlewares, engine, parser, options) return
    the scraper so they can be chained. ``run`` then drives every job through
    ``before_scraping`` middlewares, ``engine.fetch`` and ``after_scraping``
    middlewares on a pool of ``options.max_concurrency`` workers.

    Job failures are isolated: the run still succeeds once the queue drains.
    Only a failing ``before`` middleware fails the run.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        engine: Optional[Engine] = None,
        options: Optional[ScraperOptions] = None,
    ) -> None:
        self.id = f"Scraper[{uuid.uuid4()}]"
        self.name = name or self.id[:16] + "]"

        self.options = options or ScraperOptions()
        self.engine = engine
        self.type: Optional[str] = None
        self.state = ScraperState()

        self.script: Optional[AutomationScript] = None
        self.parser: Callable[[str, JobRequest], Any] = _no_parser
        self.middlewares = Middlewares()

        self._bus = EventBus()
        self._queue: Optional[JobQueue] = None
        self._backlog: List[Job] = []
        self._lock = threading.Lock()
        self._started = False
        self._torn_down = False
        self._done = threading.Event()
        self._error: Optional[BaseException] = None

    def __repr__(self) -> str:
        return f"<Scraper {self.name!r} type={self.type!r}>"

    # Events

    def on(self, event: str, fn: Callable[..., Any]) -> "Scraper":
        if not callable(fn):
            raise ConfigurationError("on: given argument is not a function.")
        self._bus.on(event, fn)
        return self

    def off(self, event: str, fn: Callable[..., Any]) -> "Scraper":
        self._bus.off(event, fn)
        return self

    def emit(self, event: str, *args: Any) -> bool:
        return self._bus.emit(event, *args)

    def on_result(self, fn: Callable[[Optional[BaseException], JobRequest, dict], Any]) -> "Scraper":
        """Subscribe ``fn(error, req, res)`` to every job outcome."""
        if not callable(fn):
            raise ConfigurationError("result: given argument is not a function.")
        self._bus.on(events.JOB_FAIL, lambda err, job: fn(err, job.req, job.res))
        self._bus.on(events.JOB_SUCCESS, lambda job: fn(None, job.req, job.res))
        return self

    # Feeds

    def add_feeds(self, feeds: Union[Feed, List[Feed]]) -> "Scraper":
        """Queue one or several feeds. Legal before and during a run."""
        items = feeds if isinstance(feeds, (list, tuple)) else [feeds]
        # Every feed is validated before any job is queued.
        jobs = [create_job(item) for item in items]

        with self._lock:
            queue = self._queue
            live = self._started and not self._torn_down
            if queue is None:
                self._backlog.extend(jobs)

        # Emit before pushing: once pushed, a drain may detach the listeners.
        if live:
            self.emit(events.JOB_ADDED)
        if queue is not None:
            for job in jobs:
                queue.push(job)
        return self

    add_feed = add_feeds
    add_url = add_feeds
    add_urls = add_feeds

    # Middlewares

    def register_middleware(self, hook: str, fn: Stage) -> "Scraper":
        self.middlewares.register(hook, fn)
        return self

    def before(self, fn: Stage) -> "Scraper":
        return self.register_middleware("before", fn)

    def after(self, fn: Stage) -> "Scraper":
        return self.register_middleware("after", fn)

    def before_scraping(self, fn: Stage) -> "Scraper":
        return self.register_middleware("before_scraping", fn)

    def after_scraping(self, fn: Stage) -> "Scraper":
        return self.register_middleware("after_scraping", fn)

    # Engine, script, parser

    def set_engine(self, engine: Engine) -> "Scraper":
        if not callable(getattr(engine, "fetch", None)):
            raise ConfigurationError("engine: given engine has no fetch method.")
        self._ensure_not_started("engine")
        self.engine = engine
        return self

    def set_script(self, path: Union[str, Path]) -> "Scraper":
        if self.script is not None:
            raise ConfigurationError("script: script already registered.")
        self.script = AutomationScript.from_file(path)
        return self

    def set_inline_script(self, source: Union[str, Callable[..., Any]]) -> "Scraper":
        if self.script is not None:
            raise ConfigurationError("inline script: script already registered.")
        self.script = AutomationScript.from_inline(source)
        return self

    def set_parser(self, fn: Callable[[str, JobRequest], Any]) -> "Scraper":
        if not callable(fn):
            raise ConfigurationError("parse: given argument is not a function.")
        self.parser = fn
        return self

    # Options and plugins

    def configure(self, patch: Mapping[str, Any]) -> "Scraper":
        self._ensure_not_started("config")
        self.options = self.options.merge(patch)
        return self

    def set_timeout(self, ms: Union[int, float]) -> "Scraper":
        return self.configure({"timeout": ms})

    def use(self, plugin: Callable[["Scraper"], Any]) -> "Scraper":
        if not callable(plugin):
            raise ConfigurationError("use: plugin must be a function.")
        plugin(self)
        return self

    def validate(self, definition: Any) -> "Scraper":
        return self.use(plugins.validate(definition))

    # Lifecycle

    def run(self, callback: Optional[RunCallback] = None) -> Optional[BaseException]:
        """Run every queued job and block until the scraper is torn down.

        ``callback(error)`` fires exactly once; ``error`` is set only when a
        ``before`` middleware failed. The same value is returned."""
        with self._lock:
            if self._started:
                raise ConfigurationError("run: scraper has already been run.")
            if self.engine is None:
                raise ConfigurationError("run: no engine registered.")
            self._started = True
            self._queue = JobQueue(self._process, self.options.max_concurrency)
            backlog, self._backlog = self._backlog, []
        for job in backlog:
            self._queue.push(job)

        logger.info("%s starting with %d job(s)", self.name, len(backlog))
        self.emit(events.SCRAPER_START)

        try:
            apply_each_series(self.middlewares["before"])
        except Exception as err:  # noqa: BLE001
            self._error = err
            try:
                if callback:
                    callback(err)
            finally:
                self.fail(err)
            return err

        def on_drain() -> None:
            try:
                if callback:
                    callback(None)
            finally:
                self.succeed()

        self._queue.on_drain(on_drain)
        self.state.running = True
        self._queue.resume()

        self._done.wait()
        return self._error

    def fail(self, err: BaseException) -> None:
        logger.warning("%s failed: %r", self.name, err)
        try:
            self.emit(events.SCRAPER_FAIL, err)
        finally:
            self.exit("fail")

    def succeed(self) -> None:
        logger.info("%s succeeded", self.name)
        try:
            self.emit(events.SCRAPER_SUCCESS)
        finally:
            self.exit("success")

    def exit(self, status: str) -> None:
        try:
            self.emit(events.SCRAPER_END, status)
            # "after" middlewares are reserved and not run.
        finally:
            self.state.running = False
            self.state.fulfilled = True
            self.teardown()

    def teardown(self) -> None:
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True

        try:
            self.emit(events.SCRAPER_TEARDOWN)
        finally:
            if self._queue is not None:
                self._queue.kill()
            self._bus.remove_all_listeners()
            logger.debug("%s torn down", self.name)
            self._done.set()

    def _process(self, job: Job) -> None:
        try:
            apply_each_series(self.middlewares["before_scraping"], job.req)
            self.engine.fetch(job)
            apply_each_series(self.middlewares["after_scraping"], job.req, job.res)
        except Exception as err:  # noqa: BLE001
            job.res["error"] = err
            logger.warning("job %s failed: %r", job.req.url, err)
            self.emit(events.JOB_FAIL, err, job)
            return

        logger.debug("job %s succeeded", job.req.url)
        self.emit(events.JOB_SUCCESS, job)

    def _ensure_not_started(self, where: str) -> None:
        if self._started:
            raise ConfigurationError(f"{where}: cannot be changed once the scraper has run.")
