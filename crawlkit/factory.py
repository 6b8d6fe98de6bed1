from __future__ import annotations

from typing import Optional

from .engines import StaticEngine
from .errors import ConfigurationError
from .models import ScraperOptions
from .scraper import Scraper

SCRAPER_TYPES = ("static", "automated")


def create_scraper(kind: str, name: Optional[str] = None, options: Optional[ScraperOptions] = None) -> Scraper:
    """Build a scraper of the given kind.

    "static" scrapers come with a StaticEngine. "automated" scrapers expect an
    automation-capable engine via ``set_engine`` and usually a script via
    ``set_script``/``set_inline_script``.
    """
    if kind == "static":
        scraper = Scraper(name, options=options)
        scraper.engine = StaticEngine(scraper)
    elif kind == "automated":
        scraper = Scraper(name, options=options)
    else:
        raise ConfigurationError(f"Unknown scraper type: {kind}")

    scraper.type = kind
    return scraper


def static_scraper(name: Optional[str] = None) -> Scraper:
    return create_scraper("static", name)


def automated_scraper(name: Optional[str] = None) -> Scraper:
    return create_scraper("automated", name)
