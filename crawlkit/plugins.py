from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigurationError, JobError
from .models import JobRequest

if TYPE_CHECKING:
    from .scraper import Scraper


def validate(definition: Any) -> Callable[["Scraper"], None]:
    """Plugin failing every job whose ``res["data"]`` does not match ``definition``.

    ``definition`` is anything pydantic can build a TypeAdapter for: a
    BaseModel subclass, a dataclass, ``List[str]``, ``Dict[str, int]``...
    On success the validated value replaces ``res["data"]``.
    """
    try:
        adapter = TypeAdapter(definition)
    except Exception as exc:  # noqa: BLE001
        raise ConfigurationError(f"validate: unusable definition {definition!r}.") from exc

    def check(req: JobRequest, res: Dict[str, Any]) -> None:
        try:
            res["data"] = adapter.validate_python(res.get("data"))
        except ValidationError as exc:
            raise JobError("invalid-data") from exc

    def plugin(scraper: "Scraper") -> None:
        scraper.after_scraping(check)

    return plugin
