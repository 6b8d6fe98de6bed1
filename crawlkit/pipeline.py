from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List

from .errors import ConfigurationError

Stage = Callable[..., Any]

HOOKS = ("before", "after", "before_scraping", "after_scraping")


def apply_each_series(stages: Iterable[Stage], *args: Any) -> None:
    """Call each stage with ``args`` in order.

    A stage fails by raising; the exception propagates as-is and the
    remaining stages are skipped."""
    for stage in list(stages):
        stage(*args)


class Middlewares:
    """Ordered middleware lists, one per hook point.

    ``before`` and ``after`` stages take no argument, ``before_scraping``
    stages receive the job request and ``after_scraping`` stages receive the
    job request and result."""

    def __init__(self) -> None:
        self._stages: Dict[str, List[Stage]] = {hook: [] for hook in HOOKS}

    def register(self, hook: str, fn: Stage) -> None:
        if hook not in self._stages:
            raise ConfigurationError(f"middleware: unknown hook {hook!r}.")
        if not callable(fn):
            raise ConfigurationError(f"{hook}: given argument is not a function.")
        self._stages[hook].append(fn)

    def stages(self, hook: str) -> List[Stage]:
        return list(self._stages[hook])

    def __getitem__(self, hook: str) -> List[Stage]:
        return self.stages(hook)

    def __len__(self) -> int:
        return sum(len(v) for v in self._stages.values())
