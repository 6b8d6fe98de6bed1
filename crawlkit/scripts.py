from __future__ import annotations

import inspect
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class AutomationScript:
    """Source of the script an automation engine injects into pages.

    ``kind`` is one of "file", "function" or "string". ``source`` always
    holds the script text; ``fn`` keeps the original callable for engines
    that run Python functions directly."""

    kind: str
    source: str
    origin: Optional[str] = None
    fn: Optional[Callable[..., Any]] = None

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AutomationScript":
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"script: cannot read {p}: {exc}") from exc
        return cls(kind="file", source=text, origin=str(p))

    @classmethod
    def from_function(cls, fn: Callable[..., Any]) -> "AutomationScript":
        if not callable(fn):
            raise ConfigurationError("script: given argument is not a function.")
        try:
            text = textwrap.dedent(inspect.getsource(fn))
        except (OSError, TypeError):
            # Builtins and REPL lambdas have no retrievable source.
            text = ""
        return cls(kind="function", source=text, origin=getattr(fn, "__qualname__", None), fn=fn)

    @classmethod
    def from_string(cls, text: str) -> "AutomationScript":
        if not isinstance(text, str) or not text.strip():
            raise ConfigurationError("script: empty script.")
        return cls(kind="string", source=text)

    @classmethod
    def from_inline(cls, value: Union[str, Callable[..., Any]]) -> "AutomationScript":
        if callable(value):
            return cls.from_function(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise ConfigurationError("inline script: wrong argument.")
