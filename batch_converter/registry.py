"""Writer registry mapping output kinds to writers."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Protocol

from .outputs import OutputFile
from .types import WriterOptions


class Writer(Protocol):
    """Serialise a document, or one part of it, into an open output file."""

    def write(self, document: Any, handle: OutputFile, options: WriterOptions) -> None:
        """Write *document* to *handle*; raise on failure."""


class WriterRegistry:
    """Registry storing available writers keyed by output kind."""

    def __init__(self) -> None:
        self._writers: Dict[str, Writer] = {}

    def register(self, kind: str, writer: Writer, *, replace: bool = False) -> None:
        key = kind.lower().lstrip(".")
        if key in self._writers and not replace:
            raise ValueError(f"Writer for '{key}' is already registered")
        self._writers[key] = writer

    def writer(self, kind: str) -> Writer | None:
        return self._writers.get(kind.lower().lstrip("."))

    def names(self) -> Iterable[str]:
        return sorted(self._writers.keys())

    def __contains__(self, kind: str) -> bool:
        return self.writer(kind) is not None


registry = WriterRegistry()


def register_writer(*kinds: str) -> Callable[[type], type]:
    """Class decorator registering an instance of the class for *kinds*."""

    def decorator(cls: type) -> type:
        instance = cls()
        for kind in kinds:
            registry.register(kind, instance)
        return cls

    return decorator


__all__ = ["Writer", "WriterRegistry", "registry", "register_writer"]
