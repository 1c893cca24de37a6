"""Extension discovery and execution.

An extension is a callable ``extension(document, **params)`` that may mutate a
loaded document before it is exported. Extensions are addressed by URI:

* ``package.module:function?key=value`` imports ``function`` directly;
* ``name?key=value`` loads the entry point ``name`` from the
  ``batch_converter.extensions`` group.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Protocol
from urllib.parse import parse_qsl

from .exceptions import ConverterError, ExtensionError

LOGGER = logging.getLogger("batch_converter.extensions")

ENTRY_POINT_GROUP = "batch_converter.extensions"


@dataclass(frozen=True)
class ExtensionUri:
    target: str
    params: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, uri: str) -> "ExtensionUri":
        target, _, query = uri.strip().partition("?")
        if not target:
            raise ExtensionError(f"Invalid extension URI: {uri!r}")
        return cls(target=target, params=dict(parse_qsl(query, keep_blank_values=True)))

    def __str__(self) -> str:
        if not self.params:
            return self.target
        query = "&".join(f"{key}={value}" for key, value in self.params.items())
        return f"{self.target}?{query}"


class ExtensionRunner(Protocol):
    def perform(self, document: Any, uri: str) -> None:
        """Run the extension addressed by *uri* against *document*."""


class EntryPointExtensionRunner:
    """Resolve extensions from import paths or installed entry points."""

    def __init__(self, group: str = ENTRY_POINT_GROUP) -> None:
        self.group = group

    def discover(self) -> list[str]:
        return sorted(ep.name for ep in importlib.metadata.entry_points(group=self.group))

    def resolve(self, target: str) -> Callable[..., Any]:
        if ":" in target:
            module_name, _, attribute = target.partition(":")
            try:
                module = importlib.import_module(module_name)
                extension = getattr(module, attribute)
            except (ImportError, AttributeError) as exc:
                raise ExtensionError(f"Cannot import extension '{target}': {exc}") from exc
        else:
            matches = [ep for ep in importlib.metadata.entry_points(group=self.group) if ep.name == target]
            if not matches:
                raise ExtensionError(f"No extension named '{target}' in group '{self.group}'")
            extension = matches[0].load()

        if not callable(extension):
            raise ExtensionError(f"Extension '{target}' is not callable")
        return extension

    def perform(self, document: Any, uri: str) -> None:
        parsed = ExtensionUri.parse(uri)
        extension = self.resolve(parsed.target)
        LOGGER.info("Running extension %s", parsed)
        try:
            extension(document, **parsed.params)
        except ConverterError:
            raise
        except Exception as exc:
            LOGGER.error("Extension %s failed: %s", parsed.target, exc)
            raise ExtensionError(f"Extension '{parsed.target}' failed: {exc}") from exc


__all__ = ["ENTRY_POINT_GROUP", "EntryPointExtensionRunner", "ExtensionRunner", "ExtensionUri"]
