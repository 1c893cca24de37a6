"""Current-document slot for collaborators that look the document up."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

LOGGER = logging.getLogger("batch_converter.context")


class DocumentContext:
    """Holds the document currently being converted.

    The converter passes the document to writers and extensions explicitly;
    the slot exists for collaborators that still query it. Only one document
    is current at a time, so jobs sharing a context must run one after another.
    """

    def __init__(self) -> None:
        self._current: Optional[Any] = None

    @property
    def current(self) -> Optional[Any]:
        return self._current

    @contextmanager
    def use(self, document: Any) -> Iterator[Any]:
        """Make *document* current for the duration of the block."""

        if self._current is not None:
            raise RuntimeError("A document is already current; jobs cannot overlap")
        self._current = document
        try:
            yield document
        finally:
            self._current = None
            LOGGER.debug("Cleared current document")


__all__ = ["DocumentContext"]
