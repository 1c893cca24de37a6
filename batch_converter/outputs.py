"""Scoped output file handles passed to writers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Dict, Optional

from .exceptions import OutFileOpenError

LOGGER = logging.getLogger("batch_converter.outputs")


class OutputFile:
    """A binary file opened for writing, tagged with metadata for writers.

    Writers receive the handle rather than a path; ``meta`` carries the
    logical ``file_path`` (and ``dir_path`` for page outputs) so a writer that
    emits companion files knows where the output lives.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.meta: Dict[str, str] = {}
        self._stream: Optional[IO[bytes]] = None

    def open(self) -> "OutputFile":
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self.path.open("wb")
        except OSError as exc:
            LOGGER.error("Failed to open %s for writing: %s", self.path, exc)
            raise OutFileOpenError(f"Cannot open output file: {self.path}. Error: {exc}") from exc
        return self

    def set_meta(self, key: str, value: Any) -> None:
        self.meta[key] = str(value)

    @property
    def stream(self) -> IO[bytes]:
        if self._stream is None:
            raise ValueError(f"Output file is not open: {self.path}")
        return self._stream

    def write(self, data: bytes) -> int:
        return self.stream.write(data)

    @property
    def closed(self) -> bool:
        return self._stream is None or self._stream.closed

    def close(self) -> None:
        if self._stream is not None and not self._stream.closed:
            self._stream.close()

    def __enter__(self) -> "OutputFile":
        if self._stream is None:
            self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["OutputFile"]
