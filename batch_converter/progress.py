"""Progress sinks notified by the batch runner."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .types import BatchResult


class ProgressSink(Protocol):
    def start(self) -> None:
        """Called once before the first job."""

    def progress(self, current: int, total: int, label: str) -> None:
        """Called before job *current* (1-based) of *total* runs."""

    def finish(self, result: BatchResult) -> None:
        """Called exactly once with the outcome of the batch."""


class NullProgress:
    """Progress sink that ignores every notification."""

    def start(self) -> None:
        pass

    def progress(self, current: int, total: int, label: str) -> None:
        pass

    def finish(self, result: BatchResult) -> None:
        pass


class CallbackProgress(NullProgress):
    """Adapt plain callables to the :class:`ProgressSink` protocol.

    ``on_progress`` receives the same ``(current, total, label)`` arguments as
    :meth:`ProgressSink.progress`.
    """

    def __init__(
        self,
        on_progress: Optional[Callable[[int, int, str], None]] = None,
        on_finish: Optional[Callable[[BatchResult], None]] = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_finish = on_finish

    def progress(self, current: int, total: int, label: str) -> None:
        if self._on_progress:
            self._on_progress(current, total, label)

    def finish(self, result: BatchResult) -> None:
        if self._on_finish:
            self._on_finish(result)


__all__ = ["CallbackProgress", "NullProgress", "ProgressSink"]
