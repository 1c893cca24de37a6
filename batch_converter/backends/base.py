"""Backend protocols for loading, transforming and saving documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from ..types import TransformOptions


class Part(Protocol):
    """A named sub-document of a loaded document."""

    @property
    def name(self) -> str:
        """Display name used in part output file names."""

    @property
    def page_count(self) -> int:
        """Number of pages in the part."""


class Document(Protocol):
    """A loaded document as seen by the converter."""

    @property
    def name(self) -> str:
        """Display name of the document."""

    @property
    def page_count(self) -> int:
        """Number of pages in the document."""

    def parts(self) -> Sequence[Part]:
        """Return the document's parts in declaration order."""

    def save(self, destination: str | Path) -> None:
        """Persist the document in its native format."""

    def set_sound_profile(self, profile: str) -> None:
        """Override the playback sound profile stored with the document."""


class DocumentLoader(Protocol):
    """Protocol defining how input files become loaded documents."""

    native_kinds: frozenset[str]

    def load(self, path: str | Path, style_path: str | Path | None = None, force: bool = False) -> Document:
        """Load *path*, optionally applying *style_path*.

        ``force`` bypasses version and compatibility checks.
        """


class TransformParser(Protocol):
    """Validate a raw ``transpose`` payload from a batch job file."""

    def parse(self, payload: Mapping[str, Any]) -> TransformOptions:
        """Return validated options or raise :class:`TransformOptionsError`."""


class Transformer(Protocol):
    """Apply validated transform options to a loaded document."""

    def apply(self, document: Document, options: TransformOptions) -> None:
        """Mutate *document* in place."""
