"""pypdf backend implementation for Batch Converter."""

from __future__ import annotations

import io
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..exceptions import InFileLoadError, TransformOptionsError
from ..types import TransformOptions
from .base import Document, DocumentLoader, Transformer, TransformParser

LOGGER = logging.getLogger("batch_converter.backends.pypdf")

MAX_SUPPORTED_VERSION = (2, 0)
_HEADER_RE = re.compile(r"%PDF-(\d+)\.(\d+)")


@dataclass
class PdfPart:
    """A top-level outline section of a :class:`PdfDocument`."""

    name: str
    document: "PdfDocument" = field(repr=False)
    page_indices: List[int] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_indices)

    @property
    def pages(self) -> List[Any]:
        return [self.document.pages[index] for index in self.page_indices]

    @property
    def metadata(self) -> Dict[str, Any]:
        metadata = dict(self.document.metadata)
        title = metadata.get("/Title") or self.document.name
        metadata["/Title"] = f"{title} - {self.name}"
        return metadata


@dataclass
class PdfDocument:
    """A PDF loaded through pypdf, mutable until it is written out."""

    path: Path
    reader: PdfReader = field(repr=False)
    metadata: Dict[str, Any] = field(default_factory=dict)
    sound_profile: Optional[str] = None

    @property
    def name(self) -> str:
        title = self.metadata.get("/Title")
        return str(title) if title else self.path.stem

    @property
    def pages(self) -> List[Any]:
        return list(self.reader.pages)

    @property
    def page_count(self) -> int:
        return len(self.reader.pages)

    def parts(self) -> Sequence[PdfPart]:
        """Return one part per top-level outline entry, in outline order.

        A part spans from its destination page up to the page before the next
        section starts, or the end of the document.
        """

        entries: List[tuple[str, int]] = []
        for item in self.reader.outline:
            # nested lists hold the children of the preceding entry
            if isinstance(item, list):
                continue
            page = self.reader.get_destination_page_number(item)
            if page is None or page < 0:
                LOGGER.debug("Skipping outline entry without target page: %s", item.title)
                continue
            entries.append((str(item.title), page))

        starts = sorted({page for _, page in entries})
        parts: List[PdfPart] = []
        for title, start in entries:
            following = [page for page in starts if page > start]
            end = following[0] if following else self.page_count
            parts.append(PdfPart(name=title, document=self, page_indices=list(range(start, end))))
        return parts

    def set_sound_profile(self, profile: str) -> None:
        self.sound_profile = profile
        self.metadata["/SoundProfile"] = profile

    def save(self, destination: str | Path) -> None:
        writer = PdfWriter()
        for page in self.pages:
            writer.add_page(page)
        if self.metadata:
            writer.add_metadata(self.metadata)
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            writer.write(handle)


def _header_version(reader: PdfReader) -> Optional[tuple[int, int]]:
    match = _HEADER_RE.match(getattr(reader, "pdf_header", "") or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def _load_style(style_path: str | Path) -> Dict[str, Any]:
    try:
        data = json.loads(Path(style_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise InFileLoadError(f"Unable to read style file: {style_path}. Error: {exc}") from exc
    if not isinstance(data, dict):
        raise InFileLoadError(f"Style file must contain a JSON object: {style_path}")
    return {key if key.startswith("/") else f"/{key}": str(value) for key, value in data.items()}


class PypdfLoader(DocumentLoader):
    """Loader that reads PDF files with `pypdf`.

    A style file is a JSON object of document information entries
    (``{"Author": "..."}``) merged over the document's own metadata.
    """

    native_kinds = frozenset({"pdf"})

    def load(self, path: str | Path, style_path: str | Path | None = None, force: bool = False) -> PdfDocument:
        source = Path(path)
        if not source.exists() or not source.is_file():
            raise InFileLoadError(f"PDF file not found: {path}")

        try:
            raw_bytes = source.read_bytes()
        except OSError as exc:
            raise InFileLoadError(f"Unable to read PDF file: {path}. Error: {exc}") from exc

        try:
            reader = PdfReader(io.BytesIO(raw_bytes))
        except PdfReadError as exc:
            raise InFileLoadError(f"Corrupted or invalid PDF file: {path}. Error: {exc}") from exc
        except Exception as exc:
            raise InFileLoadError(f"Unexpected error reading PDF: {path}. Error: {exc}") from exc

        if reader.is_encrypted:
            raise InFileLoadError(f"PDF is encrypted: {path}")

        if not force:
            version = _header_version(reader)
            if version is not None and version > MAX_SUPPORTED_VERSION:
                raise InFileLoadError(
                    f"Unsupported PDF version {version[0]}.{version[1]}: {path}. Use force mode to load anyway."
                )
            if len(reader.pages) == 0:
                raise InFileLoadError(f"PDF has no pages: {path}")

        metadata = dict(reader.metadata or {})
        if style_path:
            metadata.update(_load_style(style_path))

        LOGGER.debug("Loaded %s (%d pages)", source, len(reader.pages))
        return PdfDocument(path=source, reader=reader, metadata=metadata)


class PageRotationParser(TransformParser):
    """Validate ``{"rotate": degrees, "pages": [1, 3]}`` payloads."""

    def parse(self, payload: Mapping[str, Any]) -> TransformOptions:
        unknown = set(payload) - {"rotate", "pages"}
        if unknown:
            raise TransformOptionsError(f"Unknown transform options: {', '.join(sorted(unknown))}")

        rotate = payload.get("rotate")
        if isinstance(rotate, bool) or not isinstance(rotate, int) or rotate % 90 != 0:
            raise TransformOptionsError(f"'rotate' must be a multiple of 90, got {rotate!r}")

        pages = payload.get("pages")
        if pages is not None:
            if not isinstance(pages, list) or not all(
                isinstance(page, int) and not isinstance(page, bool) and page >= 1 for page in pages
            ):
                raise TransformOptionsError("'pages' must be a list of page numbers >= 1")

        values: Dict[str, Any] = {"rotate": rotate}
        if pages is not None:
            values["pages"] = tuple(pages)
        return TransformOptions(values=values)


class PageRotationTransform(Transformer):
    """Rotate the selected pages of a :class:`PdfDocument` clockwise."""

    def apply(self, document: Document, options: TransformOptions) -> None:
        pages = document.pages  # type: ignore[attr-defined]
        selected = options.values.get("pages")
        indices = [page - 1 for page in selected] if selected else range(len(pages))
        degrees = options.values["rotate"]
        for index in indices:
            if index >= len(pages):
                raise TransformOptionsError(
                    f"Page {index + 1} is out of bounds. Document has {len(pages)} pages."
                )
            pages[index].rotate(degrees)
