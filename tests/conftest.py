from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from batch_converter.config import ConverterSettings  # noqa: E402
from batch_converter.context import DocumentContext  # noqa: E402
from batch_converter.converter import Converter  # noqa: E402
from batch_converter.registry import WriterRegistry  # noqa: E402


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "batch-converter-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def score_pdf(tmp_path: Path) -> Path:
    """Four pages with two outline sections: Violin (1-2) and Cello (3-4)."""

    pdf_path = tmp_path / "score.pdf"
    writer = PdfWriter()
    for _ in range(4):
        writer.add_blank_page(width=200, height=200)
    writer.add_outline_item("Violin", 0)
    writer.add_outline_item("Cello", 2)
    writer.add_metadata({"/Title": "Quartet"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


# ----------------------------------------------------------------------
# In-memory collaborators for converter and batch tests
# ----------------------------------------------------------------------
@dataclass
class FakePart:
    name: str
    page_count: int = 1


@dataclass
class FakeDocument:
    name: str
    page_count: int = 1
    part_list: List[FakePart] = field(default_factory=list)
    saved: List[Path] = field(default_factory=list)
    sound_profile: Optional[str] = None
    transforms: List[Any] = field(default_factory=list)

    def parts(self) -> List[FakePart]:
        return list(self.part_list)

    def save(self, destination) -> None:
        self.saved.append(Path(destination))

    def set_sound_profile(self, profile: str) -> None:
        self.sound_profile = profile


class FakeLoader:
    native_kinds = frozenset({"fdoc"})

    def __init__(self) -> None:
        self.documents: Dict[str, FakeDocument] = {}
        self.failing: set[str] = set()
        self.loads: List[tuple] = []

    def add(self, path: str, **kwargs: Any) -> FakeDocument:
        document = FakeDocument(name=Path(path).stem, **kwargs)
        self.documents[path] = document
        return document

    def load(self, path, style_path=None, force=False) -> FakeDocument:
        self.loads.append((str(path), style_path, force))
        if str(path) in self.failing or str(path) not in self.documents:
            raise OSError(f"cannot read {path}")
        return self.documents[str(path)]


class RecordingWriter:
    def __init__(self, context: Optional[DocumentContext] = None) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.fail_on: set[str] = set()
        self.context = context

    def write(self, document, handle, options) -> None:
        self.calls.append(
            {
                "document": document,
                "path": handle.path,
                "meta": dict(handle.meta),
                "options": dict(options),
                "current": self.context.current if self.context else None,
            }
        )
        if handle.path.name in self.fail_on:
            raise RuntimeError(f"encoder failed for {handle.path.name}")
        handle.write(f"{document.name}:{sorted(o.value for o in options)}".encode())


class RecordingExtensions:
    def __init__(self) -> None:
        self.performed: List[tuple] = []
        self.error: Optional[Exception] = None

    def perform(self, document, uri: str) -> None:
        self.performed.append((document, uri))
        if self.error is not None:
            raise self.error


class RecordingTransformer:
    def __init__(self) -> None:
        self.error: Optional[Exception] = None

    def apply(self, document, options) -> None:
        if self.error is not None:
            raise self.error
        document.transforms.append(options)


@dataclass
class ConverterHarness:
    converter: Converter
    loader: FakeLoader
    writer: RecordingWriter
    writers: WriterRegistry
    extensions: RecordingExtensions
    transformer: RecordingTransformer
    context: DocumentContext


@pytest.fixture()
def harness() -> ConverterHarness:
    loader = FakeLoader()
    context = DocumentContext()
    writer = RecordingWriter(context)
    writers = WriterRegistry()
    for kind in ("pdf", "png", "svg", "mp3", "txt", "fdoc"):
        writers.register(kind, writer)
    extensions = RecordingExtensions()
    transformer = RecordingTransformer()
    converter = Converter(
        lambda: loader,
        writers=writers,
        transformer=transformer,
        extensions=extensions,
        settings=ConverterSettings(),
        context=context,
    )
    return ConverterHarness(
        converter=converter,
        loader=loader,
        writer=writer,
        writers=writers,
        extensions=extensions,
        transformer=transformer,
        context=context,
    )


@pytest.fixture()
def job_file_factory(tmp_path: Path) -> Callable[[str], Path]:
    def _create(content: str, name: str = "jobs.json") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _create
