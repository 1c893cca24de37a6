"""PDF writer built on `pypdf`."""

from __future__ import annotations

from typing import Any

from pypdf import PdfWriter

from ..outputs import OutputFile
from ..registry import register_writer
from ..types import OptionKey, WriterOptions

PRODUCER = "Batch Converter"


@register_writer("pdf")
class PdfExportWriter:
    """Write a document, a part, or a single page of either as PDF."""

    def write(self, document: Any, handle: OutputFile, options: WriterOptions) -> None:
        pages = list(document.pages)
        metadata = dict(document.metadata)

        page_number = options.get(OptionKey.PAGE_NUMBER)
        if page_number is not None:
            if not 0 <= page_number < len(pages):
                raise IndexError(f"Page index {page_number} is out of bounds ({len(pages)} pages)")
            pages = [pages[page_number]]
            title = metadata.get("/Title") or document.name
            metadata["/Title"] = f"{title} - Page {page_number + 1}"

        writer = PdfWriter()
        for page in pages:
            writer.add_page(page)
        metadata.setdefault("/Producer", PRODUCER)
        writer.add_metadata(metadata)
        writer.write(handle.stream)
