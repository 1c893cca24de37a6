"""Plain-text writer extracting page text with `pypdf`."""

from __future__ import annotations

from typing import Any

from ..outputs import OutputFile
from ..registry import register_writer
from ..types import OptionKey, WriterOptions

PAGE_SEPARATOR = "\n\f\n"


@register_writer("txt")
class TextWriter:
    """Write the extracted text of every page, or of one page, as UTF-8."""

    def write(self, document: Any, handle: OutputFile, options: WriterOptions) -> None:
        pages = list(document.pages)
        page_number = options.get(OptionKey.PAGE_NUMBER)
        if page_number is not None:
            pages = [pages[page_number]]

        text = PAGE_SEPARATOR.join(page.extract_text() or "" for page in pages)
        handle.write(text.encode("utf-8"))
