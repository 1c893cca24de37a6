"""Backend abstractions for Batch Converter."""

from .base import Document, DocumentLoader, Part, Transformer, TransformParser
from .pypdf_backend import PageRotationParser, PageRotationTransform, PdfDocument, PdfPart, PypdfLoader

__all__ = [
    "Document",
    "DocumentLoader",
    "PageRotationParser",
    "PageRotationTransform",
    "Part",
    "PdfDocument",
    "PdfPart",
    "PypdfLoader",
    "TransformParser",
    "Transformer",
]
