"""Bundled writers, registered in :data:`batch_converter.registry.registry` on import."""

from .metadata import MetadataWriter
from .pdf import PdfExportWriter
from .text import TextWriter

__all__ = [
    "MetadataWriter",
    "PdfExportWriter",
    "TextWriter",
]
