"""Single-job conversion: load, transform and dispatch to a writer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

from . import writers as _bundled_writers  # noqa: F401  (registers the bundled writers)
from .backends.base import Document, DocumentLoader, Transformer, TransformParser
from .backends.pypdf_backend import PageRotationParser, PageRotationTransform, PypdfLoader
from .config import ConverterSettings
from .context import DocumentContext
from .exceptions import (
    ConverterError,
    ConvertTypeUnknownError,
    InFileLoadError,
    NotSupportedError,
    OutFileWriteError,
    UnknownConverterError,
)
from .extensions import EntryPointExtensionRunner, ExtensionRunner
from .jobfile import parse_transform_json
from .naming import output_from_string, page_output_path, resolve_part_path
from .outputs import OutputFile
from .registry import Writer, WriterRegistry, registry
from .types import (
    OptionKey,
    OutputSpec,
    SingleOutput,
    TemplatedOutput,
    TransformOptions,
    UnitType,
    WriterOptions,
)

LOGGER = logging.getLogger("batch_converter.converter")

LoaderFactory = Callable[[], DocumentLoader]


class ConversionStrategy(Enum):
    PER_PART = "per-part"
    BY_EXTENSION = "by-extension"
    NATIVE_SAVE = "native-save"
    PAGE_BY_PAGE = "page-by-page"
    WHOLE = "whole"


@dataclass(frozen=True)
class ConversionRequest:
    """The facts about a job that decide how it is converted."""

    has_wildcard: bool
    has_extension: bool
    is_native: bool
    is_paged: bool


# Evaluated top to bottom; the first true flag wins.
DECISION_TABLE = (
    ("has_wildcard", ConversionStrategy.PER_PART),
    ("has_extension", ConversionStrategy.BY_EXTENSION),
    ("is_native", ConversionStrategy.NATIVE_SAVE),
    ("is_paged", ConversionStrategy.PAGE_BY_PAGE),
)


def select_strategy(request: ConversionRequest) -> ConversionStrategy:
    for flag, strategy in DECISION_TABLE:
        if getattr(request, flag):
            return strategy
    return ConversionStrategy.WHOLE


def coerce_output(output: Union[OutputSpec, str, Path]) -> OutputSpec:
    if isinstance(output, (SingleOutput, TemplatedOutput)):
        return output
    return output_from_string(str(output))


class Converter:
    """Convert one input document into one output per call.

    Collaborators default to the bundled pypdf loader, rotation transform,
    writer registry and entry-point extension runner.
    """

    def __init__(
        self,
        loader_factory: Optional[LoaderFactory] = None,
        *,
        writers: Optional[WriterRegistry] = None,
        transform_parser: Optional[TransformParser] = None,
        transformer: Optional[Transformer] = None,
        extensions: Optional[ExtensionRunner] = None,
        settings: Optional[ConverterSettings] = None,
        context: Optional[DocumentContext] = None,
    ) -> None:
        self.loader_factory: LoaderFactory = loader_factory or PypdfLoader
        self.writers = writers if writers is not None else registry
        self.transform_parser = transform_parser or PageRotationParser()
        self.transformer = transformer or PageRotationTransform()
        self.extensions = extensions or EntryPointExtensionRunner()
        self.settings = settings or ConverterSettings.from_env()
        self.context = context or DocumentContext()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def convert_file(
        self,
        input_path: Union[str, Path],
        output: Union[OutputSpec, str, Path],
        *,
        style_path: Union[str, Path, None] = None,
        force: bool = False,
        sound_profile: Optional[str] = None,
        extension: Optional[str] = None,
        transform: Optional[TransformOptions] = None,
    ) -> None:
        """Convert *input_path* to *output*, raising the first failure."""

        output = coerce_output(output)
        LOGGER.info("in: %s, out: %s", input_path, output)

        writer = self._writer_for(output)
        loader = self._new_loader()
        document = self._load(loader, input_path, style_path, force)

        if sound_profile:
            document.set_sound_profile(sound_profile)

        if transform is not None:
            try:
                self.transformer.apply(document, transform)
            except Exception as exc:
                LOGGER.error("Failed to apply transform, err: %s", exc)
                raise

        with self.context.use(document):
            request = ConversionRequest(
                has_wildcard=isinstance(output, TemplatedOutput),
                has_extension=bool(extension),
                is_native=output.suffix in self._native_kinds(loader),
                is_paged=output.suffix in self.settings.page_kinds,
            )
            strategy = select_strategy(request)
            LOGGER.debug("Converting %s using %s strategy", input_path, strategy.value)

            try:
                if strategy is ConversionStrategy.PER_PART:
                    self._convert_parts(writer, document, output)  # type: ignore[arg-type]
                elif strategy is ConversionStrategy.BY_EXTENSION:
                    self._convert_by_extension(writer, document, output.path, extension or "")
                elif strategy is ConversionStrategy.NATIVE_SAVE:
                    self._save_native(document, output.path)
                elif strategy is ConversionStrategy.PAGE_BY_PAGE:
                    self._convert_page_by_page(writer, document, output.path)
                else:
                    self._convert_whole(writer, document, output.path)
            except ConverterError as exc:
                LOGGER.error("Failed to convert %s (%s), err: %s", input_path, strategy.value, exc)
                raise

    def convert_file_json(
        self,
        input_path: Union[str, Path],
        output: Union[OutputSpec, str, Path],
        transform_json: str = "",
        **kwargs: Any,
    ) -> None:
        """Like :meth:`convert_file`, with the transform given as JSON text."""

        transform = parse_transform_json(transform_json, self.transform_parser)
        self.convert_file(input_path, output, transform=transform, **kwargs)

    def convert_parts(
        self,
        input_path: Union[str, Path],
        output: Union[TemplatedOutput, str, Path],
        *,
        style_path: Union[str, Path, None] = None,
        force: bool = False,
    ) -> None:
        """Write one file per part of *input_path* following the *output* template."""

        output = coerce_output(output)
        if not isinstance(output, TemplatedOutput):
            raise NotSupportedError(f"Output '{output}' is not a part template")

        loader = self._new_loader()
        writer = self._writer_for(output)
        document = self._load(loader, input_path, style_path, force)
        with self.context.use(document):
            self._convert_parts(writer, document, output)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    def _writer_for(self, output: OutputSpec) -> Writer:
        writer = self.writers.writer(output.suffix)
        if writer is None:
            raise ConvertTypeUnknownError(f"No writer registered for '{output.suffix}' (out: {output})")
        return writer

    def _new_loader(self) -> DocumentLoader:
        try:
            loader = self.loader_factory()
        except Exception as exc:
            raise UnknownConverterError(f"Failed to create document loader: {exc}") from exc
        if loader is None:
            raise UnknownConverterError("Document loader factory returned nothing")
        return loader

    def _native_kinds(self, loader: DocumentLoader) -> frozenset[str]:
        if self.settings.native_kinds is not None:
            return self.settings.native_kinds
        return frozenset(getattr(loader, "native_kinds", frozenset()))

    @staticmethod
    def _load(
        loader: DocumentLoader,
        input_path: Union[str, Path],
        style_path: Union[str, Path, None],
        force: bool,
    ) -> Document:
        try:
            return loader.load(input_path, style_path=style_path, force=force)
        except Exception as exc:
            LOGGER.error("failed load document, err: %s, path: %s", exc, input_path)
            raise InFileLoadError(f"Failed to load input file: {input_path}") from exc

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    @staticmethod
    def _write(writer: Writer, document: Any, handle: OutputFile, options: WriterOptions) -> None:
        try:
            writer.write(document, handle, options)
        except Exception as exc:
            LOGGER.error("failed write, err: %s, path: %s", exc, handle.path)
            raise OutFileWriteError(f"Failed to write output file: {handle.path}. Error: {exc}") from exc

    def _convert_whole(self, writer: Writer, document: Any, destination: Path) -> None:
        with OutputFile(destination) as handle:
            handle.set_meta("file_path", destination)
            self._write(writer, document, handle, {})

    def _convert_by_extension(self, writer: Writer, document: Any, destination: Path, extension: str) -> None:
        # the extension runs first and may modify the document
        self.extensions.perform(document, extension)
        self._convert_whole(writer, document, destination)

    @staticmethod
    def _save_native(document: Document, destination: Path) -> None:
        try:
            document.save(destination)
        except ConverterError:
            raise
        except Exception as exc:
            LOGGER.error("failed save, err: %s, path: %s", exc, destination)
            raise OutFileWriteError(f"Failed to save document: {destination}. Error: {exc}") from exc

    def _convert_page_by_page(self, writer: Writer, document: Any, destination: Path) -> None:
        for index in range(document.page_count):
            page_path = page_output_path(destination, index)
            with OutputFile(page_path) as handle:
                handle.set_meta("dir_path", destination)
                handle.set_meta("file_path", page_path)
                self._write(writer, document, handle, {OptionKey.PAGE_NUMBER: index})

    def _convert_parts(self, writer: Writer, document: Document, output: TemplatedOutput) -> None:
        kind = output.suffix
        if kind in self.settings.paged_part_kinds:
            for part in document.parts():
                self._convert_page_by_page(writer, part, resolve_part_path(output, part.name))
        elif kind in self.settings.part_kinds:
            for part in document.parts():
                part_path = resolve_part_path(output, part.name)
                with OutputFile(part_path) as handle:
                    handle.set_meta("file_path", part_path)
                    self._write(writer, part, handle, {OptionKey.UNIT_TYPE: UnitType.PER_PART})
        else:
            raise NotSupportedError(f"Cannot export parts as '{kind}'")


__all__ = [
    "ConversionRequest",
    "ConversionStrategy",
    "Converter",
    "DECISION_TABLE",
    "coerce_output",
    "select_strategy",
]
