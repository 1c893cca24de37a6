"""
Custom exceptions for Batch Converter.

Every error carries a stable ``code`` naming its kind, so callers and batch
reports can tell failures apart without matching on message text.
"""


class ConverterError(Exception):
    """Base exception for all Batch Converter errors."""

    code = "UnknownError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown conversion error occurred."


class UnknownConverterError(ConverterError):
    """Raised when a collaborator could not be constructed."""

    code = "UnknownError"


class BatchJobFileOpenError(ConverterError):
    """Raised when the batch job file cannot be read."""

    code = "BatchJobFileFailedOpen"

    @property
    def default_message(self) -> str:
        return "Failed to open batch job file."


class BatchJobFileParseError(ConverterError):
    """Raised when the batch job file is not a well-formed job array."""

    code = "BatchJobFileFailedParse"

    @property
    def default_message(self) -> str:
        return "Failed to parse batch job file."


class TransformOptionsError(ConverterError):
    """Raised when a transform payload cannot be turned into options."""

    code = "TransformOptionsInvalid"

    @property
    def default_message(self) -> str:
        return "Invalid transform options."


class ConvertTypeUnknownError(ConverterError):
    """Raised when no writer is registered for the requested output kind."""

    code = "ConvertTypeUnknown"

    @property
    def default_message(self) -> str:
        return "Unknown conversion output type."


class InFileLoadError(ConverterError):
    """Raised when the input document fails to load."""

    code = "InFileFailedLoad"

    @property
    def default_message(self) -> str:
        return "Failed to load input file."


class OutFileOpenError(ConverterError):
    """Raised when an output file cannot be opened for writing."""

    code = "OutFileFailedOpen"

    @property
    def default_message(self) -> str:
        return "Failed to open output file."


class OutFileWriteError(ConverterError):
    """Raised when a writer fails to serialise a document."""

    code = "OutFileFailedWrite"

    @property
    def default_message(self) -> str:
        return "Failed to write output file."


class NotSupportedError(ConverterError):
    """Raised when an output kind cannot be produced per part."""

    code = "NotSupported"

    @property
    def default_message(self) -> str:
        return "Operation not supported for this output type."


class ExtensionError(ConverterError):
    """Raised when an extension cannot be resolved or fails while running."""

    code = "ExtensionFailed"

    @property
    def default_message(self) -> str:
        return "Extension failed."


class ConvertFailedError(ConverterError):
    """Raised for a batch in which at least one job failed."""

    code = "ConvertFailed"

    @property
    def default_message(self) -> str:
        return "Conversion failed."
