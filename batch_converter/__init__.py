"""
Batch Converter - convert documents in bulk from a declarative job file.

A job file lists input documents and the outputs to produce from each; the
output kind is chosen by file suffix. Outputs can be whole documents, one file
per page, or one file per part (outline section) of the document.

Quick Start:
    >>> from batch_converter import batch_convert
    >>> result = batch_convert('jobs.json')
    >>> result.ok

Main Classes:
    - Converter: Convert a single input to a single output
    - BatchRunner: Run a list of jobs, collecting failures

Data Classes:
    - Job: One input/output pair with optional transform
    - SingleOutput / TemplatedOutput: Output destinations
    - BatchResult: Aggregate result of a batch

Exceptions:
    - ConverterError: Base exception; see batch_converter.exceptions

For CLI usage, use the 'batch-converter' command after installation.
"""

# Core classes
from batch_converter.batch import BatchRunner, batch_convert
from batch_converter.converter import Converter, ConversionStrategy, select_strategy

# Parsing
from batch_converter.jobfile import parse_batch_job, parse_batch_job_data

# Data types
from batch_converter.types import (
    BatchResult,
    Job,
    JobFailure,
    OptionKey,
    SingleOutput,
    TemplatedOutput,
    TransformOptions,
    UnitType,
)

# Exceptions
from batch_converter.exceptions import (
    BatchJobFileOpenError,
    BatchJobFileParseError,
    ConverterError,
    ConvertFailedError,
    ConvertTypeUnknownError,
    ExtensionError,
    InFileLoadError,
    NotSupportedError,
    OutFileOpenError,
    OutFileWriteError,
    TransformOptionsError,
    UnknownConverterError,
)

# Collaborators
from batch_converter.progress import CallbackProgress, NullProgress
from batch_converter.registry import WriterRegistry, register_writer, registry

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "BatchRunner",
    "Converter",
    "ConversionStrategy",
    "batch_convert",
    "select_strategy",
    "parse_batch_job",
    "parse_batch_job_data",
    # Data types
    "BatchResult",
    "Job",
    "JobFailure",
    "OptionKey",
    "SingleOutput",
    "TemplatedOutput",
    "TransformOptions",
    "UnitType",
    # Exceptions
    "BatchJobFileOpenError",
    "BatchJobFileParseError",
    "ConverterError",
    "ConvertFailedError",
    "ConvertTypeUnknownError",
    "ExtensionError",
    "InFileLoadError",
    "NotSupportedError",
    "OutFileOpenError",
    "OutFileWriteError",
    "TransformOptionsError",
    "UnknownConverterError",
    # Collaborators
    "CallbackProgress",
    "NullProgress",
    "WriterRegistry",
    "register_writer",
    "registry",
    # Version info
    "__version__",
]
