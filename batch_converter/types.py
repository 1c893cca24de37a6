"""
Type definitions and dataclasses for Batch Converter.

This module defines data structures used throughout the library.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import ConvertFailedError


@dataclass(frozen=True)
class SingleOutput:
    """A single concrete output path."""

    path: Path

    @property
    def suffix(self) -> str:
        return self.path.suffix.lstrip(".").lower()

    def __str__(self) -> str:
        return self.path.as_posix()


@dataclass(frozen=True)
class TemplatedOutput:
    """
    An output producing one file per part of the loaded document.

    Attributes:
        directory: Directory the part files are written to
        stem: File name without suffix; contains the part placeholder
        suffix: Output kind, lower-case and without the leading dot
    """
    directory: Path
    stem: str
    suffix: str

    @property
    def path(self) -> Path:
        return self.directory / f"{self.stem}.{self.suffix}"

    def __str__(self) -> str:
        return self.path.as_posix()


OutputSpec = Union[SingleOutput, TemplatedOutput]


@dataclass(frozen=True)
class TransformOptions:
    """
    Validated transform payload carried by a job.

    The converter never looks inside ``values``; only the transform
    collaborator that produced the options does.
    """
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Job:
    """
    One unit of work: a single input document converted to a single output.

    Attributes:
        input: Path to the input document
        output: Where and in which format to write the result
        transform: Optional transform applied after loading
    """
    input: Path
    output: OutputSpec
    transform: Optional[TransformOptions] = None


class OptionKey(Enum):
    """Keys understood in :data:`WriterOptions`."""

    PAGE_NUMBER = "page_number"
    UNIT_TYPE = "unit_type"


class UnitType(Enum):
    """Whether a writer serialises a whole document or a single part."""

    WHOLE = "whole"
    PER_PART = "per_part"


WriterOptions = Dict[OptionKey, Any]


@dataclass(frozen=True)
class JobFailure:
    """A job that failed, with enough context to find it again."""

    input: str
    output: str
    error: str

    def __str__(self) -> str:
        return f"failed convert, err: {self.error}, in: {self.input}, out: {self.output}"


@dataclass(frozen=True)
class BatchResult:
    """
    Result of a batch conversion.

    Attributes:
        total: Number of jobs in the batch
        errors: Failed jobs, in processing order
    """
    total: int = 0
    errors: Tuple[JobFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "\n".join(str(failure) for failure in self.errors)

    @property
    def error(self) -> Optional[ConvertFailedError]:
        if self.ok:
            return None
        return ConvertFailedError(self.message)

    def raise_for_status(self) -> None:
        error = self.error
        if error is not None:
            raise error

    def __str__(self) -> str:
        """String representation of the result."""
        if self.ok:
            return f"BatchResult(ok=True, total={self.total})"
        return f"BatchResult(ok=False, total={self.total}, failed={len(self.errors)})"
