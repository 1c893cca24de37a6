"""Output path derivation for part and page outputs."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from .types import OutputSpec, SingleOutput, TemplatedOutput

PLACEHOLDER = "*"


def normalize_user_path(raw: str) -> str:
    """Convert native separators in a user-supplied path to ``/``."""

    if os.sep != "/":
        return raw.replace(os.sep, "/")
    return raw


def is_part_template(path: str | Path) -> bool:
    """Return whether the base name of *path* carries the part placeholder."""

    return PLACEHOLDER in PurePosixPath(str(path)).stem


def split_template(prefix: str, suffix: str) -> TemplatedOutput:
    """Build a templated output from a ``[prefix, suffix]`` pair.

    ``prefix`` may end in a directory separator (``"parts/"``) or carry a file
    name prefix (``"parts/score-"``); the placeholder is appended to it.
    """

    return _templated(normalize_user_path(prefix) + PLACEHOLDER, suffix)


def output_from_string(raw: str) -> OutputSpec:
    """Parse a literal output path; placeholder base names become templates."""

    normalized = normalize_user_path(raw)
    if is_part_template(normalized):
        path = PurePosixPath(normalized)
        return _templated(str(path.parent / path.stem), path.suffix)
    return SingleOutput(Path(normalized))


def _templated(stem_path: str, suffix: str) -> TemplatedOutput:
    head, _, stem = stem_path.rpartition("/")
    directory = Path(head) if head else Path(".")
    return TemplatedOutput(directory=directory, stem=stem, suffix=suffix.lstrip(".").lower())


def resolve_part_path(output: TemplatedOutput, part_name: str) -> Path:
    """Return the concrete path of *output* for the part named *part_name*.

    Every placeholder occurrence in the stem is replaced. Two parts sharing a
    display name resolve to the same path.
    """

    return output.directory / f"{output.stem.replace(PLACEHOLDER, part_name)}.{output.suffix}"


def page_output_path(path: Path, page_index: int) -> Path:
    """Return the file for the zero-based *page_index* of *path*.

    File names count pages from 1: ``score.png`` becomes ``score-1.png``.
    """

    return path.parent / f"{path.stem}-{page_index + 1}{path.suffix}"


__all__ = [
    "PLACEHOLDER",
    "is_part_template",
    "normalize_user_path",
    "output_from_string",
    "page_output_path",
    "resolve_part_path",
    "split_template",
]
