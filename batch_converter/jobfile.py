"""Batch job file parsing.

A batch job file is a JSON array of objects::

    [
        {"in": "score.pdf", "out": "score.txt"},
        {"in": "score.pdf", "out": ["a.pdf", "b.json", ["parts/", "pdf"]]},
        {"in": "score.pdf", "transpose": {"rotate": 90}, "out": "rotated.pdf"}
    ]

``out`` is a path, or an array of paths and ``[prefix, suffix]`` pairs; a pair
produces one file per part of the document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from .backends.base import TransformParser
from .exceptions import BatchJobFileOpenError, BatchJobFileParseError, TransformOptionsError
from .naming import normalize_user_path, output_from_string, split_template
from .types import Job, SingleOutput, TransformOptions

LOGGER = logging.getLogger("batch_converter.jobfile")


def parse_batch_job(path: str | Path, transform_parser: Optional[TransformParser] = None) -> List[Job]:
    """Read and parse the batch job file at *path*."""

    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise BatchJobFileOpenError(f"Cannot open batch job file: {path}. Error: {exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise BatchJobFileParseError(f"Invalid JSON in batch job file {path}: {exc}") from exc

    return parse_batch_job_data(data, transform_parser)


def parse_batch_job_data(data: Any, transform_parser: Optional[TransformParser] = None) -> List[Job]:
    """Turn decoded batch job JSON into a flat, ordered list of jobs.

    A transform that fails to parse aborts the whole batch.
    """

    if not isinstance(data, list):
        raise BatchJobFileParseError(
            f"Batch job file must contain a JSON array, got {type(data).__name__}"
        )

    jobs: List[Job] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise BatchJobFileParseError(f"Job {index} is not an object")

        raw_input = entry.get("in")
        if not isinstance(raw_input, str):
            raise BatchJobFileParseError(f"Job {index} has no 'in' path")
        input_path = Path(normalize_user_path(raw_input))

        transform = _parse_transform(entry.get("transpose"), transform_parser)

        out = entry.get("out")
        if isinstance(out, str):
            jobs.append(Job(input=input_path, output=output_from_string(out), transform=transform))
        elif isinstance(out, list):
            for item in out:
                if isinstance(item, str):
                    output = output_from_string(item)
                elif isinstance(item, list) and len(item) == 2 and all(isinstance(value, str) for value in item):
                    output = split_template(item[0], item[1])
                else:
                    # an empty path has no writer; the job fails as ConvertTypeUnknown
                    LOGGER.warning("Unsupported output %r for job %d (%s)", item, index, raw_input)
                    output = SingleOutput(Path(""))
                jobs.append(Job(input=input_path, output=output, transform=transform))
        else:
            LOGGER.warning("Job %d (%s) has no usable 'out' value", index, raw_input)

    LOGGER.debug("Parsed %d job(s) from %d entries", len(jobs), len(data))
    return jobs


def _parse_transform(payload: Any, transform_parser: Optional[TransformParser]) -> Optional[TransformOptions]:
    if not isinstance(payload, dict) or not payload:
        return None
    if transform_parser is None:
        return TransformOptions(values=dict(payload))
    return transform_parser.parse(payload)


def parse_transform_json(text: str, transform_parser: Optional[TransformParser] = None) -> Optional[TransformOptions]:
    """Parse a transform given as a JSON string, as passed on the command line."""

    if not text or not text.strip():
        return None
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise TransformOptionsError(f"Invalid transform JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise TransformOptionsError("Transform options must be a JSON object")
    return _parse_transform(payload, transform_parser)


__all__ = ["parse_batch_job", "parse_batch_job_data", "parse_transform_json"]
