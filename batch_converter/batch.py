"""Sequential batch processing of conversion jobs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .converter import Converter
from .exceptions import ConverterError
from .jobfile import parse_batch_job
from .progress import NullProgress, ProgressSink
from .types import BatchResult, Job, JobFailure

LOGGER = logging.getLogger("batch_converter.batch")


class BatchRunner:
    """Run jobs one after another, collecting failures instead of stopping.

    Options such as the style path or extension apply to every job in the
    batch; per-job transforms travel with the jobs themselves.
    """

    def __init__(
        self,
        converter: Optional[Converter] = None,
        *,
        style_path: Union[str, Path, None] = None,
        force: bool = False,
        sound_profile: Optional[str] = None,
        extension: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> None:
        self.converter = converter or Converter()
        self.style_path = style_path
        self.force = force
        self.sound_profile = sound_profile
        self.extension = extension
        self.progress: ProgressSink = progress or NullProgress()

    def run_file(self, job_file: Union[str, Path]) -> BatchResult:
        """Parse *job_file* and run its jobs.

        A job file that cannot be read or parsed is reported to the progress
        sink as a failed batch and the parse error is raised.
        """

        self.progress.start()
        try:
            jobs = parse_batch_job(job_file, self.converter.transform_parser)
        except Exception as exc:
            if isinstance(exc, ConverterError):
                LOGGER.error("failed parse batch job file, err: %s", exc)
            else:
                LOGGER.exception("Unexpected error parsing batch job file %s", job_file)
            failure = JobFailure(input=str(job_file), output="", error=_describe(exc))
            self.progress.finish(BatchResult(total=0, errors=(failure,)))
            raise
        return self._run(jobs)

    def run(self, jobs: Iterable[Job]) -> BatchResult:
        """Run already parsed *jobs* in order."""

        self.progress.start()
        return self._run(list(jobs))

    def _run(self, jobs: List[Job]) -> BatchResult:
        failures: List[JobFailure] = []
        try:
            for current, job in enumerate(jobs, start=1):
                self.progress.progress(current, len(jobs), str(job.input))
                try:
                    self.converter.convert_file(
                        job.input,
                        job.output,
                        style_path=self.style_path,
                        force=self.force,
                        sound_profile=self.sound_profile,
                        extension=self.extension,
                        transform=job.transform,
                    )
                except Exception as exc:
                    if not isinstance(exc, ConverterError):
                        LOGGER.exception("Unexpected error converting %s", job.input)
                    failures.append(JobFailure(input=str(job.input), output=str(job.output), error=_describe(exc)))
        finally:
            result = BatchResult(total=len(jobs), errors=tuple(failures))
            self.progress.finish(result)

        if result.ok:
            LOGGER.info("Converted %d job(s)", result.total)
        else:
            LOGGER.warning("%d of %d job(s) failed:\n%s", len(result.errors), result.total, result.message)
        return result


def _describe(exc: Exception) -> str:
    code = getattr(exc, "code", type(exc).__name__)
    return f"[{code}] {exc}"


def batch_convert(
    job_file: Union[str, Path],
    *,
    style_path: Union[str, Path, None] = None,
    force: bool = False,
    sound_profile: Optional[str] = None,
    extension: Optional[str] = None,
    progress: Optional[ProgressSink] = None,
    converter: Optional[Converter] = None,
) -> BatchResult:
    """Convert every job of *job_file*; see :class:`BatchRunner`."""

    runner = BatchRunner(
        converter,
        style_path=style_path,
        force=force,
        sound_profile=sound_profile,
        extension=extension,
        progress=progress,
    )
    return runner.run_file(job_file)


__all__ = ["BatchRunner", "batch_convert"]
