"""High level helpers: build and execute a job under one temp-file scope."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Union

from .config import AssemblyConfig
from .exceptions import BuildCancelled, PDFAssemblyError
from .executor import PlanExecutor
from .planner import PlanBuilder
from .process import ProcessRunner
from .tempfiles import TempFileManager
from .types import AssemblyResult, FileRef, Job, PageSpec, PathLike, ResultStatus, Rotation

LOGGER = logging.getLogger("pdfassembly")


def page(
    file: Optional[PathLike] = None,
    range: str = "",
    rotation: Union[str, int, Rotation, None] = Rotation.NONE,
) -> PageSpec:
    """Shorthand for a :class:`PageSpec` (``page("a.pdf", "1-3", 90)``)."""

    source = FileRef(file) if file is not None and str(file) else None
    return PageSpec(source=source, range=range, rotation=Rotation.parse(rotation))


def assemble(
    job: Job,
    config: Optional[AssemblyConfig] = None,
    runner: Optional[ProcessRunner] = None,
) -> AssemblyResult:
    """Compile *job* and run the resulting plan.

    Every temporary file is released before returning, whether the build
    fails, a step fails or everything succeeds. Errors are reported through
    :attr:`AssemblyResult.error`; an empty output path yields a cancelled
    result.
    """

    config = config or AssemblyConfig()
    runner = runner or config.create_runner()
    with TempFileManager(config.temp_dir) as temps:
        try:
            plan = PlanBuilder(config, runner, temps).build(job)
        except BuildCancelled:
            LOGGER.info("No output path chosen; nothing to do")
            return AssemblyResult(ResultStatus.CANCELLED)
        except PDFAssemblyError as exc:
            LOGGER.error("Unable to build plan: %s", exc)
            return AssemblyResult(ResultStatus.FAILED, job.output_path, error=exc)
        return PlanExecutor(runner).run(plan)


def assemble_pdf(
    pages: Sequence[PageSpec],
    output: Optional[PathLike],
    *,
    compress: bool = False,
    files: Iterable[PathLike] = (),
    config: Optional[AssemblyConfig] = None,
    runner: Optional[ProcessRunner] = None,
) -> AssemblyResult:
    """Assemble *pages* into *output* and return the :class:`AssemblyResult`."""

    job = Job(
        page_specs=tuple(pages),
        compress=compress,
        output_path=output,
        files=tuple(FileRef(file) for file in files),
    )
    return assemble(job, config=config, runner=runner)


__all__ = ["assemble", "assemble_pdf", "page"]
