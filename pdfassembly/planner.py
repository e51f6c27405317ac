"""Compile a :class:`~pdfassembly.types.Job` into an :class:`ExecutionPlan`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional, Sequence, Tuple

from .config import AssemblyConfig, CompressionMode, Strategy
from .exceptions import BuildCancelled, ValidationError, ValidationReason
from .labels import LabelAllocator
from .process import ProcessRunner
from .ranges import is_whole_document, normalize, validate
from .rotation import bucket_rotations, relocate, whole_file_rotations
from .tempfiles import TempFileHandle, TempFileManager
from .tools import (
    build_bucket_rotation_command,
    build_ghostscript_command,
    build_pdftk_assembly_command,
    build_qpdf_assembly_command,
    build_whole_rotation_command,
    pdftk_terms,
)
from .types import ExecutionPlan, Job, ResolvedSpec, Rotation, Step, StepKind

LOGGER = logging.getLogger("pdfassembly.planner")

COPY_TOOL = "copy"


def resolve_specs(job: Job) -> List[ResolvedSpec]:
    """Validate the page specifications of *job* and normalize their ranges.

    Raises:
        ValidationError: For the first specification (1-based) without a
            resolvable source or with an invalid range.
    """

    if not job.page_specs:
        raise ValidationError(ValidationReason.MISSING_SOURCE, 1, "The job has no page specifications.")

    default = job.default_source
    resolved: List[ResolvedSpec] = []
    for index, spec in enumerate(job.page_specs, start=1):
        source = spec.source or default
        if source is None:
            raise ValidationError(ValidationReason.MISSING_SOURCE, index)
        if not validate(spec.range):
            raise ValidationError(ValidationReason.INVALID_RANGE, index)
        resolved.append(ResolvedSpec(source.path, normalize(spec.range), Rotation.parse(spec.rotation)))
    return resolved


def _command_step(command: Sequence[str], kind: StepKind, inputs: Sequence[Path], output: Path) -> Step:
    return Step(
        tool=command[0],
        args=tuple(command[1:]),
        kind=kind,
        inputs=tuple(dict.fromkeys(inputs)),
        outputs=(output,),
    )


def copy_step(source: Path, destination: Path) -> Step:
    return Step(
        tool=COPY_TOOL,
        args=(str(source), str(destination)),
        kind=StepKind.COPY,
        inputs=(source,),
        outputs=(destination,),
    )


class PlanBuilder:
    """Turn page specifications into an ordered list of tool invocations.

    Temporary files are allocated from *temp_manager*. When the build fails,
    the files created by that build are released before the error propagates.
    """

    def __init__(
        self,
        config: Optional[AssemblyConfig] = None,
        runner: Optional[ProcessRunner] = None,
        temp_manager: Optional[TempFileManager] = None,
    ) -> None:
        self.config = config or AssemblyConfig()
        self.runner = runner or self.config.create_runner()
        self.temp_manager = temp_manager or TempFileManager(self.config.temp_dir)

    def build(self, job: Job) -> ExecutionPlan:
        specs = resolve_specs(job)
        if job.output_path is None:
            raise BuildCancelled()

        created: List[TempFileHandle] = []
        try:
            steps = self._compile(specs, job, created)
        except Exception:
            for handle in created:
                self.temp_manager.release(handle)
            raise

        plan = ExecutionPlan(
            steps=steps,
            output_path=job.output_path,
            temp_files=created,
            strategy=self.config.strategy.value,
        )
        LOGGER.info(
            "Built %s plan with %d step(s) and %d temporary file(s)",
            plan.strategy,
            len(plan.steps),
            len(plan.temp_files),
        )
        return plan

    def _temp(self, created: List[TempFileHandle]) -> Path:
        handle = self.temp_manager.create(".pdf")
        created.append(handle)
        return handle.path

    def _compile(self, specs: List[ResolvedSpec], job: Job, created: List[TempFileHandle]) -> List[Step]:
        output = job.output_path
        assert output is not None
        config = self.config

        if self._is_plain_copy(specs, job.compress):
            source = specs[0].file
            if source == output:
                LOGGER.info("Output %s is already the requested document", output)
                return []
            return [copy_step(source, output)]

        in_place = output in {spec.file for spec in specs}
        if in_place:
            LOGGER.debug("Output %s is also a source; writing through a temporary file", output)

        pdftk_assembly = config.strategy is Strategy.ROTATE_INLINE or config.labelled_assembly
        compression = config.compression
        if job.compress and compression is CompressionMode.QPDF_IMAGES and pdftk_assembly:
            LOGGER.warning("pdftk cannot optimize images; compressing with Ghostscript instead")
            compression = CompressionMode.GHOSTSCRIPT
        optimize_images = job.compress and compression is CompressionMode.QPDF_IMAGES
        ghostscript_pass = job.compress and compression is CompressionMode.GHOSTSCRIPT

        steps: List[Step] = []
        cache: Dict[Path, int] = {}
        if config.strategy is Strategy.ROTATE_THEN_CONCAT:
            final_specs = self._rotate_buckets(specs, steps, created, cache)
        elif config.strategy is Strategy.ROTATE_WHOLE_FILES:
            final_specs = self._rotate_whole_files(specs, steps, created)
        else:
            final_specs = specs

        assembly_output = self._temp(created) if (ghostscript_pass or in_place) else output
        if pdftk_assembly:
            steps.append(self._pdftk_assembly(final_specs, assembly_output))
        else:
            steps.append(self._qpdf_assembly(final_specs, assembly_output, optimize_images))

        if ghostscript_pass:
            command = build_ghostscript_command(config.ghostscript, assembly_output, output)
            steps.append(_command_step(command, StepKind.COMPRESS, [assembly_output], output))
        elif in_place:
            steps.append(copy_step(assembly_output, output))
        return steps

    @staticmethod
    def _is_plain_copy(specs: Sequence[ResolvedSpec], compress: bool) -> bool:
        return (
            len(specs) == 1
            and not compress
            and specs[0].rotation is Rotation.NONE
            and is_whole_document(specs[0].range)
        )

    def _rotate_buckets(
        self,
        specs: List[ResolvedSpec],
        steps: List[Step],
        created: List[TempFileHandle],
        cache: MutableMapping[Path, int],
    ) -> List[ResolvedSpec]:
        buckets = bucket_rotations(specs, cache, self.runner.query_page_count)
        bucket_files: Dict[Rotation, Path] = {}
        for bucket in buckets:
            target = self._temp(created)
            bucket_files[bucket.rotation] = target
            terms = bucket.terms()
            command = build_bucket_rotation_command(self.config.qpdf, terms, target, bucket.rotation)
            steps.append(_command_step(command, StepKind.ROTATE, [file for file, _ in terms], target))
        return relocate(specs, buckets, bucket_files)

    def _rotate_whole_files(
        self,
        specs: List[ResolvedSpec],
        steps: List[Step],
        created: List[TempFileHandle],
    ) -> List[ResolvedSpec]:
        rotated: Dict[Tuple[Rotation, Path], Path] = {}
        for rotation, file in whole_file_rotations(specs):
            target = self._temp(created)
            rotated[(rotation, file)] = target
            command = build_whole_rotation_command(self.config.qpdf, file, target, rotation)
            steps.append(_command_step(command, StepKind.ROTATE, [file], target))
        return [
            spec if spec.rotation is Rotation.NONE else ResolvedSpec(rotated[(spec.rotation, spec.file)], spec.range)
            for spec in specs
        ]

    def _qpdf_assembly(self, specs: Sequence[ResolvedSpec], output: Path, optimize_images: bool) -> Step:
        terms = [(spec.file, spec.range) for spec in specs]
        command = build_qpdf_assembly_command(self.config.qpdf, terms, output, optimize_images=optimize_images)
        return _command_step(command, StepKind.ASSEMBLE, [spec.file for spec in specs], output)

    def _pdftk_assembly(self, specs: Sequence[ResolvedSpec], output: Path) -> Step:
        allocator = LabelAllocator()
        terms: List[str] = []
        for spec in specs:
            terms.extend(pdftk_terms(allocator.label_for(spec.file), spec.range, spec.rotation))
        command = build_pdftk_assembly_command(self.config.pdftk, allocator.declarations(), terms, output)
        return _command_step(command, StepKind.ASSEMBLE, [spec.file for spec in specs], output)


__all__ = ["COPY_TOOL", "PlanBuilder", "copy_step", "resolve_specs"]
