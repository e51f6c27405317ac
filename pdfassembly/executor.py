"""Run an :class:`ExecutionPlan` step by step."""

from __future__ import annotations

import logging
from typing import List, Optional

from .exceptions import InvalidCommandError, PDFAssemblyError, StartError, ToolExecutionError
from .process import ProcessRunner
from .types import AssemblyResult, ExecutionPlan, ResultStatus, Step, StepKind, StepState

LOGGER = logging.getLogger("pdfassembly.executor")


def check_in_place(steps: List[Step]) -> None:
    """Refuse plans where a step would overwrite a file it is reading."""

    for index, step in enumerate(steps, start=1):
        overlap = set(step.inputs) & set(step.outputs)
        if overlap:
            raise InvalidCommandError(
                f"Step {index} ({step.tool}) reads and writes {', '.join(sorted(map(str, overlap)))}"
            )


class PlanExecutor:
    """Execute plan steps strictly in order, stopping at the first failure.

    Temporary files of the plan are released once the loop ends, whatever the
    outcome. On failure the output file may be absent or incomplete.
    """

    def __init__(self, runner: ProcessRunner) -> None:
        self.runner = runner

    def run(self, plan: ExecutionPlan) -> AssemblyResult:
        states: List[StepState] = [StepState.PENDING] * len(plan.steps)
        error: Optional[PDFAssemblyError] = None
        try:
            check_in_place(plan.steps)
            for index, step in enumerate(plan.steps):
                states[index] = StepState.RUNNING
                LOGGER.debug("Running step %d/%d: %s", index + 1, len(plan.steps), step.describe())
                try:
                    self._run_step(step)
                except PDFAssemblyError as exc:
                    states[index] = StepState.FAILED
                    error = exc
                    LOGGER.error("Step %d (%s) failed: %s", index + 1, step.kind.value, exc)
                    break
                states[index] = StepState.SUCCEEDED
        except InvalidCommandError as exc:
            error = exc
            LOGGER.error("Refusing to run plan: %s", exc)
        finally:
            for handle in plan.temp_files:
                handle.release()

        if error is not None:
            return AssemblyResult(ResultStatus.FAILED, plan.output_path, list(plan.steps), states, error)
        LOGGER.info("Wrote %s in %d step(s)", plan.output_path, len(plan.steps))
        return AssemblyResult(ResultStatus.SUCCEEDED, plan.output_path, list(plan.steps), states)

    def _run_step(self, step: Step) -> None:
        if step.kind is StepKind.COPY:
            try:
                self.runner.copy_file(step.inputs[0], step.outputs[0])
            except OSError as exc:
                raise ToolExecutionError(step.tool, step.args, None, stderr=str(exc)) from exc
            return

        try:
            result = self.runner.execute(step.tool, list(step.args))
        except OSError as exc:
            raise StartError(step.tool, step.args, exc) from exc
        if not result.ok:
            raise ToolExecutionError(step.tool, step.args, result.exit_status, result.stderr, result.stdout)


__all__ = ["PlanExecutor", "check_in_place"]
