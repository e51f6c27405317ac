"""Process execution collaborator used by the planner and the executor."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .exceptions import StartError, ToolExecutionError
from .tools import build_page_count_command
from .utils import run_subprocess

LOGGER = logging.getLogger("pdfassembly.process")


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of an external command."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class ProcessRunner(Protocol):
    """Protocol defining the process operations the core needs."""

    def execute(self, tool: str, args: Sequence[str]) -> ProcessResult:
        """Run *tool* with *args* and wait for it. Raises ``OSError`` if it cannot start."""

    def query_page_count(self, file: Path) -> int:
        """Return the number of pages of *file*."""

    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy *source* over *destination*."""


class PypdfPageCounter:
    """Count pages with :mod:`pypdf` instead of spawning ``qpdf --show-npages``."""

    def __call__(self, file: Path) -> int:
        try:
            reader = PdfReader(str(file))
            return len(reader.pages)
        except (OSError, PdfReadError) as exc:
            LOGGER.error("Failed to count pages of %s: %s", file, exc)
            raise ToolExecutionError("pypdf", [str(file)], None, stderr=str(exc)) from exc


class SubprocessRunner:
    """Default :class:`ProcessRunner` backed by :mod:`subprocess`."""

    def __init__(
        self,
        qpdf: str = "qpdf",
        page_counter: Optional[Callable[[Path], int]] = None,
    ) -> None:
        self.qpdf = qpdf
        self.page_counter = page_counter

    def execute(self, tool: str, args: Sequence[str]) -> ProcessResult:
        completed = run_subprocess([tool, *args])
        return ProcessResult(completed.returncode, completed.stdout or "", completed.stderr or "")

    def query_page_count(self, file: Path) -> int:
        if self.page_counter is not None:
            return self.page_counter(file)

        command = build_page_count_command(self.qpdf, file)
        try:
            result = self.execute(command[0], command[1:])
        except OSError as exc:
            LOGGER.error("Failed to execute %s: %s", command[0], exc)
            raise StartError(command[0], command[1:], exc) from exc
        if not result.ok:
            raise ToolExecutionError(command[0], command[1:], result.exit_status, result.stderr, result.stdout)
        try:
            return int(result.stdout.strip())
        except ValueError as exc:
            raise ToolExecutionError(
                command[0],
                command[1:],
                result.exit_status,
                stderr=f"Unexpected page count output: {result.stdout.strip()!r}",
            ) from exc

    def copy_file(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)


__all__ = ["ProcessResult", "ProcessRunner", "PypdfPageCounter", "SubprocessRunner"]
