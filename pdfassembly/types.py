"""
Type definitions and dataclasses for pdfassembly.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from .exceptions import PDFAssemblyError
from .utils import resolve_path

if TYPE_CHECKING:  # pragma: no cover
    from .tempfiles import TempFileHandle

PathLike = Union[str, Path]


class Rotation(str, Enum):
    """Clockwise rotation applied to a page specification."""

    NONE = "NONE"
    R90 = "90"
    R180 = "180"
    R270 = "270"

    @property
    def degrees(self) -> int:
        return 0 if self is Rotation.NONE else int(self.value)

    @classmethod
    def parse(cls, value: Union[str, int, "Rotation", None]) -> "Rotation":
        """Return the rotation matching *value* (``"90"``, ``90``, ``"none"``...)."""

        if isinstance(value, Rotation):
            return value
        text = "" if value is None else str(value).strip().upper()
        if text in ("", "0", "NONE"):
            return cls.NONE
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unsupported rotation: {value!r}")


class StepKind(str, Enum):
    """What a plan step does."""

    ROTATE = "rotate"
    ASSEMBLE = "assemble"
    COMPRESS = "compress"
    COPY = "copy"


class StepState(str, Enum):
    """Execution state of a single step."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ResultStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FileRef:
    """
    A source PDF referenced by one or more page specifications.

    Attributes:
        path: Absolute path to the file
        size: File size in bytes, informational only
    """
    path: Path
    size: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", resolve_path(self.path))

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class PageSpec:
    """
    One row of the output description.

    Attributes:
        source: File the pages come from; ``None`` uses the job's only file
        range: Raw page range as typed by the user
        rotation: Clockwise rotation for these pages
    """
    source: Optional[FileRef] = None
    range: str = ""
    rotation: Rotation = Rotation.NONE


@dataclass(frozen=True)
class ResolvedSpec:
    """A page specification after source resolution and range normalization."""

    file: Path
    range: str
    rotation: Rotation = Rotation.NONE


@dataclass(frozen=True)
class Job:
    """
    Input of the plan compiler.

    Attributes:
        page_specs: Ordered page specifications (output page order)
        compress: Whether the output should be compressed
        output_path: Destination; ``None`` means the save dialog was cancelled
        files: Declared source files, used for the single-file default
    """
    page_specs: Tuple[PageSpec, ...]
    compress: bool = False
    output_path: Optional[Path] = None
    files: Tuple[FileRef, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "page_specs", tuple(self.page_specs))
        object.__setattr__(self, "files", tuple(self.files))
        if self.output_path is not None and str(self.output_path).strip():
            object.__setattr__(self, "output_path", resolve_path(self.output_path))
        else:
            object.__setattr__(self, "output_path", None)

    @property
    def known_files(self) -> Tuple[FileRef, ...]:
        """Distinct files of the job, declared ones first."""

        seen: Dict[Path, FileRef] = {}
        for ref in list(self.files) + [spec.source for spec in self.page_specs if spec.source]:
            seen.setdefault(ref.path, ref)
        return tuple(seen.values())

    @property
    def default_source(self) -> Optional[FileRef]:
        known = self.known_files
        return known[0] if len(known) == 1 else None


@dataclass(frozen=True)
class Step:
    """
    One external command (or internal file copy) of an execution plan.

    ``inputs`` and ``outputs`` declare which files the step reads and writes.
    """
    tool: str
    args: Tuple[str, ...]
    kind: StepKind
    inputs: Tuple[Path, ...] = ()
    outputs: Tuple[Path, ...] = ()

    @property
    def command(self) -> List[str]:
        return [self.tool, *self.args]

    def describe(self) -> str:
        return shlex.join(self.command)


@dataclass
class ExecutionPlan:
    """Ordered steps plus the temporary files they use."""

    steps: List[Step]
    output_path: Path
    temp_files: List["TempFileHandle"] = field(default_factory=list)
    strategy: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.steps

    def __len__(self) -> int:
        return len(self.steps)


@dataclass
class AssemblyResult:
    """
    Result of building and executing a plan.

    Attributes:
        status: Final outcome
        output_path: Requested output path (may be absent or incomplete on error)
        steps: Steps of the plan that was run
        step_states: State of each step, in plan order
        error: Structured error when the run failed
    """
    status: ResultStatus
    output_path: Optional[Path] = None
    steps: List[Step] = field(default_factory=list)
    step_states: List[StepState] = field(default_factory=list)
    error: Optional[PDFAssemblyError] = None

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCEEDED

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error

    def __str__(self) -> str:
        if self.ok:
            return f"AssemblyResult(success=True, steps={len(self.steps)})"
        if self.status is ResultStatus.CANCELLED:
            return "AssemblyResult(cancelled=True)"
        return f"AssemblyResult(success=False, error='{self.error}')"
