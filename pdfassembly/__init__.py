"""
PDF Assembly - Build a PDF from page ranges of other PDFs.

This library compiles an ordered list of page specifications (source file,
page range, rotation) into a short sequence of ``qpdf``, ``pdftk`` and
Ghostscript invocations, then runs them with guaranteed cleanup of every
intermediate file.

Quick Start:
    >>> from pdfassembly import assemble_pdf, page
    >>> result = assemble_pdf([page('a.pdf', '1-3'), page('b.pdf', '5+', 90)], 'out.pdf')
    >>> result.ok
    True

Main Classes:
    - PlanBuilder: Compile a Job into an ExecutionPlan
    - PlanExecutor: Run an ExecutionPlan step by step
    - TempFileManager: Scoped temporary files
    - LabelAllocator: Spreadsheet-style file labels for pdftk

Data Classes:
    - FileRef, PageSpec, Job: Compiler input
    - Step, ExecutionPlan: Compiler output
    - AssemblyResult: Outcome of a run

Exceptions:
    - PDFAssemblyError: Base exception
    - ValidationError: Invalid range or missing source (1-based spec index)
    - TempFileAccessError: Scratch file could not be created
    - ToolExecutionError: External tool exited with an error
    - StartError: External tool could not be launched

For CLI usage, use the 'pdf-assemble' command after installation.
"""

# Core classes
from pdfassembly.assembler import assemble, assemble_pdf, page
from pdfassembly.config import AssemblyConfig, CompressionMode, Strategy
from pdfassembly.executor import PlanExecutor
from pdfassembly.labels import LabelAllocator, next_label
from pdfassembly.planner import PlanBuilder
from pdfassembly.process import ProcessResult, ProcessRunner, PypdfPageCounter, SubprocessRunner
from pdfassembly.tempfiles import TempFileHandle, TempFileManager

# Data types
from pdfassembly.types import (
    AssemblyResult,
    ExecutionPlan,
    FileRef,
    Job,
    PageSpec,
    ResultStatus,
    Rotation,
    Step,
    StepKind,
    StepState,
)

# Exceptions
from pdfassembly.exceptions import (
    BuildCancelled,
    InvalidCommandError,
    PDFAssemblyError,
    StartError,
    TempFileAccessError,
    ToolExecutionError,
    ValidationError,
    ValidationReason,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main API
    "assemble",
    "assemble_pdf",
    "page",
    "AssemblyConfig",
    "CompressionMode",
    "Strategy",
    "PlanBuilder",
    "PlanExecutor",
    "LabelAllocator",
    "next_label",
    "TempFileHandle",
    "TempFileManager",
    "ProcessResult",
    "ProcessRunner",
    "PypdfPageCounter",
    "SubprocessRunner",
    # Data types
    "AssemblyResult",
    "ExecutionPlan",
    "FileRef",
    "Job",
    "PageSpec",
    "ResultStatus",
    "Rotation",
    "Step",
    "StepKind",
    "StepState",
    # Exceptions
    "BuildCancelled",
    "InvalidCommandError",
    "PDFAssemblyError",
    "StartError",
    "TempFileAccessError",
    "ToolExecutionError",
    "ValidationError",
    "ValidationReason",
    # Version info
    "__version__",
]
