"""
Custom exceptions for pdfassembly.

Every error carries a stable ``code`` and a ``params`` mapping so callers can
render their own (translated) message instead of relying on ``str(exc)``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Sequence


class PDFAssemblyError(Exception):
    """Base exception for all pdfassembly errors."""

    code = "ERROR.PDF_CREATION.GENERIC"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF assembly error occurred."

    @property
    def params(self) -> Dict[str, Any]:
        return {"details": self.message}


class ValidationReason(str, Enum):
    """Why a page specification was rejected."""

    INVALID_RANGE = "INVALID_RANGE"
    MISSING_SOURCE = "FILE_REQUIRED"


class ValidationError(PDFAssemblyError):
    """Raised when a page specification cannot be compiled.

    ``spec_index`` is 1-based so it can be shown to the user as a row number.
    """

    def __init__(self, reason: ValidationReason, spec_index: int, message: str = "") -> None:
        self.reason = reason
        self.spec_index = spec_index
        super().__init__(message)

    @property
    def code(self) -> str:  # type: ignore[override]
        return f"ERROR.PAGE_SPEC.{self.reason.value}"

    @property
    def default_message(self) -> str:
        if self.reason is ValidationReason.MISSING_SOURCE:
            return f"Page specification {self.spec_index} has no source file."
        return f"Page specification {self.spec_index} has an invalid page range."

    @property
    def params(self) -> Dict[str, Any]:
        return {"spec": self.spec_index}


class TempFileAccessError(PDFAssemblyError):
    """Raised when a scratch file cannot be created."""

    code = "ERROR.PDF_CREATION.TMP_FILE_ACCESS"

    def __init__(self, cause: BaseException, message: str = "") -> None:
        self.cause = cause
        super().__init__(message or f"Unable to create temporary file: {cause}")

    @property
    def default_message(self) -> str:
        return "Unable to create temporary file."


class ToolExecutionError(PDFAssemblyError):
    """Raised when an external tool exits with a non-zero status."""

    code = "ERROR.PDF_CREATION.TOOL_FAILED"

    def __init__(
        self,
        tool: str,
        args: Sequence[str],
        exit_status: Optional[int],
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        self.tool = tool
        self.args_list = list(args)
        self.exit_status = exit_status
        self.stderr = stderr
        self.stdout = stdout
        detail = stderr.strip() or stdout.strip()
        if exit_status is None:
            message = f"{tool} failed"
        else:
            message = f"{tool} exited with status {exit_status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "External tool failed."

    @property
    def params(self) -> Dict[str, Any]:
        return {
            "tool": self.tool,
            "args": " ".join(self.args_list),
            "status": self.exit_status,
            "details": self.stderr.strip() or self.stdout.strip(),
        }


class StartError(PDFAssemblyError):
    """Raised when an external tool cannot be launched at all."""

    code = "ERROR.PDF_CREATION.TOOL_START"

    def __init__(self, tool: str, args: Sequence[str], cause: BaseException) -> None:
        self.tool = tool
        self.args_list = list(args)
        self.cause = cause
        super().__init__(f"Unable to start {tool}: {cause}")

    @property
    def default_message(self) -> str:
        return "Unable to start external tool."

    @property
    def params(self) -> Dict[str, Any]:
        return {"tool": self.tool, "args": " ".join(self.args_list), "details": str(self.cause)}


class InvalidCommandError(PDFAssemblyError):
    """Raised when a tool argument list is malformed."""

    code = "ERROR.PDF_CREATION.INVALID_COMMAND"

    @property
    def default_message(self) -> str:
        return "Invalid tool command."


class BuildCancelled(PDFAssemblyError):
    """Raised when the job has no output path (the save dialog was cancelled)."""

    code = "CANCELLED"

    @property
    def default_message(self) -> str:
        return "No output path was chosen."
