"""External tool detection and command grammar for :mod:`pdfassembly`.

Every ``build_*`` function returns a validated argument list (executable
first) that is handed to the process runner as-is, without a shell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence, Tuple

from .exceptions import InvalidCommandError
from .ranges import END_MARKER
from .types import Rotation
from .utils import which

LOGGER = logging.getLogger("pdfassembly.tools")


class ToolType(str, Enum):
    """Enumeration of supported page tools."""

    QPDF = "qpdf"
    PDFTK = "pdftk"
    GHOSTSCRIPT = "ghostscript"


@dataclass(frozen=True)
class Tool:
    """Represents a page tool and its executable."""

    type: ToolType
    executable: str


_TOOL_CANDIDATES: list[tuple[ToolType, Sequence[str]]] = [
    (ToolType.QPDF, ("qpdf",)),
    (ToolType.PDFTK, ("pdftk", "pdftk-java")),
    (ToolType.GHOSTSCRIPT, ("gs", "gswin64c", "gswin32c")),
]

PDFTK_ROTATION_KEYWORDS = {
    Rotation.NONE: "",
    Rotation.R90: "right",
    Rotation.R180: "down",
    Rotation.R270: "left",
}

PDFTK_END_MARKER = "end"

PageTerm = Tuple[Path, str]


def default_executable(tool_type: ToolType) -> str:
    for candidate_type, executables in _TOOL_CANDIDATES:
        if candidate_type is tool_type:
            return executables[0]
    raise ValueError(f"Unsupported tool: {tool_type}")  # pragma: no cover


def detect_tool(tool_type: ToolType) -> Tool | None:
    """Return the first executable of *tool_type* found on ``PATH``."""

    for candidate_type, executables in _TOOL_CANDIDATES:
        if candidate_type is not tool_type:
            continue
        executable = which(executables)
        if executable:
            return Tool(candidate_type, executable)
    return None


def validate_arguments(command: Iterable[object]) -> list[str]:
    """Check that *command* is a plain list of strings safe to pass to ``exec``."""

    arguments = list(command)
    if not arguments or not isinstance(arguments[0], str) or not arguments[0]:
        raise InvalidCommandError("Command must start with an executable name")
    for argument in arguments:
        if not isinstance(argument, str):
            raise InvalidCommandError(f"Command argument must be a string, got {argument!r}")
        if "\x00" in argument:
            raise InvalidCommandError("Command argument contains a NUL byte")
    return arguments


def _rotate_flag(rotation: Rotation) -> str:
    if rotation is Rotation.NONE:
        raise InvalidCommandError("A rotation pass needs a rotation angle")
    return f"--rotate=+{rotation.degrees}"


def _page_arguments(terms: Sequence[PageTerm]) -> list[str]:
    if not terms:
        raise InvalidCommandError("At least one page selection is required")
    arguments: list[str] = []
    for file, page_range in terms:
        arguments.extend([str(file), page_range])
    return arguments


def build_whole_rotation_command(
    executable: str, source: Path, output: Path, rotation: Rotation
) -> list[str]:
    """``qpdf <in> <out> --rotate=+<angle>``: rotate every page of *source*."""

    return validate_arguments([executable, str(source), str(output), _rotate_flag(rotation)])


def build_bucket_rotation_command(
    executable: str, terms: Sequence[PageTerm], output: Path, rotation: Rotation
) -> list[str]:
    """Concatenate *terms* into *output* and rotate the result in the same call."""

    return validate_arguments(
        [executable, "--empty", "--pages", *_page_arguments(terms), "--", _rotate_flag(rotation), str(output)]
    )


def build_qpdf_assembly_command(
    executable: str,
    terms: Sequence[PageTerm],
    output: Path,
    *,
    optimize_images: bool = False,
) -> list[str]:
    """``qpdf --empty [--optimize-images] --pages <file> <range>... -- <out>``."""

    command = [executable, "--empty"]
    if optimize_images:
        command.append("--optimize-images")
    command.extend(["--pages", *_page_arguments(terms), "--", str(output)])
    return validate_arguments(command)


def pdftk_terms(label: str, normalized_range: str, rotation: Rotation = Rotation.NONE) -> list[str]:
    """Translate a normalized range into pdftk ``cat`` terms for *label*.

    pdftk takes one range per term and spells the last page ``end``, so
    ``"1-3,7-z"`` becomes ``["A1-3", "A7-end"]`` (plus a rotation keyword).
    """

    keyword = PDFTK_ROTATION_KEYWORDS[rotation]
    terms = []
    for part in normalized_range.split(","):
        start, separator, end = part.partition("-")
        if separator and end == END_MARKER:
            part = f"{start}-{PDFTK_END_MARKER}"
        terms.append(f"{label}{part}{keyword}")
    return terms


def build_pdftk_assembly_command(
    executable: str,
    declarations: Sequence[str],
    terms: Sequence[str],
    output: Path,
) -> list[str]:
    """``pdftk A=<file>... cat <term>... output <out>``."""

    if not declarations or not terms:
        raise InvalidCommandError("pdftk assembly needs at least one input and one page term")
    return validate_arguments([executable, *declarations, "cat", *terms, "output", str(output)])


def build_ghostscript_command(executable: str, source: Path, output: Path) -> list[str]:
    """Construct the Ghostscript image-recompressing rewrite of *source*.

    Automatic page rotation is disabled since rotation is decided upstream.
    """

    return validate_arguments(
        [
            executable,
            "-sDEVICE=pdfwrite",
            "-dCompatibilityLevel=1.4",
            "-dPDFSETTINGS=/screen",
            "-dNOPAUSE",
            "-dQUIET",
            "-dBATCH",
            "-dAutoRotatePages=/None",
            f"-sOutputFile={output}",
            str(source),
        ]
    )


def build_page_count_command(executable: str, file: Path) -> list[str]:
    return validate_arguments([executable, "--show-npages", str(file)])


__all__ = [
    "ToolType",
    "Tool",
    "PDFTK_ROTATION_KEYWORDS",
    "PageTerm",
    "default_executable",
    "detect_tool",
    "validate_arguments",
    "build_whole_rotation_command",
    "build_bucket_rotation_command",
    "build_qpdf_assembly_command",
    "pdftk_terms",
    "build_pdftk_assembly_command",
    "build_ghostscript_command",
    "build_page_count_command",
]
