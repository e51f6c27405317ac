from __future__ import annotations

from pathlib import Path

import pytest

from pdfassembly import tools
from pdfassembly.exceptions import InvalidCommandError
from pdfassembly.tools import (
    Tool,
    ToolType,
    build_bucket_rotation_command,
    build_ghostscript_command,
    build_page_count_command,
    build_pdftk_assembly_command,
    build_qpdf_assembly_command,
    build_whole_rotation_command,
    detect_tool,
    pdftk_terms,
    validate_arguments,
)
from pdfassembly.types import Rotation

A = Path("/docs/a.pdf")
B = Path("/docs/b.pdf")
OUT = Path("/docs/out.pdf")


def test_whole_rotation_command() -> None:
    assert build_whole_rotation_command("qpdf", A, OUT, Rotation.R180) == [
        "qpdf",
        "/docs/a.pdf",
        "/docs/out.pdf",
        "--rotate=+180",
    ]


def test_whole_rotation_requires_angle() -> None:
    with pytest.raises(InvalidCommandError):
        build_whole_rotation_command("qpdf", A, OUT, Rotation.NONE)


def test_bucket_rotation_command() -> None:
    command = build_bucket_rotation_command("qpdf", [(A, "5-z"), (B, "2")], OUT, Rotation.R90)
    assert command == [
        "qpdf",
        "--empty",
        "--pages",
        "/docs/a.pdf",
        "5-z",
        "/docs/b.pdf",
        "2",
        "--",
        "--rotate=+90",
        "/docs/out.pdf",
    ]


@pytest.mark.parametrize("optimize", [False, True])
def test_qpdf_assembly_command(optimize: bool) -> None:
    command = build_qpdf_assembly_command("qpdf", [(A, "1-3"), (B, "1-z")], OUT, optimize_images=optimize)
    expected = ["qpdf", "--empty"]
    if optimize:
        expected.append("--optimize-images")
    expected += ["--pages", "/docs/a.pdf", "1-3", "/docs/b.pdf", "1-z", "--", "/docs/out.pdf"]
    assert command == expected


def test_qpdf_assembly_requires_pages() -> None:
    with pytest.raises(InvalidCommandError):
        build_qpdf_assembly_command("qpdf", [], OUT)


@pytest.mark.parametrize(
    ("rotation", "expected"),
    [
        (Rotation.NONE, ["A1-3", "A7-end"]),
        (Rotation.R90, ["A1-3right", "A7-endright"]),
        (Rotation.R180, ["A1-3down", "A7-enddown"]),
        (Rotation.R270, ["A1-3left", "A7-endleft"]),
    ],
)
def test_pdftk_terms(rotation: Rotation, expected: list[str]) -> None:
    assert pdftk_terms("A", "1-3,7-z", rotation) == expected


def test_pdftk_terms_single_page() -> None:
    assert pdftk_terms("B", "4") == ["B4"]


def test_pdftk_assembly_command() -> None:
    command = build_pdftk_assembly_command("pdftk", ["A=/docs/a.pdf", "B=/docs/b.pdf"], ["A1-2", "B3right"], OUT)
    assert command == [
        "pdftk",
        "A=/docs/a.pdf",
        "B=/docs/b.pdf",
        "cat",
        "A1-2",
        "B3right",
        "output",
        "/docs/out.pdf",
    ]


def test_ghostscript_command() -> None:
    command = build_ghostscript_command("gs", A, OUT)
    assert command[0] == "gs"
    assert "-sDEVICE=pdfwrite" in command
    assert "-dPDFSETTINGS=/screen" in command
    assert "-dAutoRotatePages=/None" in command
    assert {"-dNOPAUSE", "-dQUIET", "-dBATCH"} <= set(command)
    assert command[-2:] == ["-sOutputFile=/docs/out.pdf", "/docs/a.pdf"]


def test_page_count_command() -> None:
    assert build_page_count_command("qpdf", A) == ["qpdf", "--show-npages", "/docs/a.pdf"]


@pytest.mark.parametrize(
    "command",
    [[], [""], ["qpdf", 3], ["qpdf", "bad\x00arg"], [Path("qpdf")]],
)
def test_validate_arguments_rejects_malformed(command: list) -> None:
    with pytest.raises(InvalidCommandError):
        validate_arguments(command)


def test_detect_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tools, "which", lambda names: "/usr/bin/gswin64c" if "gswin64c" in names else None)

    assert detect_tool(ToolType.GHOSTSCRIPT) == Tool(ToolType.GHOSTSCRIPT, "/usr/bin/gswin64c")


def test_detect_tool_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tools, "which", lambda names: None)

    assert detect_tool(ToolType.PDFTK) is None
