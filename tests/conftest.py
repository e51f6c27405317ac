from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfassembly.config import AssemblyConfig  # noqa: E402
from pdfassembly.process import ProcessResult  # noqa: E402


class FakeRunner:
    """In-memory stand-in for the process collaborator.

    ``fail_at`` makes the n-th ``execute`` call (0-based) exit with status 2,
    ``start_error_at`` makes it raise ``FileNotFoundError``.
    """

    def __init__(
        self,
        page_counts: Optional[Dict[Path, int]] = None,
        default_pages: int = 10,
        fail_at: Optional[int] = None,
        start_error_at: Optional[int] = None,
    ) -> None:
        self.page_counts = dict(page_counts or {})
        self.default_pages = default_pages
        self.fail_at = fail_at
        self.start_error_at = start_error_at
        self.calls: List[Tuple[str, List[str]]] = []
        self.count_queries: List[Path] = []
        self.copies: List[Tuple[Path, Path]] = []

    def execute(self, tool: str, args: Sequence[str]) -> ProcessResult:
        index = len(self.calls)
        self.calls.append((tool, list(args)))
        if index == self.start_error_at:
            raise FileNotFoundError(f"No such file or directory: '{tool}'")
        if index == self.fail_at:
            return ProcessResult(2, stdout="", stderr="qpdf: something broke")
        return ProcessResult(0)

    def query_page_count(self, file: Path) -> int:
        self.count_queries.append(file)
        return self.page_counts.get(file, self.default_pages)

    def copy_file(self, source: Path, destination: Path) -> None:
        self.copies.append((source, destination))


def write_pdf(path: Path, pages: int = 1) -> Path:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    with path.open("wb") as stream:
        writer.write(stream)
    return path


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def scratch_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "scratch"
    directory.mkdir()
    return directory


@pytest.fixture()
def config(scratch_dir: Path) -> AssemblyConfig:
    return AssemblyConfig(temp_dir=scratch_dir)


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    write_pdf(pdf_path, pages=5)
    return pdf_path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[[str, int], Path]:
    def _create(filename: str, pages: int = 1) -> Path:
        return write_pdf(tmp_path / filename, pages=pages)

    return _create


@pytest.fixture()
def paths(tmp_path: Path) -> Dict[str, Path]:
    """Resolved (not necessarily existing) source and output paths."""

    return {name: (tmp_path / f"{name}.pdf").resolve() for name in ("a", "b", "c", "out")}
