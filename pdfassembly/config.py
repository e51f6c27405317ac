"""Configuration for plan building and execution."""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from .process import PypdfPageCounter, SubprocessRunner
from .tools import ToolType, default_executable, detect_tool

LOGGER = logging.getLogger("pdfassembly.config")

PageCounterName = Literal["qpdf", "pypdf"]


class Strategy(str, Enum):
    """How rotated page specifications are compiled."""

    ROTATE_THEN_CONCAT = "rotate-then-concat"
    ROTATE_INLINE = "rotate-inline"
    ROTATE_WHOLE_FILES = "rotate-whole-files"


class CompressionMode(str, Enum):
    """How compression is applied when a job asks for it."""

    GHOSTSCRIPT = "ghostscript"
    QPDF_IMAGES = "qpdf-images"


@dataclasses.dataclass
class AssemblyConfig:
    """Behavioural toggles for :class:`~pdfassembly.planner.PlanBuilder`.

    ``labelled_assembly`` makes the qpdf strategies assemble with a labelled
    ``pdftk cat`` call instead of ``qpdf --pages``.
    """

    strategy: Strategy = Strategy.ROTATE_THEN_CONCAT
    compression: CompressionMode = CompressionMode.GHOSTSCRIPT
    labelled_assembly: bool = False
    qpdf: str = default_executable(ToolType.QPDF)
    pdftk: str = default_executable(ToolType.PDFTK)
    ghostscript: str = default_executable(ToolType.GHOSTSCRIPT)
    temp_dir: Optional[Path] = None
    page_counter: PageCounterName = "qpdf"

    def __post_init__(self) -> None:
        self.strategy = Strategy(self.strategy)
        self.compression = CompressionMode(self.compression)
        if self.temp_dir is not None:
            self.temp_dir = Path(self.temp_dir).expanduser()
        if self.page_counter not in ("qpdf", "pypdf"):
            raise ValueError(f"Unknown page counter: {self.page_counter}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AssemblyConfig":
        """Build a configuration from a plain mapping, ignoring ``None`` values."""

        known = {field.name for field in dataclasses.fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**{key: value for key, value in mapping.items() if value is not None})

    @classmethod
    def detect(cls, **overrides: Any) -> "AssemblyConfig":
        """Return a configuration pointing at the executables found on ``PATH``."""

        detected: dict[str, Any] = {}
        for name, tool_type in (
            ("qpdf", ToolType.QPDF),
            ("pdftk", ToolType.PDFTK),
            ("ghostscript", ToolType.GHOSTSCRIPT),
        ):
            tool = detect_tool(tool_type)
            if tool is None:
                LOGGER.debug("%s not found on PATH", tool_type.value)
            else:
                detected[name] = tool.executable
        detected.update({key: value for key, value in overrides.items() if value is not None})
        return cls.from_mapping(detected)

    def create_runner(self) -> SubprocessRunner:
        counter = PypdfPageCounter() if self.page_counter == "pypdf" else None
        return SubprocessRunner(qpdf=self.qpdf, page_counter=counter)


__all__ = ["AssemblyConfig", "CompressionMode", "PageCounterName", "Strategy"]
