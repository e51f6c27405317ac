"""Scoped temporary files used as intermediate plan outputs."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from .exceptions import TempFileAccessError

LOGGER = logging.getLogger("pdfassembly.tempfiles")

TEMP_PREFIX = "pdfassembly-"


class TempFileHandle:
    """Owns one temporary file on disk until :meth:`release` is called."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.released = False

    def release(self) -> None:
        """Delete the file. Safe to call more than once; never raises."""

        if self.released:
            return
        self.released = True
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            LOGGER.warning("Failed to remove temporary file %s: %s", self.path, exc)

    def __fspath__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        state = "released" if self.released else "open"
        return f"TempFileHandle({str(self.path)!r}, {state})"


class TempFileManager:
    """Create temporary files for one build and release them all at the end.

    Use as a context manager so every file is removed on any exit path::

        with TempFileManager() as temps:
            handle = temps.create()
    """

    def __init__(self, directory: Optional[Path] = None, prefix: str = TEMP_PREFIX) -> None:
        self.directory = Path(directory) if directory is not None else None
        self.prefix = prefix
        self._handles: List[TempFileHandle] = []

    def create(self, suffix: str = ".pdf") -> TempFileHandle:
        try:
            descriptor, name = tempfile.mkstemp(
                suffix=suffix,
                prefix=self.prefix,
                dir=str(self.directory) if self.directory is not None else None,
            )
        except OSError as exc:
            LOGGER.error("Unable to create temporary file: %s", exc)
            raise TempFileAccessError(exc) from exc
        os.close(descriptor)
        handle = TempFileHandle(Path(name).resolve())
        self._handles.append(handle)
        LOGGER.debug("Created temporary file %s", handle.path)
        return handle

    def release(self, handle: TempFileHandle) -> None:
        handle.release()

    def release_all(self) -> None:
        for handle in self._handles:
            handle.release()

    @property
    def handles(self) -> List[TempFileHandle]:
        return list(self._handles)

    def __enter__(self) -> "TempFileManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release_all()


__all__ = ["TEMP_PREFIX", "TempFileHandle", "TempFileManager"]
