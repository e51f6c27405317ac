"""Spreadsheet-style handles for multi-file ``pdftk`` commands."""

from __future__ import annotations

import re
from typing import Dict, Hashable, Iterable

FIRST_LABEL = "A"

_LABEL_PATTERN = re.compile(r"[A-Z]+")


def next_label(label: str) -> str:
    """Return the label following *label* (``A``..``Z``, ``AA``, ``AB``, ..., ``AZ``, ``BA``)."""

    if not _LABEL_PATTERN.fullmatch(label or ""):
        raise ValueError(f"Invalid label: {label!r}")

    chars = list(label)
    position = len(chars) - 1
    while position >= 0:
        if chars[position] != "Z":
            chars[position] = chr(ord(chars[position]) + 1)
            return "".join(chars)
        chars[position] = "A"
        position -= 1
    return "A" + "".join(chars)


class LabelAllocator:
    """Assign labels to files in first-seen order.

    A file that was already seen keeps its label. One allocator is used per
    plan so labels stay stable while the plan is built.
    """

    def __init__(self) -> None:
        self._labels: Dict[Hashable, str] = {}
        self._next = FIRST_LABEL

    def label_for(self, file: Hashable) -> str:
        label = self._labels.get(file)
        if label is None:
            label = self._next
            self._labels[file] = label
            self._next = next_label(label)
        return label

    def allocate(self, files: Iterable[Hashable]) -> Dict[Hashable, str]:
        for file in files:
            self.label_for(file)
        return dict(self._labels)

    @property
    def labels(self) -> Dict[Hashable, str]:
        return dict(self._labels)

    def declarations(self) -> list[str]:
        """Return ``LABEL=path`` handle declarations in allocation order."""

        return [f"{label}={getattr(file, 'path', file)}" for file, label in self._labels.items()]

    def __len__(self) -> int:
        return len(self._labels)


__all__ = ["FIRST_LABEL", "LabelAllocator", "next_label"]
