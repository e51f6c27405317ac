from __future__ import annotations

from pathlib import Path

import pytest

from pdfassembly.labels import LabelAllocator, next_label


@pytest.mark.parametrize(
    ("label", "expected"),
    [("A", "B"), ("Y", "Z"), ("Z", "AA"), ("AA", "AB"), ("AZ", "BA"), ("BZ", "CA"), ("ZZ", "AAA")],
)
def test_next_label(label: str, expected: str) -> None:
    assert next_label(label) == expected


@pytest.mark.parametrize("label", ["", "a", "A1", "Ä"])
def test_next_label_rejects_invalid(label: str) -> None:
    with pytest.raises(ValueError):
        next_label(label)


def test_allocate_in_first_seen_order() -> None:
    a, b, c = Path("/a.pdf"), Path("/b.pdf"), Path("/c.pdf")
    allocator = LabelAllocator()

    labels = allocator.allocate([b, a, b, c, a])

    assert labels == {b: "A", a: "B", c: "C"}
    assert list(labels) == [b, a, c]
    assert allocator.label_for(a) == "B"
    assert len(allocator) == 3


def test_distinct_labels_match_distinct_files() -> None:
    files = [Path(f"/doc{index}.pdf") for index in range(60)]
    allocator = LabelAllocator()

    labels = allocator.allocate(files + files[:10])

    assert len(set(labels.values())) == len(files)
    assert [labels[file] for file in files[:3]] == ["A", "B", "C"]
    assert labels[files[25]] == "Z"
    assert labels[files[26]] == "AA"
    assert labels[files[52]] == "BA"


def test_declarations() -> None:
    allocator = LabelAllocator()
    allocator.allocate([Path("/x/a.pdf"), Path("/x/b.pdf")])

    assert allocator.declarations() == ["A=/x/a.pdf", "B=/x/b.pdf"]
