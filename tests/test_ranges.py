from __future__ import annotations

from pathlib import Path

import pytest

from pdfassembly import ranges


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "1", "1-3", " 2 - 5 ", "5+", "5 +", "1,3-4,7+", "10-2", "0"],
)
def test_validate_accepts_valid_ranges(raw: str) -> None:
    assert ranges.validate(raw)


@pytest.mark.parametrize(
    "raw",
    ["1--3", "a", "1-", "-3", "1,,3", "1,", "1+2", "+", "1-3-5", "1 2", "1-z",
     "３", "٣", "３-５", "1-٥"],
)
def test_validate_rejects_invalid_ranges(raw: str) -> None:
    assert not ranges.validate(raw)


def test_validate_rejects_none() -> None:
    assert not ranges.validate(None)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", "1-z"),
        ("  ", "1-z"),
        ("7", "7"),
        (" 1 - 3 , 5+ ", "1-3,5-z"),
        ("2+,4+", "2-z,4-z"),
        ("9-3", "9-3"),
    ],
)
def test_normalize(raw: str, expected: str) -> None:
    assert ranges.normalize(raw) == expected


@pytest.mark.parametrize("raw", ["", "1", "1-3", " 5 +", "1, 3-4 ,7+", "10-2"])
def test_normalize_is_idempotent(raw: str) -> None:
    once = ranges.normalize(raw)
    assert ranges.normalize(once) == once


def test_equivalent_ranges_normalize_identically() -> None:
    assert ranges.normalize("1 -3, 5+") == ranges.normalize("1-3,5 +")


def test_is_whole_document() -> None:
    assert ranges.is_whole_document(ranges.normalize(""))
    assert ranges.is_whole_document(ranges.normalize("1+"))
    assert not ranges.is_whole_document("2-z")


def test_page_count_without_open_end_does_not_query() -> None:
    def query(_: Path) -> int:
        raise AssertionError("page count should not be queried")

    assert ranges.page_count("1-3,5", Path("/a.pdf"), {}, query) == 4


def test_page_count_descending_range_is_positive() -> None:
    assert ranges.page_count("5-2", Path("/a.pdf"), {}, lambda _: 0) == 4


def test_page_count_single_page_counts_one() -> None:
    assert ranges.page_count("250", Path("/a.pdf"), {}, lambda _: 0) == 1


def test_page_count_resolves_end_marker_once_per_file() -> None:
    queries: list[Path] = []

    def query(file: Path) -> int:
        queries.append(file)
        return 10

    cache: dict[Path, int] = {}
    a, b = Path("/a.pdf"), Path("/b.pdf")

    assert ranges.page_count("3-z", a, cache, query) == 8
    assert ranges.page_count("1-z,9-z", a, cache, query) == 12
    assert ranges.page_count("2-z", b, cache, query) == 9

    assert queries == [a, b]
    assert cache == {a: 10, b: 10}


@pytest.mark.parametrize("raw", ["", "1", "1-3", "5+", "1,3-4,7+", "10-2", "12+"])
def test_page_count_is_positive_for_valid_ranges(raw: str) -> None:
    assert ranges.page_count(ranges.normalize(raw), Path("/a.pdf"), {}, lambda _: 12) > 0


def test_mapped_range() -> None:
    assert ranges.mapped_range(1, 1) == "1"
    assert ranges.mapped_range(4, 3) == "4-6"
    with pytest.raises(ValueError):
        ranges.mapped_range(1, 0)
