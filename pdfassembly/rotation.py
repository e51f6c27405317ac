"""Rotation bucketing: one intermediate rotation pass per angle.

qpdf cannot rotate different sub-ranges of a concatenation by different
angles, so every rotated page specification is first copied into a per-angle
intermediate file that is rotated as a whole. Each relocated specification is
then addressed by its *mapped range* inside that file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, MutableMapping, Optional, Sequence, Tuple

from .ranges import PageCountQuery, mapped_range, page_count
from .tools import PageTerm
from .types import ResolvedSpec, Rotation

LOGGER = logging.getLogger("pdfassembly.rotation")


@dataclass(frozen=True)
class BucketEntry:
    """A slice of a source file copied into a rotation bucket."""

    file: Path
    original_range: str
    mapped_range: str
    page_count: int


@dataclass
class RotationBucket:
    """All slices that need the same rotation angle."""

    rotation: Rotation
    entries: List[BucketEntry] = field(default_factory=list)
    num_pages: int = 0

    def find(self, file: Path, original_range: str) -> Optional[BucketEntry]:
        for entry in self.entries:
            if entry.file == file and entry.original_range == original_range:
                return entry
        return None

    def add(self, file: Path, original_range: str, count: int) -> BucketEntry:
        entry = BucketEntry(file, original_range, mapped_range(self.num_pages + 1, count), count)
        self.entries.append(entry)
        self.num_pages += count
        return entry

    def terms(self) -> List[PageTerm]:
        return [(entry.file, entry.original_range) for entry in self.entries]


def bucket_rotations(
    specs: Sequence[ResolvedSpec],
    cache: MutableMapping[Path, int],
    query: PageCountQuery,
) -> List[RotationBucket]:
    """Group rotated *specs* by angle, in order of first appearance.

    Specifications with an identical file and normalized range share one block
    of the bucket. Page counts of open-ended ranges are resolved through
    *query* and memoized in *cache*.
    """

    buckets: Dict[Rotation, RotationBucket] = {}
    for spec in specs:
        if spec.rotation is Rotation.NONE:
            continue
        bucket = buckets.setdefault(spec.rotation, RotationBucket(spec.rotation))
        if bucket.find(spec.file, spec.range) is not None:
            LOGGER.debug("Reusing rotated block for %s %s", spec.file, spec.range)
            continue
        count = page_count(spec.range, spec.file, cache, query)
        entry = bucket.add(spec.file, spec.range, count)
        LOGGER.debug(
            "Bucket %s: %s %s -> %s",
            spec.rotation.value,
            spec.file,
            spec.range,
            entry.mapped_range,
        )
    return list(buckets.values())


def relocate(
    specs: Sequence[ResolvedSpec],
    buckets: Sequence[RotationBucket],
    bucket_files: Mapping[Rotation, Path],
) -> List[ResolvedSpec]:
    """Point rotated *specs* at their bucket file and mapped range."""

    by_rotation = {bucket.rotation: bucket for bucket in buckets}
    relocated: List[ResolvedSpec] = []
    for spec in specs:
        if spec.rotation is Rotation.NONE:
            relocated.append(spec)
            continue
        entry = by_rotation[spec.rotation].find(spec.file, spec.range)
        if entry is None:
            raise KeyError(f"No rotation bucket entry for {spec.file} {spec.range}")
        relocated.append(ResolvedSpec(bucket_files[spec.rotation], entry.mapped_range))
    return relocated


def whole_file_rotations(specs: Sequence[ResolvedSpec]) -> List[Tuple[Rotation, Path]]:
    """Distinct ``(rotation, file)`` pairs needing a whole-document rotation pass."""

    keys: Dict[Tuple[Rotation, Path], None] = {}
    for spec in specs:
        if spec.rotation is not Rotation.NONE:
            keys.setdefault((spec.rotation, spec.file), None)
    return list(keys)


__all__ = [
    "BucketEntry",
    "RotationBucket",
    "bucket_rotations",
    "relocate",
    "whole_file_rotations",
]
