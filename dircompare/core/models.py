"""
Core data models for directory comparison.

This module defines the structures shared by the scanner, the comparer
and every front end:
- Comparison result enumeration
- Scanned file records
- Inventories (ordered scan output)
- Comparison summaries

All models are UI-agnostic; the web, terminal, static and native
viewers only read them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Iterator, Optional

from dircompare.core.errors import FileIndexError
from dircompare.services.file_io import read_text_file


# =============================================================================
# Enumerations
# =============================================================================

class ComparisonResult(Enum):
    """Classification of a file after comparing two trees."""
    BASELINE = auto()   # Unchanged (or untouched A-side default)
    ADDED = auto()      # Only in B
    REMOVED = auto()    # Only in A
    MODIFIED = auto()   # In both, contents differ
    RENAMED = auto()    # Reserved, never produced

    @property
    def label(self) -> str:
        """Lowercase name used on the wire and in reports."""
        return self.name.lower()

    @staticmethod
    def label_of(result: Optional['ComparisonResult']) -> str:
        """Label for an optional result, 'unknown' when unset."""
        return result.label if result is not None else "unknown"


class UnreadablePolicy(Enum):
    """How two files that both fail to load as text are classified."""
    EQUAL = auto()      # Both absent compare equal (Baseline)
    MODIFIED = auto()   # Both absent are reported as Modified

    @classmethod
    def from_string(cls, value: str) -> 'UnreadablePolicy':
        """Create from a name, falling back to EQUAL."""
        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.EQUAL


# =============================================================================
# File Records
# =============================================================================

@dataclass(eq=False)
class ScannedFile:
    """
    One regular file discovered under a scan root.

    Identity fields are fixed at scan time. ``contents`` is a transient
    cache filled by :meth:`load_contents` and dropped by
    :meth:`clear_contents`; ``comparison_result`` is set by the comparer.
    """
    full_path: Path
    relative_path: Path
    name: str
    extension: str
    size_bytes: int
    contents: Optional[str] = None
    comparison_result: Optional[ComparisonResult] = None

    @classmethod
    def from_path(cls, full_path: Path, root_path: Path, size_bytes: int) -> 'ScannedFile':
        """Build a record for ``full_path`` discovered under ``root_path``."""
        relative_path = full_path.relative_to(root_path)
        name = full_path.name
        return cls(
            full_path=full_path,
            relative_path=relative_path,
            name=name,
            extension=extension_of(name),
            size_bytes=size_bytes,
        )

    @property
    def path_key(self) -> str:
        """Relative path as a string, the join key across inventories."""
        return str(self.relative_path)

    @property
    def display_path(self) -> str:
        return display_text(self.path_key)

    @property
    def is_loaded(self) -> bool:
        return self.contents is not None

    def load_contents(self) -> Optional[str]:
        """Read the file as text and cache it; None if it cannot be read."""
        if not self.is_loaded:
            result = read_text_file(self.full_path)
            if result.success:
                self.contents = result.content
            else:
                logging.debug(f"ScannedFile - Contents unavailable for {self.full_path}: {result.error}")
        return self.contents

    def clear_contents(self) -> None:
        """Drop the cached contents."""
        self.contents = None

    def set_comparison_result(self, result: ComparisonResult) -> None:
        self.comparison_result = result


def display_text(value: str | Path) -> str:
    """
    Printable form of a file system string.

    Names that are not valid UTF-8 come back from the OS with surrogate
    escapes, which cannot be encoded for output. Those bytes are replaced
    with U+FFFD here; the raw string stays the comparison key.
    """
    return os.fsencode(value).decode("utf-8", "replace")


def extension_of(name: str) -> str:
    """
    Suffix after the last dot of a file name.

    Leading-dot names such as ``.gitignore`` have no extension, matching
    how paths split a stem from its suffix.
    """
    return Path(name).suffix[1:]


# =============================================================================
# Inventories
# =============================================================================

@dataclass
class Inventory:
    """
    Ordered collection of records produced by one scan of one root.

    Order is traversal order. Positions are only stable for the lifetime
    of this instance.
    """
    root_path: Path
    files: list[ScannedFile] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)  # (path, error message)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[ScannedFile]:
        return iter(self.files)

    def __getitem__(self, index: int) -> ScannedFile:
        return self.get(index)

    def get(self, index: int) -> ScannedFile:
        """Record at ``index``; raises FileIndexError when out of range."""
        if not isinstance(index, int) or index < 0 or index >= len(self.files):
            raise FileIndexError(index, len(self.files))
        return self.files[index]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def paths(self) -> set[str]:
        """All relative path keys in this inventory."""
        return {f.path_key for f in self.files}

    def iter_by_result(self, result: ComparisonResult) -> Iterator[ScannedFile]:
        """Iterate over records carrying a given classification."""
        for f in self.files:
            if f.comparison_result == result:
                yield f

    def count(self, result: ComparisonResult) -> int:
        return sum(1 for _ in self.iter_by_result(result))


# =============================================================================
# Comparison Summary
# =============================================================================

@dataclass
class CompareSummary:
    """Counts produced by one comparison of two inventories."""
    baseline_count: int = 0     # Baseline records on both sides
    added_count: int = 0
    removed_count: int = 0
    modified_count: int = 0
    files_a: int = 0
    files_b: int = 0

    @classmethod
    def from_inventories(cls, inventory_a: Inventory, inventory_b: Inventory) -> 'CompareSummary':
        return cls(
            baseline_count=(inventory_a.count(ComparisonResult.BASELINE)
                            + inventory_b.count(ComparisonResult.BASELINE)),
            added_count=inventory_b.count(ComparisonResult.ADDED),
            removed_count=inventory_a.count(ComparisonResult.REMOVED),
            modified_count=inventory_b.count(ComparisonResult.MODIFIED),
            files_a=len(inventory_a),
            files_b=len(inventory_b),
        )

    @property
    def total_differences(self) -> int:
        return self.added_count + self.removed_count + self.modified_count

    @property
    def is_identical(self) -> bool:
        return self.total_differences == 0

    def __str__(self) -> str:
        return (f"{self.baseline_count} baseline, {self.added_count} added, "
                f"{self.removed_count} removed, {self.modified_count} modified")


@dataclass
class FileInfo:
    """Identity and classification of one record, as served to a viewer."""
    name: str
    path: str
    extension: str
    size_bytes: int
    comparison_result: str

    @classmethod
    def from_record(cls, record: ScannedFile) -> 'FileInfo':
        return cls(
            name=display_text(record.name),
            path=record.display_path,
            extension=display_text(record.extension),
            size_bytes=record.size_bytes,
            comparison_result=ComparisonResult.label_of(record.comparison_result),
        )


@dataclass
class FileContents:
    """Contents of one file, as served to a viewer."""
    name: str
    path: str
    contents: str
