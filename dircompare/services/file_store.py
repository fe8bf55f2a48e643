"""
Shared store for a compared pair of inventories.

The store is the single object the front ends talk to. All access goes
through one lock: listing records and loading contents for a caller are
short critical sections, and contents are released before the lock is.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from dircompare.core.errors import ContentsUnavailableError
from dircompare.core.folder.comparer import CompareOptions, FolderComparer
from dircompare.core.folder.scanner import FolderScanner, ScanOptions, ScanProgress
from dircompare.core.models import (
    CompareSummary,
    FileContents,
    FileInfo,
    Inventory,
    display_text,
)


class Side(Enum):
    """Which tree of the pair."""
    A = "a"     # Baseline
    B = "b"     # Candidate

    @classmethod
    def from_string(cls, value: str) -> 'Side':
        """Parse 'a' or 'b' (any case); raises ValueError otherwise."""
        try:
            return cls(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(f"Unknown side: {value!r}") from None


class FileStore:
    """
    Holds inventory A and inventory B behind a single lock.

    Usage:
        store = FileStore.load(folder_a, folder_b)
        store.compare()
        store.list_files(Side.B)
        store.read_contents(Side.A, 0)
    """

    def __init__(self, files_a: Inventory, files_b: Inventory):
        self.files_a = files_a
        self.files_b = files_b
        self.summary: Optional[CompareSummary] = None
        self._lock = threading.Lock()

    @classmethod
    def load(
        cls,
        folder_a: Path | str,
        folder_b: Path | str,
        scan_options: Optional[ScanOptions] = None,
        progress_callback: Optional[Callable[[ScanProgress], None]] = None
    ) -> 'FileStore':
        """Scan both folders into a new store."""
        scanner = FolderScanner(scan_options)

        logging.debug(f"FileStore - Scanning folder_a: {folder_a}")
        files_a = scanner.scan(folder_a, progress_callback)

        logging.debug(f"FileStore - Scanning folder_b: {folder_b}")
        files_b = scanner.scan(folder_b, progress_callback)

        logging.info(
            f"FileStore - Loaded {len(files_a) + len(files_b)} files "
            f"(A: {len(files_a)}) (B: {len(files_b)})"
        )
        return cls(files_a, files_b)

    def inventory(self, side: Side) -> Inventory:
        return self.files_a if side == Side.A else self.files_b

    def compare(self, options: Optional[CompareOptions] = None) -> CompareSummary:
        """Classify both inventories."""
        with self._lock:
            self.summary = FolderComparer(options).compare(self.files_a, self.files_b)
            return self.summary

    def current_summary(self) -> CompareSummary:
        """Counts from the last comparison; before one has run only the file totals are set."""
        with self._lock:
            if self.summary is not None:
                return self.summary
            return CompareSummary.from_inventories(self.files_a, self.files_b)

    def list_files(self, side: Side) -> list[FileInfo]:
        """Snapshot of one side's records, in inventory order."""
        with self._lock:
            return [FileInfo.from_record(f) for f in self.inventory(side)]

    def read_contents(self, side: Side, index: int) -> FileContents:
        """
        Load one file's contents for a caller.

        Raises:
            FileIndexError: index out of range for that side
            ContentsUnavailableError: file cannot be read as text
        """
        with self._lock:
            record = self.inventory(side).get(index)
            try:
                contents = record.load_contents()
                if contents is None:
                    raise ContentsUnavailableError(record.display_path)
                return FileContents(
                    name=display_text(record.name),
                    path=record.display_path,
                    contents=contents,
                )
            finally:
                record.clear_contents()
