"""
Folder comparison engine.

Reconciles two inventories (A baseline, B candidate) by relative path and
classifies every record:
- Baseline: unchanged, and the default for every A-side record
- Added: only in B
- Removed: only in A
- Modified: in both, contents differ (reported on the B side)

Contents are loaded lazily, only for paths present on both sides, and
released right after each pair is compared.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dircompare.core.errors import DuplicatePathError
from dircompare.core.folder.scanner import FolderScanner, ScanOptions
from dircompare.core.models import (
    CompareSummary,
    ComparisonResult,
    Inventory,
    ScannedFile,
    UnreadablePolicy,
)


@dataclass
class CompareOptions:
    """Options for folder comparison."""
    unreadable_policy: UnreadablePolicy = UnreadablePolicy.EQUAL


class FolderComparer:
    """
    Compares two inventories in place.

    Every record in both inventories receives exactly one classification;
    records are never reordered or dropped. Running :meth:`compare` again
    overwrites the previous classifications.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()

    def compare(self, inventory_a: Inventory, inventory_b: Inventory) -> CompareSummary:
        """
        Classify both inventories.

        Args:
            inventory_a: Baseline inventory
            inventory_b: Candidate inventory

        Returns:
            CompareSummary with the resulting counts
        """
        start_time = time.time()

        index_a = self._build_index(inventory_a)

        for file_a in inventory_a:
            file_a.set_comparison_result(ComparisonResult.BASELINE)

        for file_b in inventory_b:
            index = index_a.get(file_b.path_key)
            if index is None:
                file_b.set_comparison_result(ComparisonResult.ADDED)
                continue

            file_a = inventory_a.files[index]
            if self._contents_equal(file_a, file_b):
                file_b.set_comparison_result(ComparisonResult.BASELINE)
            else:
                file_b.set_comparison_result(ComparisonResult.MODIFIED)

        paths_b = inventory_b.paths()
        for file_a in inventory_a:
            if file_a.path_key not in paths_b:
                file_a.set_comparison_result(ComparisonResult.REMOVED)

        summary = CompareSummary.from_inventories(inventory_a, inventory_b)
        logging.info(
            f"FolderComparer - Comparison results: {summary} "
            f"({time.time() - start_time:.2f}s)"
        )
        return summary

    @staticmethod
    def _build_index(inventory: Inventory) -> dict[str, int]:
        """Map relative path to position; duplicates are a scan anomaly."""
        index: dict[str, int] = {}
        for position, record in enumerate(inventory):
            key = record.path_key
            if key in index:
                logging.error(f"FolderComparer - Duplicate relative path in {inventory.root_path}: {key}")
                raise DuplicatePathError(key)
            index[key] = position
        return index

    def _contents_equal(self, file_a: ScannedFile, file_b: ScannedFile) -> bool:
        """Load both contents, compare them exactly, then release them."""
        try:
            contents_a = file_a.load_contents()
            contents_b = file_b.load_contents()

            if contents_a is None and contents_b is None:
                logging.debug(
                    f"FolderComparer - Both sides unreadable for {file_b.path_key}, "
                    f"policy {self.options.unreadable_policy.name}"
                )
                return self.options.unreadable_policy == UnreadablePolicy.EQUAL

            return contents_a == contents_b
        finally:
            file_a.clear_contents()
            file_b.clear_contents()


def compare_inventories(
    inventory_a: Inventory,
    inventory_b: Inventory,
    options: Optional[CompareOptions] = None
) -> CompareSummary:
    """Classify two inventories with a fresh comparer."""
    return FolderComparer(options).compare(inventory_a, inventory_b)


def compare_folders(
    folder_a: Path | str,
    folder_b: Path | str,
    scan_options: Optional[ScanOptions] = None,
    compare_options: Optional[CompareOptions] = None
) -> tuple[Inventory, Inventory, CompareSummary]:
    """Scan two roots and compare them."""
    scanner = FolderScanner(scan_options)
    inventory_a = scanner.scan(folder_a)
    inventory_b = scanner.scan(folder_b)
    summary = FolderComparer(compare_options).compare(inventory_a, inventory_b)
    return inventory_a, inventory_b, summary
