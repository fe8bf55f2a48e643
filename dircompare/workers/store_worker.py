"""
Worker that scans and compares two folders off the UI thread.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject

from dircompare.core.folder.comparer import CompareOptions
from dircompare.core.folder.scanner import ScanOptions
from dircompare.services.file_store import FileStore
from dircompare.workers.base_worker import BaseWorker


class StoreLoadWorker(BaseWorker):
    """
    Builds a compared FileStore for two folders.

    Emits ``progress`` after each directory read, then ``finished`` with
    the FileStore, or ``error`` when a root folder is missing.
    """

    def __init__(
        self,
        folder_a: str | Path,
        folder_b: str | Path,
        scan_options: Optional[ScanOptions] = None,
        compare_options: Optional[CompareOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.folder_a = Path(folder_a)
        self.folder_b = Path(folder_b)
        self.scan_options = scan_options or ScanOptions()
        self.compare_options = compare_options or CompareOptions()

    def do_work(self) -> Optional[FileStore]:
        self.report_status(f"Scanning {self.folder_a.name} and {self.folder_b.name}...")
        store = FileStore.load(
            self.folder_a,
            self.folder_b,
            self.scan_options,
            progress_callback=self.signals.progress.emit,
        )

        if self.is_cancelled:
            return None

        self.report_status("Comparing...")
        summary = store.compare(self.compare_options)
        self.report_status(f"Comparison results: {summary}")
        return store
