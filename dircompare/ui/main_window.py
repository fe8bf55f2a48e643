"""
Main window for the native viewer.

Shows tree A and tree B side by side, with the contents of the selected
file in a read-only pane underneath.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSlot
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QLabel, QMainWindow, QMessageBox, QPlainTextEdit, QSplitter,
    QStatusBar, QWidget
)

from dircompare import APP_DISPLAY_NAME
from dircompare.core.errors import ContentsUnavailableError, FileIndexError
from dircompare.core.folder.comparer import CompareOptions
from dircompare.core.folder.scanner import ScanOptions, ScanProgress
from dircompare.core.models import display_text
from dircompare.services.file_io import FileIOService
from dircompare.services.file_store import FileStore, Side
from dircompare.ui.widgets.file_table_widget import FileTableWidget
from dircompare.workers.base_worker import WorkerThread
from dircompare.workers.store_worker import StoreLoadWorker


class MainWindow(QMainWindow):
    """
    Native comparison viewer.

    Either show an already compared store with :meth:`set_store`, or
    scan and compare in the background with :meth:`compare_folders`.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._store: Optional[FileStore] = None
        self._current_worker: Optional[WorkerThread] = None

        self.setWindowTitle(APP_DISPLAY_NAME)
        self.resize(1200, 800)

        self._setup_ui()
        self._setup_statusbar()
        self._setup_connections()

    @property
    def store(self) -> Optional[FileStore]:
        return self._store

    def _setup_ui(self) -> None:
        """Set up the central widgets."""
        self.table_a = FileTableWidget("A")
        self.table_b = FileTableWidget("B")

        tables = QSplitter(Qt.Orientation.Horizontal)
        tables.addWidget(self.table_a)
        tables.addWidget(self.table_b)

        self.contents_view = QPlainTextEdit()
        self.contents_view.setReadOnly(True)
        self.contents_view.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.contents_view.setFont(QFont("Consolas", 10))
        self.contents_view.setPlaceholderText("Select a file to view its contents")

        splitter = QSplitter(Qt.Orientation.Vertical)
        splitter.addWidget(tables)
        splitter.addWidget(self.contents_view)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)

        self.setCentralWidget(splitter)

    def _setup_statusbar(self) -> None:
        """Set up the status bar."""
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)

        self._status_label = QLabel("Ready")
        self._statusbar.addWidget(self._status_label, 1)

        self._file_label = QLabel()
        self._statusbar.addPermanentWidget(self._file_label)

        self._stats_label = QLabel()
        self._statusbar.addPermanentWidget(self._stats_label)

    def _setup_connections(self) -> None:
        """Set up signal connections."""
        self.table_a.file_selected.connect(lambda index: self.show_contents(Side.A, index))
        self.table_b.file_selected.connect(lambda index: self.show_contents(Side.B, index))

    def compare_folders(
        self,
        folder_a: str | Path,
        folder_b: str | Path,
        scan_options: Optional[ScanOptions] = None,
        compare_options: Optional[CompareOptions] = None
    ) -> None:
        """Scan and compare two folders in a background thread."""
        worker = StoreLoadWorker(folder_a, folder_b, scan_options, compare_options)
        thread = WorkerThread(worker, self)

        worker.signals.status.connect(self._status_label.setText)
        worker.signals.progress.connect(self._on_scan_progress)
        worker.signals.finished.connect(self._on_store_loaded)
        worker.signals.error.connect(self._on_worker_error)

        self._current_worker = thread
        thread.start()

    def set_store(self, store: FileStore) -> None:
        """Display a compared store."""
        self._store = store
        self.table_a.set_files(f"A: {display_text(store.files_a.root_path)}", store.list_files(Side.A))
        self.table_b.set_files(f"B: {display_text(store.files_b.root_path)}", store.list_files(Side.B))
        self.contents_view.clear()
        self._file_label.clear()

        summary = store.summary
        if summary is not None:
            self._stats_label.setText(
                f"Identical ({summary.files_a} files)" if summary.is_identical else str(summary))
        self._status_label.setText("Ready")

    @pyqtSlot(object)
    def _on_scan_progress(self, progress: ScanProgress) -> None:
        self._status_label.setText(f"Scanning {display_text(progress.current_path)} ({progress.files_found} files)")

    @pyqtSlot(object)
    def _on_store_loaded(self, store: Optional[FileStore]) -> None:
        if store is not None:
            self.set_store(store)

    @pyqtSlot(str, str)
    def _on_worker_error(self, error_type: str, message: str) -> None:
        """Handle worker error."""
        self._status_label.setText("Comparison failed")
        QMessageBox.critical(self, error_type, message)

    def show_contents(self, side: Side, index: int) -> None:
        """Load one file through the store and show it."""
        if self._store is None:
            return

        try:
            contents = self._store.read_contents(side, index)
        except (FileIndexError, ContentsUnavailableError) as e:
            logging.debug(f"MainWindow - {e}")
            self.contents_view.setPlainText("")
            self._file_label.setText(str(e))
            return

        self.contents_view.setPlainText(contents.contents)
        line_ending = FileIOService.detect_line_ending(contents.contents)
        self._file_label.setText(f"{side.value.upper()}: {contents.path} ({line_ending.name})")

    def closeEvent(self, event) -> None:
        if self._current_worker is not None and self._current_worker.isRunning():
            self._current_worker.cancel()
            self._current_worker.wait()
        super().closeEvent(event)
