"""
File table widget for one side of a comparison.

Provides a flat table with:
- Classification colours
- Name filtering
- Hide-unchanged toggle
"""

from __future__ import annotations

from typing import Any, Optional

from PyQt6.QtCore import (
    Qt, QModelIndex, QAbstractTableModel, QSortFilterProxyModel, pyqtSignal
)
from PyQt6.QtGui import QBrush, QColor, QFont
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableView, QHeaderView,
    QLineEdit, QCheckBox, QLabel, QAbstractItemView
)

from dircompare.core.models import ComparisonResult, FileInfo
from dircompare.services.report import format_size


INDEX_ROLE = Qt.ItemDataRole.UserRole + 1
RESULT_ROLE = Qt.ItemDataRole.UserRole + 2
SORT_ROLE = Qt.ItemDataRole.UserRole + 3


class FileTableModel(QAbstractTableModel):
    """
    Model for one inventory.

    Columns:
    - Name
    - Path
    - Size
    - Result

    Row numbers are inventory positions, so a row maps straight to the
    index used for content requests.
    """

    COLUMNS = ['Name', 'Path', 'Size', 'Result']

    FOREGROUND = {
        "baseline": QColor(100, 100, 100),  # Grey
        "modified": QColor("#CC6600"),      # Dark Orange
        "removed": QColor("#0066CC"),       # Dark Blue
        "added": QColor("#008000"),         # Dark Green
    }

    BACKGROUND = {
        "modified": QColor(255, 255, 220),
        "removed": QColor(220, 235, 255),
        "added": QColor(220, 255, 220),
    }

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._files: list[FileInfo] = []

    def set_files(self, files: list[FileInfo]) -> None:
        """Replace the rows shown."""
        self.beginResetModel()
        self._files = list(files)
        self.endResetModel()

    def clear(self) -> None:
        self.set_files([])

    def file_at(self, row: int) -> Optional[FileInfo]:
        if 0 <= row < len(self._files):
            return self._files[row]
        return None

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._files)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self.COLUMNS)

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return None

        info = self.file_at(index.row())
        if info is None:
            return None
        column = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            return self._get_display_data(info, column)

        elif role == Qt.ItemDataRole.ForegroundRole:
            return QBrush(self.FOREGROUND.get(info.comparison_result, QColor(0, 0, 0)))

        elif role == Qt.ItemDataRole.BackgroundRole:
            color = self.BACKGROUND.get(info.comparison_result)
            return QBrush(color) if color is not None else None

        elif role == Qt.ItemDataRole.FontRole:
            if info.comparison_result != ComparisonResult.BASELINE.label:
                font = QFont()
                font.setBold(True)
                return font

        elif role == Qt.ItemDataRole.ToolTipRole:
            return f"Path: {info.path}\nResult: {info.comparison_result}\nSize: {info.size_bytes} bytes"

        elif role == INDEX_ROLE:
            return index.row()

        elif role == RESULT_ROLE:
            return info.comparison_result

        elif role == SORT_ROLE:
            return info.size_bytes if column == 2 else self._get_display_data(info, column)

        return None

    def _get_display_data(self, info: FileInfo, column: int) -> str:
        if column == 0:
            return info.name
        elif column == 1:
            return info.path
        elif column == 2:
            return format_size(info.size_bytes)
        elif column == 3:
            return info.comparison_result.capitalize()
        return ''

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole
    ) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self.COLUMNS):
                return self.COLUMNS[section]
        return None


class FileFilterProxyModel(QSortFilterProxyModel):
    """Filters rows by path text and hides unchanged rows on request."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._name_filter = ""
        self._show_unchanged = True

    def set_name_filter(self, pattern: str) -> None:
        self._name_filter = pattern.lower()
        self.invalidateFilter()

    def set_show_unchanged(self, show: bool) -> None:
        self._show_unchanged = show
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row: int, source_parent: QModelIndex) -> bool:
        model = self.sourceModel()
        info = model.file_at(source_row) if isinstance(model, FileTableModel) else None
        if info is None:
            return False

        if not self._show_unchanged and info.comparison_result == ComparisonResult.BASELINE.label:
            return False

        if self._name_filter and self._name_filter not in info.path.lower():
            return False

        return True


class FileTableWidget(QWidget):
    """
    Table of one inventory with filtering.
    """

    file_selected = pyqtSignal(int)  # inventory index

    def __init__(self, title: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._title = title

        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        """Setup the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.title_label = QLabel(self._title)
        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)
        layout.addWidget(self.title_label)

        # Filter bar
        filter_layout = QHBoxLayout()

        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("Filter by path...")
        self.filter_edit.setClearButtonEnabled(True)
        filter_layout.addWidget(self.filter_edit)

        self.hide_unchanged_cb = QCheckBox("Hide Unchanged")
        filter_layout.addWidget(self.hide_unchanged_cb)

        layout.addLayout(filter_layout)

        # Table view
        self.table_view = QTableView()
        self.table_view.setAlternatingRowColors(True)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setSortingEnabled(True)
        self.table_view.verticalHeader().hide()

        # Model
        self.model = FileTableModel(self)
        self.proxy_model = FileFilterProxyModel(self)
        self.proxy_model.setSourceModel(self.model)
        self.proxy_model.setSortRole(SORT_ROLE)
        self.table_view.setModel(self.proxy_model)

        # Header
        header = self.table_view.horizontalHeader()
        header.setStretchLastSection(False)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        for i in (0, 2, 3):
            header.setSectionResizeMode(i, QHeaderView.ResizeMode.ResizeToContents)

        layout.addWidget(self.table_view)

    def _connect_signals(self) -> None:
        """Connect signals."""
        self.filter_edit.textChanged.connect(self.proxy_model.set_name_filter)
        self.hide_unchanged_cb.toggled.connect(
            lambda checked: self.proxy_model.set_show_unchanged(not checked)
        )
        self.table_view.clicked.connect(self._on_item_clicked)

    def set_files(self, title: str, files: list[FileInfo]) -> None:
        """Show an inventory."""
        self.title_label.setText(title)
        self.model.set_files(files)

    def clear(self) -> None:
        self.model.clear()

    def _on_item_clicked(self, index: QModelIndex) -> None:
        """Handle item single-click."""
        source_index = self.proxy_model.mapToSource(index)
        if source_index.isValid():
            self.file_selected.emit(source_index.row())
