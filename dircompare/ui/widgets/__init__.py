"""
Widgets used by the native viewer.
"""

from dircompare.ui.widgets.file_table_widget import (
    FileTableModel,
    FileFilterProxyModel,
    FileTableWidget,
)

__all__ = [
    'FileTableModel',
    'FileFilterProxyModel',
    'FileTableWidget',
]
