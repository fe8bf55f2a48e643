"""
Folder comparison module.

Provides functionality for:
- Recursive directory scanning into inventories
- Inventory-to-inventory comparison
"""

from dircompare.core.folder.scanner import (
    FolderScanner,
    ScanOptions,
    ScanProgress,
    scan_directory,
)
from dircompare.core.folder.comparer import (
    FolderComparer,
    CompareOptions,
    compare_folders,
    compare_inventories,
)

__all__ = [
    # Scanner
    'FolderScanner',
    'ScanOptions',
    'ScanProgress',
    'scan_directory',
    # Comparer
    'FolderComparer',
    'CompareOptions',
    'compare_folders',
    'compare_inventories',
]
