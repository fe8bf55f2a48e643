"""
Comparison core: inventory scanning and inventory reconciliation.
"""

from dircompare.core.errors import (
    ContentsUnavailableError,
    DirCompareError,
    DuplicatePathError,
    FileIndexError,
)
from dircompare.core.models import (
    CompareSummary,
    ComparisonResult,
    FileContents,
    FileInfo,
    Inventory,
    ScannedFile,
    UnreadablePolicy,
)

__all__ = [
    'CompareSummary',
    'ComparisonResult',
    'ContentsUnavailableError',
    'DirCompareError',
    'DuplicatePathError',
    'FileContents',
    'FileInfo',
    'FileIndexError',
    'Inventory',
    'ScannedFile',
    'UnreadablePolicy',
]
