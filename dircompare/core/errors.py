"""
Exceptions raised by the comparison core.

Filesystem problems met while scanning or loading contents are absorbed
and degrade the result; only caller misuse surfaces as an exception.
"""

from __future__ import annotations


class DirCompareError(Exception):
    """Base class for dircompare errors."""
    pass


class FileIndexError(DirCompareError, LookupError):
    """Raised when an inventory position is out of range."""

    def __init__(self, index: object, size: int):
        self.index = index
        self.size = size
        super().__init__(f"File index {index} out of range (inventory has {size} files)")


class ContentsUnavailableError(DirCompareError):
    """Raised when a requested file's contents cannot be loaded as text."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Contents unavailable: {path}")


class DuplicatePathError(DirCompareError, AssertionError):
    """Raised when one inventory holds the same relative path twice."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Duplicate relative path in inventory: {path}")
