"""
File I/O service for reading and writing files safely.

Handles:
- Strict text decoding (no guessing, no replacement characters)
- Line ending detection
- Atomic writes
- Permission handling
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings (single line)


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[str] = None
    size: int = 0
    error: Optional[str] = None


@dataclass
class WriteResult:
    """Result of a file write operation."""
    success: bool
    bytes_written: int = 0
    error: Optional[str] = None


class FileIOService:
    """Service for safe file I/O operations."""

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def read_text(self, path: Path | str) -> ReadResult:
        """
        Read a whole file as text.

        Decoding is strict: a file that is not valid text in the service
        encoding fails rather than being repaired, so two files compare
        equal only if their bytes do.

        Args:
            path: Path to the file

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        try:
            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except IsADirectoryError:
            return ReadResult(success=False, error=f"Not a file: {path}")
        except FileNotFoundError:
            return ReadResult(success=False, error=f"File not found: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        try:
            content = raw_content.decode(self.encoding)
        except UnicodeDecodeError as e:
            return ReadResult(
                success=False,
                size=len(raw_content),
                error=f"Not valid {self.encoding} text: {e.reason} at byte {e.start}"
            )

        return ReadResult(success=True, content=content, size=len(raw_content))

    def write_file(
        self,
        path: Path | str,
        content: str,
        atomic: bool = True
    ) -> WriteResult:
        """
        Write text content to a file.

        Args:
            path: Path to write to
            content: String content
            atomic: Use atomic write (write to temp then move)

        Returns:
            WriteResult with success status
        """
        path = Path(path)

        try:
            encoded = content.encode(self.encoding)
            dir_path = path.parent
            dir_path.mkdir(parents=True, exist_ok=True)

            if atomic:
                fd, temp_path = tempfile.mkstemp(dir=dir_path)
                try:
                    os.write(fd, encoded)
                    os.close(fd)
                    shutil.move(temp_path, path)
                except Exception:
                    try:
                        os.close(fd)
                    except OSError:
                        pass
                    if os.path.exists(temp_path):
                        os.unlink(temp_path)
                    raise
            else:
                path.write_bytes(encoded)

            return WriteResult(success=True, bytes_written=len(encoded))

        except UnicodeEncodeError as e:
            logging.error(f"FileIOService - Cannot encode content for {path}: {e}")
            return WriteResult(success=False, error=f"Not encodable as {self.encoding}: {e.reason}")
        except PermissionError:
            logging.error(f"FileIOService - Permission denied writing {path}")
            return WriteResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            logging.error(f"FileIOService - Failed to write {path}: {e}")
            return WriteResult(success=False, error=f"OS error: {e}")

    @staticmethod
    def detect_line_ending(content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        cr_count = content.count('\r') - crlf_count

        if crlf_count == 0 and lf_count == 0 and cr_count == 0:
            return LineEnding.NONE

        total = crlf_count + lf_count + cr_count

        if crlf_count == total:
            return LineEnding.CRLF
        elif lf_count == total:
            return LineEnding.LF
        elif cr_count == total:
            return LineEnding.CR
        else:
            return LineEnding.MIXED


_default_service = FileIOService()


def read_text_file(path: Path | str) -> ReadResult:
    """Read a file with the default service."""
    return _default_service.read_text(path)
