"""
Directory scanner for folder comparison.

Walks a directory tree depth-first and builds an inventory of regular
files with paths relative to the scan root:
- Only regular files are recorded
- Symlinks, devices, sockets and fifos are skipped
- Unreadable directories and files are skipped, not fatal
- Optional fan-out of top-level subdirectories to a thread pool
"""

from __future__ import annotations

import logging
import os
import stat
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from dircompare.core.models import Inventory, ScannedFile


@dataclass
class ScanOptions:
    """Options for directory scanning."""
    parallel_workers: int = 1  # >1 scans top-level subdirectories concurrently


@dataclass
class ScanProgress:
    """Progress information for scanning."""
    current_path: str
    files_found: int    # Running total for the whole scan
    errors: int


class _FileTally:
    """
    Running file count shared by every directory of one scan.

    Reports go out under the lock so totals reach the callback in order,
    even from parallel workers.
    """

    def __init__(self, progress_callback: Optional[Callable[[ScanProgress], None]] = None):
        self._lock = threading.Lock()
        self._count = 0
        self._progress_callback = progress_callback

    def add(self, count: int) -> None:
        with self._lock:
            self._count += count

    def directory_done(self, current_path: str, count: int, errors: int) -> None:
        with self._lock:
            self._count += count
            if self._progress_callback:
                self._progress_callback(ScanProgress(
                    current_path=current_path,
                    files_found=self._count,
                    errors=errors,
                ))


class FolderScanner:
    """
    Scans a directory to build a file inventory.

    Each directory scan returns its own list of records; subtree lists are
    concatenated by the caller, so parallel and sequential scans produce
    the same inventory in the same order.
    """

    def __init__(self, options: Optional[ScanOptions] = None):
        self.options = options or ScanOptions()

    def scan(
        self,
        root_path: Path | str,
        progress_callback: Optional[Callable[[ScanProgress], None]] = None
    ) -> Inventory:
        """
        Scan a directory tree.

        Args:
            root_path: Root directory to scan
            progress_callback: Called after each directory is read

        Returns:
            Inventory with one record per regular file

        Raises:
            FileNotFoundError: root does not exist
            NotADirectoryError: root is not a directory
        """
        start_time = time.time()

        root_path = Path(root_path).resolve()

        if not root_path.exists():
            logging.error(f"FolderScanner - Root path not found: {root_path}")
            raise FileNotFoundError(f"Directory not found: {root_path}")

        if not root_path.is_dir():
            logging.error(f"FolderScanner - Root path is not a directory: {root_path}")
            raise NotADirectoryError(f"Not a directory: {root_path}")

        logging.debug(f"FolderScanner - Scanning {root_path}")

        errors: list[tuple[str, str]] = []
        tally = _FileTally(progress_callback)
        if self.options.parallel_workers > 1:
            files = self._scan_parallel(root_path, errors, tally)
        else:
            files = self._scan_directory(root_path, root_path, errors, tally)

        inventory = Inventory(root_path=root_path, files=files, errors=errors)

        logging.info(
            f"FolderScanner - Scanned {root_path}: {len(inventory)} files, "
            f"{inventory.error_count} errors in {time.time() - start_time:.2f}s"
        )
        return inventory

    def _scan_directory(
        self,
        directory: Path,
        root_path: Path,
        errors: list[tuple[str, str]],
        tally: _FileTally
    ) -> list[ScannedFile]:
        """Recursively collect the records under one directory."""
        files: list[ScannedFile] = []

        entries = self._read_entries(directory, root_path, errors)
        if entries is None:
            return files

        own_files = 0

        for entry in entries:
            entry_path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                self._record_error(errors, entry_path, root_path, f"Access error: {e}")
                continue

            if is_dir:
                files.extend(self._scan_directory(entry_path, root_path, errors, tally))
                continue

            record = self._make_record(entry, entry_path, root_path, errors)
            if record is not None:
                files.append(record)
                own_files += 1

        tally.directory_done(str(directory.relative_to(root_path)), own_files, len(errors))

        return files

    def _scan_parallel(
        self,
        root_path: Path,
        errors: list[tuple[str, str]],
        tally: _FileTally
    ) -> list[ScannedFile]:
        """Scan the root's own files inline and each subdirectory in a worker."""
        entries = self._read_entries(root_path, root_path, errors)
        if entries is None:
            return []

        # One slot per root entry keeps traversal order when subtrees finish out of order
        slots: list[object] = []
        subtree_errors: list[list[tuple[str, str]]] = []

        with ThreadPoolExecutor(max_workers=self.options.parallel_workers) as executor:
            for entry in entries:
                entry_path = Path(entry.path)
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError as e:
                    self._record_error(errors, entry_path, root_path, f"Access error: {e}")
                    continue

                if is_dir:
                    local_errors: list[tuple[str, str]] = []
                    subtree_errors.append(local_errors)
                    slots.append(executor.submit(
                        self._scan_directory, entry_path, root_path, local_errors, tally
                    ))
                else:
                    record = self._make_record(entry, entry_path, root_path, errors)
                    if record is not None:
                        slots.append([record])
                        tally.add(1)

            files: list[ScannedFile] = []
            for slot in slots:
                files.extend(slot if isinstance(slot, list) else slot.result())

        for local_errors in subtree_errors:
            errors.extend(local_errors)

        tally.directory_done(".", 0, len(errors))

        return files

    def _read_entries(
        self,
        directory: Path,
        root_path: Path,
        errors: list[tuple[str, str]]
    ) -> Optional[list[os.DirEntry]]:
        """List a directory, sorted by name; None if it cannot be opened."""
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            self._record_error(errors, directory, root_path, f"Access error: {e.strerror or e}")
            logging.warning(f"FolderScanner - Failed to read directory {directory}: {e}")
            return None

        entries.sort(key=lambda e: e.name)
        return entries

    def _make_record(
        self,
        entry: os.DirEntry,
        entry_path: Path,
        root_path: Path,
        errors: list[tuple[str, str]]
    ) -> Optional[ScannedFile]:
        """Build a record for a regular file entry, None for anything else."""
        try:
            stat_result = entry.stat(follow_symlinks=False)
        except OSError as e:
            self._record_error(errors, entry_path, root_path, f"Cannot read metadata: {e}")
            logging.debug(f"FolderScanner - Cannot read metadata for {entry_path}: {e}")
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            logging.debug(f"FolderScanner - Skipping non-regular file: {entry_path}")
            return None

        return ScannedFile.from_path(entry_path, root_path, stat_result.st_size)

    @staticmethod
    def _record_error(
        errors: list[tuple[str, str]],
        path: Path,
        root_path: Path,
        message: str
    ) -> None:
        try:
            rel_path = str(path.relative_to(root_path))
        except ValueError:
            rel_path = str(path)
        errors.append((rel_path, message))


def scan_directory(root_path: Path | str, options: Optional[ScanOptions] = None) -> Inventory:
    """Scan ``root_path`` with a fresh scanner."""
    return FolderScanner(options).scan(root_path)
