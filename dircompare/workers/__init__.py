"""
Background workers for non-blocking operations.

Provides QThread-based workers for scanning and comparing folders
from the native viewer. All workers use Qt signals for thread-safe
communication with the UI thread.
"""

from dircompare.workers.base_worker import (
    BaseWorker,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from dircompare.workers.store_worker import (
    StoreLoadWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Store
    'StoreLoadWorker',
]
