"""
QThread plumbing shared by the native viewer's background jobs.

A job subclasses :class:`BaseWorker`, implements ``do_work`` and is run by
a :class:`WorkerThread`. Results, scan progress and failures travel back to
the UI thread as Qt signals.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QMutex, QMutexLocker, QObject, QThread, pyqtSignal, pyqtSlot


class WorkerState(Enum):
    """Lifecycle of a job."""
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()


class WorkerSignals(QObject):
    """Signals emitted by a job, delivered on the receiver's thread."""
    status = pyqtSignal(str)
    progress = pyqtSignal(object)       # ScanProgress
    started = pyqtSignal()
    finished = pyqtSignal(object)       # job result
    error = pyqtSignal(str, str)        # (exception type, message)
    cancelled = pyqtSignal()
    state_changed = pyqtSignal(object)  # WorkerState


class WorkerMeta(type(QObject), type(ABC)):
    pass


class BaseWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    One background job.

    ``run`` drives the lifecycle; subclasses only implement ``do_work``
    and poll ``is_cancelled`` between expensive steps. A job cancelled
    mid-way emits ``cancelled`` and its result is dropped.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self._state = WorkerState.PENDING
        self._cancel_requested = False
        self._result: Any = None
        self._error: Optional[tuple[str, str]] = None

    @property
    def state(self) -> WorkerState:
        with QMutexLocker(self._mutex):
            return self._state

    def _set_state(self, state: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = state
        self.signals.state_changed.emit(state)

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    @property
    def result(self) -> Any:
        return self._result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        """(exception type, message) after a failed run."""
        return self._error

    def cancel(self) -> None:
        """Ask the job to stop at its next checkpoint."""
        with QMutexLocker(self._mutex):
            self._cancel_requested = True
            if self._state == WorkerState.RUNNING:
                self._state = WorkerState.CANCELLING
        self.signals.state_changed.emit(WorkerState.CANCELLING)

    @pyqtSlot()
    def run(self) -> None:
        self._set_state(WorkerState.RUNNING)
        self.signals.started.emit()

        try:
            result = self.do_work()
        except Exception as e:
            logging.exception(f"{type(self).__name__} - Job failed")
            self._error = (type(e).__name__, str(e))
            self._set_state(WorkerState.FAILED)
            self.signals.error.emit(*self._error)
            return

        if self.is_cancelled:
            self._set_state(WorkerState.CANCELLED)
            self.signals.cancelled.emit()
            return

        self._result = result
        self._set_state(WorkerState.COMPLETED)
        self.signals.finished.emit(result)

    @abstractmethod
    def do_work(self) -> Any:
        """Do the job on the worker thread and return its result."""

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)


class WorkerThread(QThread):
    """
    Owns a worker and runs it on its own thread.

    The thread quits as soon as the worker finishes, fails or is cancelled.
    """

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        self.started.connect(self.worker.run)
        for signal in (worker.signals.finished, worker.signals.error, worker.signals.cancelled):
            signal.connect(self.quit)

    def cancel(self) -> None:
        self.worker.cancel()

    @property
    def result(self) -> Any:
        return self.worker.result
