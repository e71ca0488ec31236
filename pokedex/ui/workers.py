"""Run blocking calls on the Qt thread pool and report back through signals."""

from __future__ import annotations

import logging
from typing import Any, Callable, Set

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

logger = logging.getLogger(__name__)


class TaskSignals(QObject):
    finished = Signal(object)
    failed = Signal(str)


class BackgroundTask(QRunnable):
    """Calls ``fn(*args)`` off the UI thread.

    Signals are delivered on the thread that owns ``signals`` (the UI thread),
    so slots may touch widgets and the progress store.
    """

    def __init__(self, fn: Callable[..., Any], *args: Any) -> None:
        super().__init__()
        self._fn = fn
        self._args = args
        self.signals = TaskSignals()

    def run(self) -> None:
        try:
            result = self._fn(*self._args)
        except Exception as e:
            logger.exception("Background task %s failed", getattr(self._fn, "__name__", self._fn))
            self.signals.failed.emit(str(e))
            return
        self.signals.finished.emit(result)


# Tasks stay referenced until they report back so their signals outlive run().
_active: Set[BackgroundTask] = set()


def start_task(
    fn: Callable[..., Any],
    *args: Any,
    on_finished: Callable[[Any], None],
    on_failed: Callable[[str], None],
) -> BackgroundTask:
    task = BackgroundTask(fn, *args)
    task.setAutoDelete(False)
    task.signals.finished.connect(on_finished)
    task.signals.failed.connect(on_failed)
    task.signals.finished.connect(lambda _result: _active.discard(task))
    task.signals.failed.connect(lambda _message: _active.discard(task))
    _active.add(task)
    QThreadPool.globalInstance().start(task)
    return task
