"""Qt thread helpers: background workers and main-thread dispatch."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Set

from PyQt5 import QtCore

__all__ = ["BackgroundRunner", "FuncThread", "MainThreadDispatcher"]


logger = logging.getLogger(__name__)


class FuncThread(QtCore.QThread):
    """Run a blocking callable on a background thread and emit the outcome."""

    sig_done = QtCore.pyqtSignal(object)
    sig_error = QtCore.pyqtSignal(str)

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:  # noqa: D401 - inherited documentation suffices
        try:
            result = self.func(*self.args, **self.kwargs)
            self.sig_done.emit(result)
        except Exception as exc:  # noqa: BLE001
            func_name = getattr(self.func, "__name__", str(self.func))
            logger.exception("Background task %s failed", func_name)
            self.sig_error.emit(str(exc) or type(exc).__name__)


class MainThreadDispatcher(QtCore.QObject):
    """Queue callables onto the thread that owns this object (the UI thread).

    Signals emitted from worker threads are delivered through the event loop,
    so ``dispatch`` is safe to call from any thread.
    """

    _sig_call = QtCore.pyqtSignal(object)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._sig_call.connect(self._invoke, QtCore.Qt.QueuedConnection)

    def dispatch(self, func: Callable[[], None]) -> None:
        self._sig_call.emit(func)

    @QtCore.pyqtSlot(object)
    def _invoke(self, func: Callable[[], None]) -> None:
        func()


class BackgroundRunner(QtCore.QObject):
    """Start :class:`FuncThread` workers and keep them alive until they finish.

    ``on_done`` and ``on_error`` run on the thread that owns the runner
    (the UI thread), whichever thread the worker signal is emitted from.
    """

    _sig_deliver = QtCore.pyqtSignal(object, object)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._threads: Set[FuncThread] = set()
        self._sig_deliver.connect(self._deliver, QtCore.Qt.QueuedConnection)

    def submit(
        self,
        func: Callable[[], Any],
        on_done: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ) -> FuncThread:
        thread = FuncThread(func)
        if on_done is not None:
            thread.sig_done.connect(lambda result: self._sig_deliver.emit(on_done, result))
        if on_error is not None:
            thread.sig_error.connect(lambda msg: self._sig_deliver.emit(on_error, msg))
        thread.finished.connect(lambda: self._sig_deliver.emit(self._release, thread))
        self._threads.add(thread)
        thread.start()
        return thread

    def wait_all(self, timeout_ms: int = 3000) -> None:
        """Block until every running worker has finished (used at shutdown)."""
        pending: List[FuncThread] = list(self._threads)
        for thread in pending:
            thread.wait(timeout_ms)

    @QtCore.pyqtSlot(object, object)
    def _deliver(self, callback: Callable[[Any], None], value: Any) -> None:
        callback(value)

    def _release(self, thread: FuncThread) -> None:
        self._threads.discard(thread)
        thread.deleteLater()
