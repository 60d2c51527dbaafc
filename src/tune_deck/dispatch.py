"""Fire-and-forget dispatch of remote mutations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import queue
import threading
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Task:
    label: str
    func: Callable[..., Any]
    args: tuple[Any, ...] = ()


class BackgroundDispatcher:
    """Runs submitted tasks on one daemon thread, in submission order.

    Callers never see results. Failures are written to the log, which is the
    only place a mutation's outcome can be observed.
    """

    def __init__(self, *, name: str = "RemoteDispatch") -> None:
        self._name = name
        self._queue: queue.Queue[Optional[Task]] = queue.Queue()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._worker, name=self._name, daemon=True
            )
            self._thread.start()

    def stop(self, timeout: float = 0.5) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._stop.set()
        self._queue.put(None)
        thread.join(timeout=timeout)

    def submit(self, label: str, func: Callable[..., Any], *args: Any) -> None:
        """Queue ``func(*args)`` and return immediately.

        Tasks submitted before :meth:`start` wait in the queue.
        """
        self._queue.put(Task(label=label, func=func, args=args))

    def drain(self) -> int:
        """Run every queued task on the calling thread (used by tests)."""
        ran = 0
        while True:
            try:
                task = self._queue.get_nowait()
            except queue.Empty:
                return ran
            if task is None:
                continue
            self._run(task)
            ran += 1

    def _worker(self) -> None:
        while not self._stop.is_set():
            try:
                task = self._queue.get(timeout=0.2)
            except queue.Empty:
                continue
            if task is None:
                break
            self._run(task)

    def _run(self, task: Task) -> None:
        try:
            task.func(*task.args)
        except Exception:
            logger.exception("Background task %s failed", task.label)
        else:
            logger.debug("Background task %s done", task.label)
