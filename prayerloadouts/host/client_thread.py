"""
Designated execution context for live-state access.

The game simulation reads and writes the same settings the plugin
touches, so every live-state read/write is submitted as a unit of work to
one designated thread instead of running inline from arbitrary callers.

- ClientThread: a single worker thread; delayed work uses timers
- ImmediateExecutor: runs everything inline (tests, headless use)
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClientExecutor(Protocol):
    """Submits work to the designated context."""

    def submit(self, task: Callable[[], T]) -> Future[T]: ...

    def schedule(self, delay: float, task: Callable[[], object]) -> None:
        """Submit task after delay seconds."""
        ...

    def is_client_thread(self) -> bool: ...


class ClientThread:
    """Single-threaded executor standing in for the host's client thread."""

    def __init__(self, name: str = "client-thread") -> None:
        self._name = name
        self._thread_ident: int | None = None
        self._pool = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
            initializer=self._register_thread,
        )
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def _register_thread(self) -> None:
        self._thread_ident = threading.get_ident()

    def submit(self, task: Callable[[], T]) -> Future[T]:
        return self._pool.submit(_logged(task))

    def schedule(self, delay: float, task: Callable[[], object]) -> None:
        timer: threading.Timer

        def _fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            self.submit(task)

        timer = threading.Timer(delay, _fire)
        timer.daemon = True
        timer.name = f"{self._name}-timer"
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def is_client_thread(self) -> bool:
        return self._thread_ident is not None and threading.get_ident() == self._thread_ident

    def shutdown(self, wait: bool = True) -> None:
        """Cancel pending timers and stop the worker."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self._pool.shutdown(wait=wait)


class ImmediateExecutor:
    """Runs submitted and scheduled work inline on the calling thread."""

    def submit(self, task: Callable[[], T]) -> Future[T]:
        future: Future[T] = Future()
        try:
            future.set_result(task())
        except Exception as e:
            logger.exception("Client task failed")
            future.set_exception(e)
        return future

    def schedule(self, delay: float, task: Callable[[], object]) -> None:
        self.submit(task)

    def is_client_thread(self) -> bool:
        return True


def invoke_and_wait(executor: ClientExecutor, task: Callable[[], T], timeout: float) -> T:
    """
    Run task on the designated context and wait for its result.

    Runs inline when already on that context, since waiting on our own
    queue would never finish.

    Raises:
        TimeoutError: The task did not finish within timeout seconds
        Exception: Whatever the task raised
    """
    if executor.is_client_thread():
        return task()
    return executor.submit(task).result(timeout=timeout)


def _logged(task: Callable[[], T]) -> Callable[[], T]:
    def _run() -> T:
        try:
            return task()
        except Exception:
            logger.exception("Client task failed")
            raise

    return _run
