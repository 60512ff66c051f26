"""
Tests for the designated client execution context.
"""

import threading
from concurrent.futures import Future

import pytest

from prayerloadouts.host.client_thread import ClientThread, ImmediateExecutor, invoke_and_wait


@pytest.fixture
def client_thread():
    thread = ClientThread(name="test-client")
    yield thread
    thread.shutdown()


class TestImmediateExecutor:
    def test_submit_runs_inline(self) -> None:
        executor = ImmediateExecutor()

        future = executor.submit(lambda: 42)

        assert future.done()
        assert future.result() == 42

    def test_submit_captures_exception(self) -> None:
        def _fail() -> None:
            raise RuntimeError("boom")

        future = ImmediateExecutor().submit(_fail)

        with pytest.raises(RuntimeError, match="boom"):
            future.result()

    def test_schedule_runs_inline(self) -> None:
        calls: list[int] = []

        ImmediateExecutor().schedule(5.0, lambda: calls.append(1))

        assert calls == [1]

    def test_is_client_thread(self) -> None:
        assert ImmediateExecutor().is_client_thread() is True


class TestClientThread:
    def test_runs_on_worker(self, client_thread: ClientThread) -> None:
        caller = threading.get_ident()

        worker = client_thread.submit(threading.get_ident).result(timeout=5)

        assert worker != caller
        assert client_thread.submit(client_thread.is_client_thread).result(timeout=5) is True
        assert client_thread.is_client_thread() is False

    def test_tasks_run_in_order(self, client_thread: ClientThread) -> None:
        seen: list[int] = []

        futures = [client_thread.submit(lambda i=i: seen.append(i)) for i in range(20)]
        for future in futures:
            future.result(timeout=5)

        assert seen == list(range(20))

    def test_failed_task_propagates(self, client_thread: ClientThread) -> None:
        def _fail() -> None:
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            client_thread.submit(_fail).result(timeout=5)

        # The worker survives a failing task
        assert client_thread.submit(lambda: "ok").result(timeout=5) == "ok"

    def test_schedule(self, client_thread: ClientThread) -> None:
        done = threading.Event()
        on_worker: list[bool] = []

        def _task() -> None:
            on_worker.append(client_thread.is_client_thread())
            done.set()

        client_thread.schedule(0.01, _task)

        assert done.wait(timeout=5)
        assert on_worker == [True]

    def test_shutdown_cancels_timers(self) -> None:
        thread = ClientThread()
        calls: list[int] = []

        thread.schedule(10.0, lambda: calls.append(1))
        thread.shutdown()

        assert calls == []


class TestInvokeAndWait:
    def test_returns_result(self, client_thread: ClientThread) -> None:
        assert invoke_and_wait(client_thread, lambda: "done", timeout=5) == "done"

    def test_raises_task_error(self, client_thread: ClientThread) -> None:
        def _fail() -> None:
            raise KeyError("missing")

        with pytest.raises(KeyError):
            invoke_and_wait(client_thread, _fail, timeout=5)

    def test_timeout(self, client_thread: ClientThread) -> None:
        release = threading.Event()
        client_thread.submit(lambda: release.wait(timeout=5))

        try:
            with pytest.raises(TimeoutError):
                invoke_and_wait(client_thread, lambda: True, timeout=0.05)
        finally:
            release.set()

    def test_inline_on_client_thread(self, client_thread: ClientThread) -> None:
        """Waiting from the worker itself must not deadlock."""

        def _outer() -> int:
            return invoke_and_wait(client_thread, threading.get_ident, timeout=5)

        inner = client_thread.submit(_outer).result(timeout=5)
        worker = client_thread.submit(threading.get_ident).result(timeout=5)

        assert inner == worker

    def test_not_finished_future(self) -> None:
        class NeverRuns:
            def submit(self, task) -> Future:
                return Future()

            def schedule(self, delay, task) -> None:
                pass

            def is_client_thread(self) -> bool:
                return False

        with pytest.raises(TimeoutError):
            invoke_and_wait(NeverRuns(), lambda: True, timeout=0.01)
