"""
Tests for the latest-result background worker
"""
import threading

from jsonlens.core.domain_impl.infra.analysis_worker import LatestResultWorker
from jsonlens.core.models import Valid


class ImmediateThread:
    """Thread stand-in that runs its target on start()"""

    def __init__(self, target, daemon=False):
        self._target = target
        self.daemon = daemon

    def start(self):
        self._target()

    def is_alive(self):
        return False

    def join(self, timeout=None):
        return None


def test_submit_analysis_delivers_outcome():
    delivered = []
    worker = LatestResultWorker(lambda ticket, result: delivered.append((ticket, result)), thread_factory=ImmediateThread)
    ticket = worker.submit_analysis("[1, 2]")
    assert delivered == [(ticket, Valid(value=[1, 2]))]


def test_stale_result_is_dropped():
    delivered = []
    newest_done = threading.Event()
    gate = threading.Event()

    def on_result(ticket, result):
        delivered.append((ticket, result))
        if result == "new":
            newest_done.set()

    def slow():
        gate.wait(5)
        return "old"

    worker = LatestResultWorker(on_result)
    worker.submit(slow)
    second = worker.submit(lambda: "new")
    assert newest_done.wait(5)
    gate.set()
    worker.join(5)
    assert delivered == [(second, "new")]


def test_cancel_drops_in_flight_work():
    delivered = []
    gate = threading.Event()

    def slow():
        gate.wait(5)
        return "late"

    worker = LatestResultWorker(lambda ticket, result: delivered.append(result))
    ticket = worker.submit(slow)
    worker.cancel()
    assert not worker.is_current(ticket)
    assert worker.generation == ticket + 1
    gate.set()
    worker.join(5)
    assert delivered == []


def test_expected_errors_reach_error_callback():
    errors = []

    def failing():
        raise ValueError("bad input")

    worker = LatestResultWorker(
        lambda ticket, result: None,
        on_error=lambda ticket, exc: errors.append((ticket, str(exc))),
        thread_factory=ImmediateThread,
    )
    ticket = worker.submit(failing)
    assert errors == [(ticket, "bad input")]
