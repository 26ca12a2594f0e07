"""Background analysis runner where only the newest submission is delivered."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from jsonlens.core.domain_impl.json import json_io_core
from jsonlens.core.exceptions import EXPECTED_ERRORS
from jsonlens.core.settings import DiagnosticsSettings

_LOG = logging.getLogger(__name__)


class LatestResultWorker:
    """Run calls on daemon threads; results of superseded calls are dropped.

    `on_result(ticket, result)` is called under the worker lock, so a result
    is never delivered after a newer one. `on_error(ticket, exc)` receives
    expected failures of the current submission.
    """

    def __init__(
        self,
        on_result: Callable[[int, Any], Any],
        on_error: Callable[[int, BaseException], Any] | None = None,
        thread_factory: Callable[..., Any] = threading.Thread,
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._thread_factory = thread_factory
        self._lock = threading.RLock()
        self._generation = 0
        self._threads: list[Any] = []

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._generation

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> int:
        """Start `fn(*args, **kwargs)` off-thread and return its ticket."""
        with self._lock:
            self._generation += 1
            ticket = self._generation

        def worker():
            try:
                result = fn(*args, **kwargs)
            except EXPECTED_ERRORS as exc:
                _LOG.debug("expected_error", exc_info=exc)
                self._deliver_error(ticket, exc)
                return
            self._deliver(ticket, result)

        thread = self._thread_factory(target=worker, daemon=True)
        with self._lock:
            self._threads = [item for item in self._threads if item.is_alive()]
            self._threads.append(thread)
        thread.start()
        return ticket

    def submit_analysis(self, text: Any, settings: DiagnosticsSettings | None = None) -> int:
        return self.submit(json_io_core.parse_json, text, settings)

    def cancel(self) -> None:
        """Invalidate every in-flight submission."""
        with self._lock:
            self._generation += 1

    def join(self, timeout: float | None = None) -> None:
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout)

    def _deliver(self, ticket: int, result: Any) -> bool:
        with self._lock:
            if ticket != self._generation:
                _LOG.debug(
                    "analysis_worker.stale_result",
                    extra={"ticket": ticket, "latest": self._generation},
                )
                return False
            self._on_result(ticket, result)
            return True

    def _deliver_error(self, ticket: int, exc: BaseException) -> bool:
        with self._lock:
            if ticket != self._generation or self._on_error is None:
                return False
            self._on_error(ticket, exc)
            return True
