"""Ctrl+C / SIGTERM handling for batch runs."""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable
from typing import Any


class ShutdownHandler:
    """Asks the worker pool to stop pulling new files on the first signal.

    In-flight files finish normally. A second signal restores the default
    handlers and raises KeyboardInterrupt in the main thread.
    """

    def __init__(self, on_first_signal: Callable[[], None] | None = None) -> None:
        self._event = threading.Event()
        self._on_first_signal = on_first_signal
        self._previous: dict[int, Any] = {}

    @property
    def is_shutting_down(self) -> bool:
        return self._event.is_set()

    def should_stop(self) -> bool:
        return self._event.is_set()

    def request_shutdown(self) -> None:
        first = not self._event.is_set()
        self._event.set()
        if first and self._on_first_signal is not None:
            self._on_first_signal()

    def _handle(self, signum: int, frame: object) -> None:
        if self._event.is_set():
            for sig in self._previous:
                signal.signal(sig, signal.SIG_DFL)
            raise KeyboardInterrupt
        self.request_shutdown()

    def install(self) -> None:
        # Signal handlers can only be installed from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for sig in (signal.SIGINT, signal.SIGTERM):
            self._previous[sig] = signal.getsignal(sig)
            signal.signal(sig, self._handle)

    def uninstall(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for sig, previous in self._previous.items():
            if previous is not None:
                signal.signal(sig, previous)
        self._previous.clear()

    def __enter__(self) -> ShutdownHandler:
        self.install()
        return self

    def __exit__(self, *exc: object) -> None:
        self.uninstall()
