"""Cooperative cancellation shared by the poller and the command runner."""

from __future__ import annotations

import threading

__all__ = ["CancelToken"]


class CancelToken:
    """One-shot cancellation signal.

    The poller sleeps on the token and the command runner checks it while
    waiting on a child, so a single cancel() interrupts whichever is
    currently blocked. Safe to trip from a signal handler.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Sleep up to `seconds`.

        Returns:
            True if the full duration elapsed, False if cancelled first.
        """
        if seconds <= 0:
            return not self._event.is_set()
        return not self._event.wait(timeout=seconds)
