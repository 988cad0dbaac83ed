"""Per-task cancellation signal."""

from __future__ import annotations

import threading
import time


class CancellationToken:
    """Cancellation flag with an optional deadline.

    A token belongs to exactly one task. It fires either when ``cancel()`` is
    called or when its deadline (monotonic clock) passes.
    """

    def __init__(self, deadline: float | None = None):
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float | None) -> CancellationToken:
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        return False

    def cancel(self) -> None:
        self._event.set()

    def remaining(self) -> float | None:
        """Seconds until the deadline, ``None`` when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token fires or ``timeout`` elapses.

        Returns True if the token has fired.
        """
        remaining = self.remaining()
        if remaining is not None and (timeout is None or remaining < timeout):
            timeout = remaining
        self._event.wait(timeout)
        return self.cancelled

    def cap_timeout(self, timeout: float) -> float:
        """Shorten ``timeout`` so it does not outlive the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)
