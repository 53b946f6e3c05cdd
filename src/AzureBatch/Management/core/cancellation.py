# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Caller-controlled cancellation and deadlines for polling and pagination.

:class:`CancellationToken` wraps a :class:`threading.Event` so that a waiting
poller wakes up as soon as another thread cancels it. :class:`Deadline` turns a
relative timeout into an absolute monotonic instant.
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from ._error_codes import VALIDATION_RANGE
from .errors import OperationCancelledError, OperationTimeoutError, ValidationError


class CancellationToken:
    """
    Thread-safe cancellation signal shared between a caller and an operation.

    Example::

        token = CancellationToken()
        poller = client.accounts.begin_create("rg", "acct", params, cancellation=token)
        # elsewhere, possibly from another thread
        token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Signal cancellation. Safe to call more than once."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """
        Sleep up to ``seconds``, returning early if the token is cancelled.

        :return: ``True`` if cancellation was signalled before the wait finished.
        :rtype: bool
        """
        if seconds <= 0:
            return self._event.is_set()
        return self._event.wait(seconds)

    def raise_if_cancelled(self, polling_url: Optional[str] = None) -> None:
        if self._event.is_set():
            raise OperationCancelledError(polling_url=polling_url)


class Deadline:
    """Absolute point in monotonic time after which an operation gives up."""

    def __init__(self, expires_at: Optional[float], timeout: Optional[float] = None) -> None:
        self._expires_at = expires_at
        self.timeout = timeout

    @classmethod
    def from_timeout(cls, timeout: Optional[float]) -> "Deadline":
        """Build a deadline ``timeout`` seconds from now; ``None`` never expires."""
        if timeout is None:
            return cls(None)
        if timeout < 0:
            raise ValidationError("timeout must be non-negative.", parameter="timeout", subcode=VALIDATION_RANGE)
        return cls(time.monotonic() + timeout, timeout)

    def remaining(self) -> Optional[float]:
        """Seconds left, clamped at zero. ``None`` for an unbounded deadline."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def raise_if_expired(self, polling_url: Optional[str] = None) -> None:
        if self.expired:
            raise OperationTimeoutError(
                f"Operation did not reach a terminal state within {self.timeout}s.",
                timeout=self.timeout,
                polling_url=polling_url,
            )


__all__ = ["CancellationToken", "Deadline"]
