# backend/futsal_booking/core/execution_context.py
"""
Deadline-bound execution context for booking operations.

Every public service operation receives an ``ExecutionContext``. The context
carries an absolute deadline (monotonic clock) and a cancellation flag; the
service calls ``ensure_active`` on entry and between collaborator calls, so
an expired request fails fast with ``OperationTimeoutException`` instead of
issuing further queries. Nothing here interrupts a call already in flight.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from .config import settings
from .exceptions import OperationTimeoutException
from .request_context import get_request_id


class ExecutionContext:
    """Cancellable unit of work with an optional deadline."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        *,
        request_id: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._cancelled = False
        self.deadline: Optional[float] = (
            clock() + timeout_seconds if timeout_seconds is not None else None
        )
        self.request_id = request_id or get_request_id()

    @classmethod
    def with_timeout(
        cls, timeout_seconds: Optional[float] = None, *, request_id: Optional[str] = None
    ) -> "ExecutionContext":
        """Build a context using the configured per-request deadline by default."""
        seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.booking_operation_timeout_seconds
        )
        return cls(seconds, request_id=request_id)

    @classmethod
    def background(cls) -> "ExecutionContext":
        """Context without a deadline; only explicit cancellation stops it."""
        return cls(None)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self.deadline is not None and self._clock() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def ensure_active(self, operation: str) -> None:
        """
        Raise if the context can no longer be used.

        Raises:
            OperationTimeoutException: If cancelled or past the deadline
        """
        if self._cancelled:
            raise OperationTimeoutException(operation, reason="cancelled")
        if self.expired:
            raise OperationTimeoutException(operation, reason="deadline exceeded")

    def __repr__(self) -> str:
        return (
            f"<ExecutionContext remaining={self.remaining()} "
            f"cancelled={self._cancelled} request_id={self.request_id}>"
        )
