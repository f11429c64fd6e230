"""Caller-owned cancellation and deadline signal."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from certstore.errors import OperationCancelledError


@dataclass
class CallContext:
    """Cancellation token passed to storage operations.

    ``deadline`` is a ``time.monotonic()`` timestamp. The adapter checks the
    context before each backend request and between listing pages; a request
    already on the wire is bounded by the client's own timeouts.
    """

    cancel_event: threading.Event = field(default_factory=threading.Event)
    deadline: float | None = None

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        if seconds < 0:
            raise ValueError("timeout must be >= 0")
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self, operation: str, key: str) -> None:
        if self.cancelled:
            raise OperationCancelledError(operation, key, "cancelled")
        if self.expired:
            raise OperationCancelledError(operation, key, "deadline exceeded")
