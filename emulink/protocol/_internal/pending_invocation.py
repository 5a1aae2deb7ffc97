# emulink/protocol/_internal/pending_invocation.py
from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Optional


class PendingInvocation:
    """Holds the Future of one in-flight invocation until its response arrives."""

    def __init__(self, invocation_id: int, command_code: int, timeout_s: Optional[float] = None):
        self.invocation_id = int(invocation_id)
        self.command_code = int(command_code)
        self.timeout_s = float(timeout_s) if timeout_s and timeout_s > 0 else None
        self.created_at = time.perf_counter()
        self.deadline = self.created_at + self.timeout_s if self.timeout_s is not None else None
        self.future: "Future[bytes]" = Future()
        self._settle_lock = threading.Lock()

    def add_done_callback(self, cb: Callable[["Future[bytes]"], Any]) -> None:
        """Forward callback registration to the underlying Future."""
        self.future.add_done_callback(cb)

    def done(self) -> bool:
        return self.future.done()

    def expired(self, now: float) -> bool:
        return self.deadline is not None and now >= self.deadline

    def complete(self, payload: bytes) -> bool:
        """Fulfil the caller's future. Returns False if it was already settled or cancelled."""
        return self._settle(lambda: self.future.set_result(payload))

    def fail(self, exc: BaseException) -> bool:
        """Reject the caller's future. Returns False if it was already settled or cancelled."""
        return self._settle(lambda: self.future.set_exception(exc))

    def _settle(self, apply: Callable[[], None]) -> bool:
        with self._settle_lock:
            if self.future.done():
                return False
            # False here means the caller cancelled the future
            if not self.future.set_running_or_notify_cancel():
                return False
            apply()
            return True

    def __repr__(self) -> str:
        return (
            f"PendingInvocation(invocation_id={self.invocation_id}, "
            f"command_code={self.command_code}, timeout_s={self.timeout_s})"
        )
