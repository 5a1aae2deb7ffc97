# emulink/protocol/_internal/registry.py
from __future__ import annotations

import threading
from typing import Dict, List, Optional

from emulink.protocol.errors import DuplicateInvocation, TooManyPending, UnknownInvocation

from .pending_invocation import PendingInvocation


class PendingRegistry:
    """
    invocation_id -> PendingInvocation, owned by a single dispatcher.

    Every mutation happens under one lock; futures are settled outside it so
    that done-callbacks may re-enter the registry.
    """

    def __init__(self, *, max_pending: Optional[int] = None):
        self.max_pending = max_pending if max_pending and max_pending > 0 else None
        self._lock = threading.Lock()
        self._pending: Dict[int, PendingInvocation] = {}

    def register(self, invocation_id: int, pending: PendingInvocation) -> None:
        invocation_id = int(invocation_id)
        with self._lock:
            if invocation_id in self._pending:
                raise DuplicateInvocation(invocation_id)
            if self.max_pending is not None and len(self._pending) >= self.max_pending:
                raise TooManyPending(self.max_pending)
            self._pending[invocation_id] = pending

    def resolve(self, invocation_id: int, payload: bytes) -> PendingInvocation:
        """Remove the entry and fulfil it with payload. Raises UnknownInvocation if absent."""
        with self._lock:
            pending = self._pending.pop(int(invocation_id), None)
        if pending is None:
            raise UnknownInvocation(int(invocation_id))
        pending.complete(payload)
        return pending

    def discard(self, invocation_id: int, pending: Optional[PendingInvocation] = None) -> bool:
        """Drop an entry; when `pending` is given, only if it is still the registered one."""
        invocation_id = int(invocation_id)
        with self._lock:
            current = self._pending.get(invocation_id)
            if current is None or (pending is not None and current is not pending):
                return False
            del self._pending[invocation_id]
            return True

    def pop_expired(self, now: float) -> List[PendingInvocation]:
        with self._lock:
            expired = [p for p in self._pending.values() if p.expired(now)]
            for p in expired:
                del self._pending[p.invocation_id]
        return expired

    def fail_all(self, exc: BaseException) -> int:
        with self._lock:
            drained = list(self._pending.values())
            self._pending.clear()
        for pending in drained:
            pending.fail(exc)
        return len(drained)

    def count(self) -> int:
        with self._lock:
            return len(self._pending)

    def __contains__(self, invocation_id: object) -> bool:
        with self._lock:
            return invocation_id in self._pending
