# emulink/transport/loopback.py
"""
In-process transport for tests, demos and development without a backend.

Frames written by the host are recorded in `sent`. Inbound frames come from
`inject()` or, with echo=True, from an automatic responder that answers every
request frame with a response frame carrying the same invocation id and payload.
"""
from __future__ import annotations

import queue
import threading
from typing import Callable, List, Optional

from emulink.protocol.core.codec import decode_request, encode_response
from emulink.protocol.errors import MalformedFrame

from .base import Transport
from .errors import TransportClosed, TransportIOError, TransportOpenError

Responder = Callable[[bytes], Optional[bytes]]

_CLOSED = object()
_BROKEN = object()


def echo_responder(data: bytes) -> Optional[bytes]:
    """Answer a request frame with [invocation_id][payload]; ignore malformed input."""
    try:
        _command_code, invocation_id, payload = decode_request(data)
    except MalformedFrame:
        return None
    return encode_response(invocation_id, payload)


class LoopbackTransport(Transport):
    def __init__(
        self,
        echo: bool = False,
        responder: Optional[Responder] = None,
        fail_open: bool = False,
    ):
        self.responder: Optional[Responder] = responder or (echo_responder if echo else None)
        self.fail_open = fail_open
        self.sent: List[bytes] = []
        self.open_count = 0
        self.close_count = 0

        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._open = False
        self._failure: Optional[str] = None

    @property
    def endpoint(self) -> str:
        return "loopback"

    def open(self) -> None:
        if self.fail_open:
            raise TransportOpenError("loopback configured to refuse connections")
        with self._lock:
            self._open = True
            self._failure = None
        self.open_count += 1

    def close(self) -> None:
        with self._lock:
            if not self._open:
                return
            self._open = False
        self.close_count += 1

    def is_open(self) -> bool:
        return self._open

    def send(self, data: bytes) -> None:
        self._check_usable("send")
        data = bytes(data)
        with self._lock:
            self.sent.append(data)
        if self.responder is not None:
            reply = self.responder(data)
            if reply is not None:
                self._inbox.put(bytes(reply))

    def recv(self, timeout: float) -> Optional[bytes]:
        self._check_usable("recv")
        try:
            item = self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _BROKEN:
            self._check_usable("recv")
            return None
        if item is _CLOSED:
            with self._lock:
                self._open = False
            raise TransportClosed("loopback peer closed")
        return item  # type: ignore[return-value]

    # ---------------- Peer-side controls ----------------
    def inject(self, data: bytes) -> None:
        """Queue an inbound frame as if the peer had sent it."""
        self._inbox.put(bytes(data))

    def remote_close(self) -> None:
        """Simulate a clean close initiated by the peer."""
        self._inbox.put(_CLOSED)

    def break_link(self, reason: str = "link broken") -> None:
        """Simulate an abrupt transport failure; the next send/recv raises TransportIOError."""
        with self._lock:
            self._failure = reason
        # wake a blocked recv()
        self._inbox.put(_BROKEN)

    def _check_usable(self, op: str) -> None:
        with self._lock:
            if self._failure is not None:
                raise TransportIOError(f"loopback {op} failed: {self._failure}")
            if not self._open:
                raise TransportIOError(f"{op} while transport not open")
