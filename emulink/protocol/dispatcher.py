# emulink/protocol/dispatcher.py
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Optional, Protocol as TypingProtocol

from emulink.interfaces.invocation_sink import InvocationEvent, InvocationSink

from .core import decode_response_id, encode_request, response_payload
from .errors import (
    ConnectionLost,
    InvocationTimedOut,
    MalformedFrame,
    NotConnected,
    ProtocolError,
    UnknownInvocation,
)
from ._internal.pending_invocation import PendingInvocation
from ._internal.registry import PendingRegistry

DEFAULT_TIMEOUT: Any = object()


class FrameSender(TypingProtocol):
    """Minimal send interface for CommandDispatcher."""
    def send(self, data: bytes) -> None: ...


class CommandDispatcher:
    """
    Correlates request frames with their responses.

    Sends through a FrameSender (normally the ConnectionManager) and receives
    inbound frames as its FrameSink.
    """

    def __init__(
        self,
        sender: FrameSender,
        *,
        default_timeout_s: Optional[float] = 5.0,
        max_pending: Optional[int] = None,
        sink: Optional[InvocationSink] = None,
        on_protocol_error: Optional[Callable[[ProtocolError], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.sender = sender
        self.default_timeout_s = default_timeout_s
        self.on_protocol_error = on_protocol_error

        self._log = logger or logging.getLogger(__name__)
        self._sink = sink
        self._registry = PendingRegistry(max_pending=max_pending)

        self._stats_lock = threading.Lock()
        self.frames_sent = 0
        self.frames_received = 0
        self.malformed_frames = 0
        self.unknown_invocations = 0
        self.timed_out = 0

    # ---------------- Command API ----------------
    def invoke(
        self,
        command_code: int,
        invocation_id: int,
        payload: bytes = b"",
        *,
        timeout_s: Any = DEFAULT_TIMEOUT,
    ) -> "Future[bytes]":
        raw = encode_request(command_code, invocation_id, payload)

        if timeout_s is DEFAULT_TIMEOUT:
            timeout_s = self.default_timeout_s
        pending = PendingInvocation(invocation_id, command_code, timeout_s)

        self._registry.register(invocation_id, pending)
        pending.add_done_callback(lambda fut: self._on_done(pending, fut))

        try:
            self.sender.send(raw)
        except Exception as e:
            self._registry.discard(invocation_id, pending)
            pending.fail(e)
            self._log.warning("INVOKE_SEND_FAILED id=%d cmd=%d error=%s", invocation_id, command_code, e)
            raise

        self._count("frames_sent")
        self._log.debug(
            "INVOKE_SENT id=%d cmd=%d len=%d pending=%d",
            invocation_id, command_code, len(raw), self._registry.count(),
        )
        return pending.future

    def send_raw(self, data: bytes) -> None:
        self.sender.send(bytes(data))
        self._count("frames_sent")

    def pending_count(self) -> int:
        return self._registry.count()

    def is_pending(self, invocation_id: int) -> bool:
        return invocation_id in self._registry

    # ---------------- FrameSink ----------------
    def on_frame(self, data: bytes) -> None:
        self._count("frames_received")
        try:
            invocation_id = decode_response_id(data)
        except MalformedFrame as e:
            self._count("malformed_frames")
            self._log.warning("FRAME_MALFORMED len=%d", len(data))
            self._report(e)
            return

        try:
            self._registry.resolve(invocation_id, response_payload(data))
        except UnknownInvocation as e:
            self._count("unknown_invocations")
            self._log.warning(
                "FRAME_UNKNOWN_INVOCATION id=%d len=%d pending=%d",
                invocation_id, len(data), self._registry.count(),
            )
            self._report(e)

    def on_tick(self) -> None:
        expired = self._registry.pop_expired(time.perf_counter())
        for pending in expired:
            self._count("timed_out")
            self._log.warning(
                "INVOKE_TIMEOUT id=%d cmd=%d timeout_s=%s",
                pending.invocation_id, pending.command_code, pending.timeout_s,
            )
            pending.fail(InvocationTimedOut(pending.invocation_id, pending.timeout_s or 0.0))

    def on_disconnect(self, exc: Exception) -> None:
        lost = exc if isinstance(exc, ConnectionLost) else ConnectionLost(str(exc))
        n = self._registry.fail_all(lost)
        if n:
            self._log.warning("PENDING_REJECTED count=%d reason=%s", n, lost.reason)

    # ---------------- Internals ----------------
    def _report(self, exc: ProtocolError) -> None:
        cb = self.on_protocol_error
        if cb is None:
            return
        try:
            cb(exc)
        except Exception:
            self._log.exception("ON_PROTOCOL_ERROR_CALLBACK_ERROR")

    def _count(self, name: str) -> None:
        with self._stats_lock:
            setattr(self, name, getattr(self, name) + 1)

    def _on_done(self, pending: PendingInvocation, fut: "Future[bytes]") -> None:
        if fut.cancelled():
            # caller gave up; free the slot so a late response is reported as unknown
            self._registry.discard(pending.invocation_id, pending)

        if self._sink is None:
            return

        rtt_ms = (time.perf_counter() - pending.created_at) * 1000.0
        response_len = None
        error = None
        if fut.cancelled():
            kind = "cancelled"
        else:
            exc = fut.exception()
            if exc is None:
                kind = "ok"
                response_len = len(fut.result())
            elif isinstance(exc, InvocationTimedOut):
                kind = "timeout"
            elif isinstance(exc, (ConnectionLost, NotConnected)):
                kind = "connection_lost"
            else:
                kind = "error"
            if exc is not None:
                error = str(exc)

        try:
            self._sink.on_invocation(
                InvocationEvent(
                    command_code=pending.command_code,
                    invocation_id=pending.invocation_id,
                    kind=kind,
                    rtt_ms=rtt_ms,
                    response_len=response_len,
                    error=error,
                )
            )
        except Exception:
            self._log.exception("INVOCATION_SINK_ERROR id=%d", pending.invocation_id)
