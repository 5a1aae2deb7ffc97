# emulink/runtime/link.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Optional

from emulink.app.config import LinkConfig
from emulink.interfaces.invocation_sink import InvocationSink
from emulink.protocol.core.codec import U32_MAX
from emulink.protocol.dispatcher import DEFAULT_TIMEOUT, CommandDispatcher
from emulink.protocol.errors import ProtocolError, TooManyPending
from emulink.transport.base import Transport
from emulink.transport.factory import TransportFactory
from emulink.transport.registry import TransportDriverRegistry

from .connection import ConnectionManager
from .state import ConnectionState, LinkStatus


class ProtocolClient:
    """
    User-facing API: one backend connection, many correlated invocations.

        with ProtocolClient.from_config(LinkConfig()) as client:
            reply = client.call(command_code=7, invocation_id=client.next_invocation_id())
    """

    def __init__(
        self,
        transport: Transport,
        *,
        invoke_timeout_s: Optional[float] = 5.0,
        poll_interval_s: float = 0.05,
        max_pending: Optional[int] = None,
        sink: Optional[InvocationSink] = None,
        on_protocol_error: Optional[Callable[[ProtocolError], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._log = logger or logging.getLogger(__name__)
        self.connection = ConnectionManager(transport, poll_interval_s=poll_interval_s, logger=self._log)
        self.dispatcher = CommandDispatcher(
            self.connection,
            default_timeout_s=invoke_timeout_s,
            max_pending=max_pending,
            sink=sink,
            on_protocol_error=on_protocol_error,
            logger=self._log,
        )
        self.connection.sink = self.dispatcher

        self._id_lock = threading.Lock()
        self._next_id = 1

    @classmethod
    def from_config(
        cls,
        config: LinkConfig,
        *,
        drivers: Optional[TransportDriverRegistry] = None,
        sink: Optional[InvocationSink] = None,
        on_protocol_error: Optional[Callable[[ProtocolError], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "ProtocolClient":
        transport = TransportFactory(drivers).create(config)
        return cls(
            transport,
            invoke_timeout_s=config.invoke_timeout_s,
            poll_interval_s=config.poll_interval_s,
            max_pending=config.max_pending,
            sink=sink,
            on_protocol_error=on_protocol_error,
            logger=logger,
        )

    # ---------------- Lifecycle ----------------
    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    def open(self) -> None:
        self.connection.open()

    def close(self) -> None:
        self.connection.close()

    @property
    def on_open(self) -> Callable[[], None]:
        return self.connection.on_open

    @on_open.setter
    def on_open(self, cb: Callable[[], None]) -> None:
        self.connection.on_open = cb

    @property
    def on_close(self) -> Callable[[], None]:
        return self.connection.on_close

    @on_close.setter
    def on_close(self, cb: Callable[[], None]) -> None:
        self.connection.on_close = cb

    @property
    def on_error(self) -> Callable[[], None]:
        return self.connection.on_error

    @on_error.setter
    def on_error(self, cb: Callable[[], None]) -> None:
        self.connection.on_error = cb

    # ---------------- Command API ----------------
    def send_raw(self, data: bytes) -> None:
        """Send bytes as-is, without correlation."""
        self.dispatcher.send_raw(data)

    def invoke(
        self,
        command_code: int,
        invocation_id: int,
        payload: bytes = b"",
        *,
        timeout_s: Any = DEFAULT_TIMEOUT,
    ) -> "Future[bytes]":
        return self.dispatcher.invoke(command_code, invocation_id, payload, timeout_s=timeout_s)

    def call(
        self,
        command_code: int,
        invocation_id: int,
        payload: bytes = b"",
        *,
        timeout_s: Any = DEFAULT_TIMEOUT,
    ) -> bytes:
        """Blocking invoke(); raises the same errors the future would carry."""
        return self.invoke(command_code, invocation_id, payload, timeout_s=timeout_s).result()

    def next_invocation_id(self) -> int:
        """Allocate an id in 1..0xFFFFFFFF that is not currently pending."""
        with self._id_lock:
            for _ in range(self.dispatcher.pending_count() + 1):
                candidate = self._next_id
                self._next_id = candidate % U32_MAX + 1
                if not self.dispatcher.is_pending(candidate):
                    return candidate
        raise TooManyPending(self.dispatcher.pending_count())

    # ---------------- Diagnostics ----------------
    def pending_count(self) -> int:
        return self.dispatcher.pending_count()

    def status(self) -> LinkStatus:
        d = self.dispatcher
        return LinkStatus(
            state=self.connection.state,
            endpoint=self.connection.endpoint,
            pending=d.pending_count(),
            frames_sent=d.frames_sent,
            frames_received=d.frames_received,
            malformed_frames=d.malformed_frames,
            unknown_invocations=d.unknown_invocations,
            timed_out=d.timed_out,
            last_error=self.connection.last_error,
        )

    def __enter__(self) -> "ProtocolClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
