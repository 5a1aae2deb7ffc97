# emulink/runtime/connection.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from emulink.core.errors import ConnectError
from emulink.interfaces.frame_sink import FrameSink
from emulink.protocol._internal.rx_worker import RxWorker
from emulink.protocol.errors import ConnectionLost, NotConnected
from emulink.transport.base import Transport
from emulink.transport.errors import TransportClosed, TransportError

from .state import ConnectionState


def _noop() -> None:
    return None


class ConnectionManager:
    """
    Owns one transport and its lifecycle.

    Responsibilities:
      - open/close the transport and run the RX worker while OPEN
      - forward inbound messages, unmodified and in order, to the FrameSink
      - fire on_open / on_close / on_error (zero-argument, replaceable hooks)
      - turn transport failures into a terminal FAILED state

    One instance serves one connection; CLOSED and FAILED are final.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        sink: Optional[FrameSink] = None,
        poll_interval_s: float = 0.05,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.sink = sink
        self.poll_interval_s = float(poll_interval_s)

        self.on_open: Callable[[], None] = _noop
        self.on_close: Callable[[], None] = _noop
        self.on_error: Callable[[], None] = _noop

        self.last_error: Optional[str] = None

        self._log = logger or logging.getLogger(__name__)
        self._state = ConnectionState.DISCONNECTED
        self._state_lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._rx_thread: Optional[RxWorker] = None

    # ---------------- State ----------------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    @property
    def endpoint(self) -> str:
        return self.transport.endpoint

    # ---------------- Lifecycle ----------------
    def open(self) -> None:
        with self._state_lock:
            if self._state is ConnectionState.OPEN:
                return
            if self._state is not ConnectionState.DISCONNECTED:
                raise RuntimeError(
                    f"connection is {self._state.value}; create a new instance to reconnect"
                )
            self._state = ConnectionState.CONNECTING

        self._log.info("CONNECTING endpoint=%s", self.endpoint)
        try:
            self.transport.open()
        except TransportError as e:
            with self._state_lock:
                self._state = ConnectionState.FAILED
                self.last_error = str(e)
            self._log.error("CONNECT_FAILED endpoint=%s error=%s", self.endpoint, e)
            self._fire("on_error")
            raise ConnectError(
                "Could not open backend connection.",
                hint=str(e),
                details={"endpoint": self.endpoint, "driver": type(self.transport).__name__},
            ) from None

        with self._state_lock:
            aborted = self._state is not ConnectionState.CONNECTING
            if not aborted:
                self._state = ConnectionState.OPEN

        if aborted:
            # close() won the race while the transport was opening
            self._release_transport()
            return

        self._start_rx_thread()
        self._log.info("CONNECTION_OPEN endpoint=%s", self.endpoint)
        self._fire("on_open")

    def close(self) -> None:
        with self._state_lock:
            prev = self._state
            if prev in (ConnectionState.CLOSED, ConnectionState.FAILED):
                return
            self._state = ConnectionState.CLOSED

        if prev is ConnectionState.OPEN:
            self._stop_rx_thread()
            self._release_transport()

        self._log.info("CONNECTION_CLOSED endpoint=%s", self.endpoint)
        self._notify_disconnect(ConnectionLost("closed by client"))
        self._fire("on_close")

    # ---------------- I/O ----------------
    def send(self, data: bytes) -> None:
        state = self._state
        if state is not ConnectionState.OPEN:
            raise NotConnected(state.value)

        try:
            with self._send_lock:
                self.transport.send(data)
        except TransportClosed as e:
            self._handle_remote_close(str(e))
            raise ConnectionLost(str(e)) from None
        except TransportError as e:
            self._fail(e)
            raise ConnectionLost(str(e)) from None

    def _pump_rx(self) -> None:
        """One RX iteration: wait up to poll_interval_s for a message, then tick the sink."""
        if self._state is not ConnectionState.OPEN:
            worker = self._rx_thread
            if worker is not None:
                worker.stop()
            return

        try:
            data = self.transport.recv(self.poll_interval_s)
        except TransportClosed as e:
            self._handle_remote_close(str(e))
            return
        except TransportError as e:
            self._fail(e)
            return

        sink = self.sink
        if sink is None:
            return
        if data is not None and self._state is ConnectionState.OPEN:
            sink.on_frame(data)
        sink.on_tick()

    # ---------------- Transitions ----------------
    def _handle_remote_close(self, reason: str) -> None:
        with self._state_lock:
            if self._state is not ConnectionState.OPEN:
                return
            self._state = ConnectionState.CLOSED

        self._stop_rx_thread()
        self._release_transport()
        self._log.warning("CONNECTION_CLOSED_BY_PEER endpoint=%s reason=%s", self.endpoint, reason)
        self._notify_disconnect(ConnectionLost(reason))
        self._fire("on_close")

    def _fail(self, exc: BaseException) -> None:
        with self._state_lock:
            if self._state in (ConnectionState.CLOSED, ConnectionState.FAILED):
                return
            self._state = ConnectionState.FAILED
            self.last_error = str(exc)

        self._stop_rx_thread()
        self._release_transport()
        self._log.error("CONNECTION_FAILED endpoint=%s error=%s", self.endpoint, exc)
        self._notify_disconnect(ConnectionLost(str(exc)))
        self._fire("on_error")

    # ---------------- Internals ----------------
    def _start_rx_thread(self) -> None:
        if self._rx_thread is None or not self._rx_thread.is_alive():
            self._rx_thread = RxWorker(self)
            self._rx_thread.start()
            self._log.info("RX_THREAD_STARTED")

    def _stop_rx_thread(self) -> None:
        worker = self._rx_thread
        if worker is None:
            return
        worker.stop()
        # the worker itself may be the one tearing the connection down
        if worker is not threading.current_thread():
            worker.join(timeout=max(1.0, self.poll_interval_s * 10))
        self._rx_thread = None
        self._log.info("RX_THREAD_STOPPED")

    def _release_transport(self) -> None:
        if not self.transport.is_open():
            return
        try:
            self.transport.close()
        except Exception:
            self._log.exception("TRANSPORT_CLOSE_FAILED endpoint=%s", self.endpoint)

    def _notify_disconnect(self, exc: ConnectionLost) -> None:
        sink = self.sink
        if sink is None:
            return
        try:
            sink.on_disconnect(exc)
        except Exception:
            self._log.exception("ON_DISCONNECT_ERROR")

    def _fire(self, hook: str) -> None:
        cb = getattr(self, hook)
        try:
            cb()
        except Exception:
            self._log.exception("%s_CALLBACK_ERROR", hook.upper())
