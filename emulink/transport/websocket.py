# emulink/transport/websocket.py
from __future__ import annotations

from typing import Optional

from websockets.exceptions import ConnectionClosedOK, ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from .base import Transport
from .errors import TransportClosed, TransportIOError, TransportOpenError

DEFAULT_URL = "ws://127.0.0.1:15147"


class WebSocketTransport(Transport):
    """
    WebSocket transport implemented via the `websockets` synchronous client.

    Each WebSocket message carries exactly one frame. Text messages are
    forwarded as their UTF-8 bytes.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        open_timeout: float = 5.0,
        max_size: Optional[int] = 2**20,
        close_timeout: float = 1.0,
    ):
        self.url = url
        self.open_timeout = open_timeout
        self.max_size = max_size
        self.close_timeout = close_timeout
        self.ws: Optional[ClientConnection] = None

    @property
    def endpoint(self) -> str:
        return self.url

    def open(self) -> None:
        try:
            self.ws = connect(
                self.url,
                open_timeout=self.open_timeout,
                close_timeout=self.close_timeout,
                max_size=self.max_size,
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            self.ws = None
            raise TransportOpenError(f"could not connect to {self.url!r}: {e}") from None

    def close(self) -> None:
        ws, self.ws = self.ws, None
        if ws is not None:
            ws.close()

    def is_open(self) -> bool:
        return self.ws is not None

    def send(self, data: bytes) -> None:
        # read once; the RX thread may release the connection concurrently
        ws = self.ws
        if ws is None:
            raise TransportIOError("send while transport not open")

        try:
            ws.send(bytes(data))
        except ConnectionClosedOK:
            self.ws = None
            raise TransportClosed(f"{self.url} closed by peer") from None
        except (ConnectionClosed, OSError) as e:
            self.ws = None
            raise TransportIOError(f"WebSocket send failed: {e}") from None

    def recv(self, timeout: float) -> Optional[bytes]:
        ws = self.ws
        if ws is None:
            raise TransportIOError("recv while transport not open")

        try:
            message = ws.recv(timeout=timeout)
        except TimeoutError:
            return None
        except ConnectionClosedOK:
            self.ws = None
            raise TransportClosed(f"{self.url} closed by peer") from None
        except (ConnectionClosed, OSError) as e:
            self.ws = None
            raise TransportIOError(f"WebSocket recv failed: {e}") from None

        if isinstance(message, str):
            return message.encode("utf-8")
        return bytes(message)
