from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class Transport(ABC):
    """
    Abstract message-oriented duplex transport (WebSocket, loopback, etc.).

    Contract:
      - open()/close() manage the underlying connection; close() must be safe to repeat.
      - is_open() reports whether close() still has anything to release.
      - send(data) transmits one complete binary message.
      - recv(timeout) returns one complete message, or None if nothing arrived
        within `timeout` seconds.
      - send/recv raise TransportClosed when the peer closed cleanly and
        TransportIOError on any other failure; open() raises TransportOpenError.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def send(self, data: bytes) -> None: ...

    @abstractmethod
    def recv(self, timeout: float) -> Optional[bytes]: ...

    @abstractmethod
    def is_open(self) -> bool: ...

    @property
    def endpoint(self) -> str:
        """Human-readable peer address (for logs and status)."""
        return type(self).__name__

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
