# emulink/runtime/state.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConnectionState(str, Enum):
    """
    DISCONNECTED -> CONNECTING -> OPEN -> CLOSED | FAILED

    CLOSED and FAILED are terminal: a new instance is needed to reconnect.
    """
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass(frozen=True)
class LinkStatus:
    """
    A snapshot of the link, safe to share across threads.
    """
    state: ConnectionState
    endpoint: str
    pending: int
    frames_sent: int = 0
    frames_received: int = 0
    malformed_frames: int = 0
    unknown_invocations: int = 0
    timed_out: int = 0
    last_error: Optional[str] = None
