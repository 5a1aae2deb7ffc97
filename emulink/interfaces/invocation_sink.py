# emulink/interfaces/invocation_sink.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True, slots=True)
class InvocationEvent:
    """
    Telemetry event emitted once per finished invocation.
    Keep this small + stable.
    """
    command_code: int
    invocation_id: int
    kind: str                   # "ok" | "timeout" | "connection_lost" | "cancelled" | "error"
    rtt_ms: float
    response_len: Optional[int] = None
    error: Optional[str] = None


class InvocationSink(Protocol):
    def on_invocation(self, event: InvocationEvent) -> None: ...
    def close(self) -> None: ...
