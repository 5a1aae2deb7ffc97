# emulink/interfaces/frame_sink.py
from typing import Protocol


class FrameSink(Protocol):
    """Receiver of everything a ConnectionManager observes on the wire."""
    def on_frame(self, data: bytes) -> None: ...
    def on_tick(self) -> None: ...
    def on_disconnect(self, exc: Exception) -> None: ...
