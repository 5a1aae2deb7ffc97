# emulink/app/sinks.py
from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Optional

from emulink.interfaces.invocation_sink import InvocationEvent, InvocationSink


class LoggingInvocationSink(InvocationSink):
    """
    Writes one log line per finished invocation and keeps per-kind counts.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, level: int = logging.INFO):
        self._log = logger or logging.getLogger("invocations")
        self._level = level
        self._lock = Lock()
        self._counts: Dict[str, int] = {}
        self._closed = False

    @property
    def counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def on_invocation(self, event: InvocationEvent) -> None:
        with self._lock:
            if self._closed:
                return
            self._counts[event.kind] = self._counts.get(event.kind, 0) + 1

        level = self._level if event.kind == "ok" else max(self._level, logging.WARNING)
        self._log.log(
            level,
            "INVOCATION kind=%s id=%d cmd=%d rtt_ms=%.2f len=%s error=%s",
            event.kind,
            event.invocation_id,
            event.command_code,
            event.rtt_ms,
            event.response_len if event.response_len is not None else "-",
            event.error or "-",
        )

    def close(self) -> None:
        with self._lock:
            self._closed = True
