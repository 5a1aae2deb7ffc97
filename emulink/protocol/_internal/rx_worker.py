# emulink/protocol/_internal/rx_worker.py
from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from emulink.runtime.connection import ConnectionManager


class RxWorker(threading.Thread):
    """Thread that continuously polls the transport through ConnectionManager."""

    def __init__(self, connection: "ConnectionManager"):
        super().__init__(daemon=True, name="emulink-rx")
        self.connection = connection
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                # blocks for at most poll_interval_s inside transport.recv()
                self.connection._pump_rx()
            except Exception:
                self.connection._log.exception(
                    "RX_WORKER_EXCEPTION state=%s",
                    getattr(self.connection, "state", None),
                )
                self._stop_event.wait(0.01)

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()
