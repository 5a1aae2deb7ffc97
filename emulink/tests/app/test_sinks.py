from __future__ import annotations

import logging

from emulink.app.sinks import LoggingInvocationSink
from emulink.interfaces.invocation_sink import InvocationEvent


def test_logging_sink_counts_and_logs(caplog):
    sink = LoggingInvocationSink(logging.getLogger("invocations.test"))

    with caplog.at_level(logging.INFO, logger="invocations.test"):
        sink.on_invocation(InvocationEvent(command_code=7, invocation_id=1, kind="ok", rtt_ms=1.5, response_len=3))
        sink.on_invocation(InvocationEvent(command_code=7, invocation_id=2, kind="timeout", rtt_ms=5000.0,
                                           error="timed out"))

    assert sink.counts == {"ok": 1, "timeout": 1}
    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.INFO, logging.WARNING]
    assert "INVOCATION kind=ok id=1 cmd=7" in caplog.records[0].getMessage()


def test_logging_sink_ignores_events_after_close():
    sink = LoggingInvocationSink()
    sink.close()
    sink.on_invocation(InvocationEvent(command_code=1, invocation_id=1, kind="ok", rtt_ms=0.1))
    assert sink.counts == {}
