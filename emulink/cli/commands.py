# emulink/cli/commands.py
from __future__ import annotations

import argparse
from typing import Optional

from emulink.app.config import LinkConfig, load_config
from emulink.app.sinks import LoggingInvocationSink
from emulink.protocol.dispatcher import DEFAULT_TIMEOUT
from emulink.protocol.errors import ProtocolError
from emulink.runtime.link import ProtocolClient
from emulink.transport.registry import TransportDriverRegistry


def resolve_config(args: argparse.Namespace) -> LinkConfig:
    config = load_config(args.config) if args.config else LinkConfig()
    return config.with_overrides(url=args.url, driver=args.driver)


def print_protocol_warning(exc: ProtocolError) -> None:
    print(f"WARN: {exc.message}")


# ---------------- Commands ----------------

def cmd_config(config: LinkConfig) -> int:
    for key, value in config.as_dict().items():
        print(f"{key}: {value!r}")
    return 0


def cmd_invoke(
    config: LinkConfig,
    *,
    command_code: int,
    invocation_id: Optional[int],
    payload: bytes,
    timeout_s: Optional[float] = None,
    trace: bool = False,
    drivers: Optional[TransportDriverRegistry] = None,
) -> int:
    sink = LoggingInvocationSink() if trace else None
    client = ProtocolClient.from_config(
        config,
        drivers=drivers,
        sink=sink,
        on_protocol_error=print_protocol_warning,
    )

    try:
        with client:
            if invocation_id is None:
                invocation_id = client.next_invocation_id()
            reply = client.call(
                command_code,
                invocation_id,
                payload,
                timeout_s=DEFAULT_TIMEOUT if timeout_s is None else timeout_s,
            )
    finally:
        if sink is not None:
            sink.close()

    print(f"OK id={invocation_id} len={len(reply)}")
    print(reply.hex() if reply else "-")
    return 0
