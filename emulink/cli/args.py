# emulink/cli/args.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional


def u32(value: str) -> int:
    """argparse type: decimal or 0x-prefixed unsigned 32-bit integer."""
    try:
        n = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'") from None
    if not 0 <= n <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"{value} is outside the u32 range")
    return n


def hex_bytes(value: str) -> bytes:
    """argparse type: hex string, spaces allowed ("de ad be ef")."""
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid hex payload '{value}'") from None


def log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emulink")
    parser.add_argument("--config", type=Path, default=None, help="YAML link config file.")
    parser.add_argument("--url", default=None, help="Backend URL (overrides config).")
    parser.add_argument("--driver", default=None, help="Transport driver: websocket | loopback.")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    parser.add_argument("-v", "--verbose", action="count", default=0)

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_invoke = sub.add_parser("invoke", help="Send one command and print the correlated response.")
    p_invoke.add_argument("--command", dest="command_code", type=u32, required=True)
    p_invoke.add_argument("--id", dest="invocation_id", type=u32, default=None,
                          help="Invocation id (default: allocated).")
    p_invoke.add_argument("--payload", type=hex_bytes, default=b"", help="Request payload as hex.")
    p_invoke.add_argument("--timeout", type=float, default=None,
                          help="Seconds to wait for the response (0 = forever).")
    p_invoke.add_argument("--trace", action="store_true", help="Log invocation telemetry.")

    sub.add_parser("config", help="Print the effective link configuration.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
