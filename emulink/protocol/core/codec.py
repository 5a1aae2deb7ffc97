# emulink/protocol/core/codec.py
"""
Stateless translation between frame fields and wire bytes.

Wire layout (always big-endian, independent of host byte order):

    request:  [u32 command_code][u32 invocation_id][payload ...]
    response: [u32 invocation_id][payload ...]
"""
from __future__ import annotations

import struct
from typing import Tuple

from emulink.protocol.errors import InvalidArgument, MalformedFrame

U32_MAX = 0xFFFFFFFF

_U32 = struct.Struct(">I")
_REQUEST_HEADER = struct.Struct(">II")

RESPONSE_HEADER_SIZE = _U32.size
REQUEST_HEADER_SIZE = _REQUEST_HEADER.size


def check_u32(field: str, value: object) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(field, value, f"must be int, got {type(value).__name__}")
    if not 0 <= value <= U32_MAX:
        raise InvalidArgument(field, value)
    return value


def _as_bytes(payload: object) -> bytes:
    if payload is None:
        return b""
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise InvalidArgument("payload", type(payload).__name__, "must be bytes-like")
    return bytes(payload)


def encode_request(command_code: int, invocation_id: int, payload: bytes = b"") -> bytes:
    """Build a request frame. Raises InvalidArgument on out-of-range fields."""
    header = _REQUEST_HEADER.pack(
        check_u32("command_code", command_code),
        check_u32("invocation_id", invocation_id),
    )
    return header + _as_bytes(payload)


def decode_response_id(data: bytes) -> int:
    """Read the leading invocation id. Raises MalformedFrame if fewer than 4 bytes."""
    if len(data) < RESPONSE_HEADER_SIZE:
        raise MalformedFrame(len(data), RESPONSE_HEADER_SIZE)
    return _U32.unpack_from(data, 0)[0]


def response_payload(data: bytes) -> bytes:
    return bytes(data[RESPONSE_HEADER_SIZE:])


def encode_response(invocation_id: int, payload: bytes = b"") -> bytes:
    return _U32.pack(check_u32("invocation_id", invocation_id)) + _as_bytes(payload)


def decode_request(data: bytes) -> Tuple[int, int, bytes]:
    """Split a request frame into (command_code, invocation_id, payload)."""
    if len(data) < REQUEST_HEADER_SIZE:
        raise MalformedFrame(len(data), REQUEST_HEADER_SIZE)
    command_code, invocation_id = _REQUEST_HEADER.unpack_from(data, 0)
    return command_code, invocation_id, bytes(data[REQUEST_HEADER_SIZE:])
