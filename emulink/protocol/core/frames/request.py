from __future__ import annotations

from dataclasses import dataclass

from ..codec import check_u32, decode_request, encode_request


@dataclass(frozen=True)
class RequestFrame:
    """Host → backend command frame."""

    command_code: int
    invocation_id: int
    payload: bytes = b""

    def __post_init__(self) -> None:
        check_u32("command_code", self.command_code)
        check_u32("invocation_id", self.invocation_id)

    def encode(self) -> bytes:
        return encode_request(self.command_code, self.invocation_id, self.payload)

    @classmethod
    def decode(cls, data: bytes) -> "RequestFrame":
        command_code, invocation_id, payload = decode_request(data)
        return cls(command_code=command_code, invocation_id=invocation_id, payload=payload)
