from __future__ import annotations

from dataclasses import dataclass

from ..codec import check_u32, decode_response_id, encode_response, response_payload


@dataclass(frozen=True)
class ResponseFrame:
    """Backend → host reply, correlated by invocation_id."""

    invocation_id: int
    payload: bytes = b""

    def __post_init__(self) -> None:
        check_u32("invocation_id", self.invocation_id)

    def encode(self) -> bytes:
        return encode_response(self.invocation_id, self.payload)

    @classmethod
    def decode(cls, data: bytes) -> "ResponseFrame":
        return cls(invocation_id=decode_response_id(data), payload=response_payload(data))
