# protocol/core/__init__.py

from .codec import (
    decode_request,
    decode_response_id,
    encode_request,
    encode_response,
    response_payload,
)
from .frames import RequestFrame, ResponseFrame

__all__ = [
    "encode_request", "decode_response_id", "response_payload",
    "encode_response", "decode_request",
    "RequestFrame", "ResponseFrame",
]
