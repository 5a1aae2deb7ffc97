from __future__ import annotations

import pytest

from emulink.protocol.core.frames import RequestFrame, ResponseFrame
from emulink.protocol.errors import InvalidArgument, MalformedFrame


def test_request_frame_encode_matches_wire_layout():
    frame = RequestFrame(command_code=3, invocation_id=9, payload=b"\xAA")
    assert frame.encode() == b"\x00\x00\x00\x03\x00\x00\x00\x09\xAA"


def test_request_frame_decode():
    frame = RequestFrame.decode(b"\x00\x00\x00\x03\x00\x00\x00\x09")
    assert frame == RequestFrame(command_code=3, invocation_id=9, payload=b"")


def test_request_frame_validates_fields():
    with pytest.raises(InvalidArgument):
        RequestFrame(command_code=-1, invocation_id=0)


def test_response_frame_decode_and_encode():
    frame = ResponseFrame.decode(b"\x00\x00\x00\x09hi")
    assert frame.invocation_id == 9
    assert frame.payload == b"hi"
    assert frame.encode() == b"\x00\x00\x00\x09hi"


def test_response_frame_decode_short_raises():
    with pytest.raises(MalformedFrame):
        ResponseFrame.decode(b"\x01\x02")
