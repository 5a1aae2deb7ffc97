from __future__ import annotations

import pytest

from emulink.protocol.core.codec import encode_request, encode_response
from emulink.transport.errors import TransportClosed, TransportIOError, TransportOpenError
from emulink.transport.loopback import LoopbackTransport, echo_responder


def test_echo_responder_mirrors_id_and_payload():
    assert echo_responder(encode_request(7, 42, b"hi")) == encode_response(42, b"hi")
    assert echo_responder(b"\x00\x01") is None


def test_send_records_and_echo_replies():
    t = LoopbackTransport(echo=True)
    t.open()

    t.send(encode_request(1, 2, b"x"))

    assert t.sent == [encode_request(1, 2, b"x")]
    assert t.recv(0.1) == encode_response(2, b"x")
    assert t.recv(0.01) is None


def test_inject_delivers_in_order():
    t = LoopbackTransport()
    t.open()
    t.inject(b"a")
    t.inject(b"b")
    assert [t.recv(0.1), t.recv(0.1)] == [b"a", b"b"]


def test_not_open_raises():
    t = LoopbackTransport()
    with pytest.raises(TransportIOError):
        t.send(b"x")
    with pytest.raises(TransportIOError):
        t.recv(0.01)


def test_fail_open():
    with pytest.raises(TransportOpenError):
        LoopbackTransport(fail_open=True).open()


def test_remote_close_raises_transport_closed():
    t = LoopbackTransport()
    t.open()
    t.remote_close()
    with pytest.raises(TransportClosed):
        t.recv(0.1)
    assert t.is_open() is False


def test_break_link_fails_send_and_recv():
    t = LoopbackTransport()
    t.open()
    t.break_link("cable pulled")
    with pytest.raises(TransportIOError):
        t.recv(0.1)
    with pytest.raises(TransportIOError):
        t.send(b"x")


def test_close_counts_once():
    t = LoopbackTransport()
    t.open()
    t.close()
    t.close()
    assert t.close_count == 1
