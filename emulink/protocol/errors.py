# emulink/protocol/errors.py
from __future__ import annotations

from emulink.core.errors import EmuLinkError


class ProtocolError(EmuLinkError):
    """Base for protocol-level failures (framing/correlation/lifecycle of invocations)."""
    code = "protocol_error"


class NotConnected(ProtocolError):
    code = "not_connected"

    def __init__(self, state: str):
        super().__init__(
            f"connection is not open (state={state})",
            hint="Call open() first; a closed or failed connection must be recreated.",
            details={"state": state},
        )
        self.state = state


class InvalidArgument(ProtocolError, ValueError):
    code = "invalid_argument"

    def __init__(self, field: str, value: object, reason: str = "must be an unsigned 32-bit integer"):
        super().__init__(f"{field}={value!r} {reason}", details={"field": field})
        self.field = field
        self.value = value


class MalformedFrame(ProtocolError):
    code = "malformed_frame"

    def __init__(self, length: int, required: int = 4):
        super().__init__(
            f"frame too short: {length} bytes < {required}",
            details={"length": length, "required": required},
        )
        self.length = length
        self.required = required


class UnknownInvocation(ProtocolError):
    code = "unknown_invocation"

    def __init__(self, invocation_id: int):
        super().__init__(
            f"no pending invocation with id={invocation_id}",
            details={"invocation_id": invocation_id},
        )
        self.invocation_id = invocation_id


class DuplicateInvocation(ProtocolError):
    code = "duplicate_invocation"

    def __init__(self, invocation_id: int):
        super().__init__(
            f"invocation id={invocation_id} is already pending",
            hint="Invocation ids must be unique among outstanding invocations.",
            details={"invocation_id": invocation_id},
        )
        self.invocation_id = invocation_id


class TooManyPending(ProtocolError):
    code = "too_many_pending"

    def __init__(self, limit: int):
        super().__init__(
            f"pending invocation limit reached ({limit})",
            hint="Wait for outstanding invocations or raise max_pending.",
            details={"limit": limit},
        )
        self.limit = limit


class InvocationTimedOut(ProtocolError, TimeoutError):
    code = "invocation_timed_out"

    def __init__(self, invocation_id: int, timeout_s: float):
        super().__init__(
            f"invocation id={invocation_id} timed out after {timeout_s}s",
            details={"invocation_id": invocation_id, "timeout_s": timeout_s},
        )
        self.invocation_id = invocation_id
        self.timeout_s = timeout_s


class ConnectionLost(ProtocolError):
    code = "connection_lost"

    def __init__(self, reason: str = "connection closed"):
        super().__init__(f"connection lost ({reason})", details={"reason": reason})
        self.reason = reason
