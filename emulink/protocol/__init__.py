# protocol/__init__.py

from .core import RequestFrame, ResponseFrame
from .dispatcher import CommandDispatcher
from .errors import (
    ConnectionLost,
    DuplicateInvocation,
    InvalidArgument,
    InvocationTimedOut,
    MalformedFrame,
    NotConnected,
    ProtocolError,
    TooManyPending,
    UnknownInvocation,
)

__all__ = [
    "RequestFrame", "ResponseFrame",
    "CommandDispatcher",
    "ProtocolError", "NotConnected", "InvalidArgument", "MalformedFrame",
    "UnknownInvocation", "DuplicateInvocation", "TooManyPending",
    "InvocationTimedOut", "ConnectionLost",
]
