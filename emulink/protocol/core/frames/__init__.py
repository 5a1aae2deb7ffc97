# protocol/core/frames/__init__.py

from .request import RequestFrame
from .response import ResponseFrame

__all__ = [
    "RequestFrame",
    "ResponseFrame",
]
