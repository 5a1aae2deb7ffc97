from .frame_sink import FrameSink
from .invocation_sink import InvocationEvent, InvocationSink

__all__ = ["FrameSink", "InvocationEvent", "InvocationSink"]
