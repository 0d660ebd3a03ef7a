"""Core executor components."""

from .errors import ErrorKind, ExecutionError
from .executor import RequestExecutor
from .models import ProxyDescriptor, RequestSpec
from .protocols import Response, TraceCategory, TraceEvent, TraceSink
from .trace import EchoSink, LoggingSink, MemorySink, MultiSink, NullSink
from .versions import ProtocolVersion, resolve_version

__all__ = [
    "EchoSink",
    "ErrorKind",
    "ExecutionError",
    "LoggingSink",
    "MemorySink",
    "MultiSink",
    "NullSink",
    "ProtocolVersion",
    "ProxyDescriptor",
    "RequestExecutor",
    "RequestSpec",
    "Response",
    "TraceCategory",
    "TraceEvent",
    "TraceSink",
    "resolve_version",
]
