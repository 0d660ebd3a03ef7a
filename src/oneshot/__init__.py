"""Single-shot HTTP request executor with protocol version control."""

from .core import (
    ErrorKind,
    ExecutionError,
    ProtocolVersion,
    ProxyDescriptor,
    RequestExecutor,
    RequestSpec,
    Response,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "ExecutionError",
    "ProtocolVersion",
    "ProxyDescriptor",
    "RequestExecutor",
    "RequestSpec",
    "Response",
    "__version__",
]
