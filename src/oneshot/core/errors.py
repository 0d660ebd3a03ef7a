"""Error types raised by the request executor."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of an execution failure."""

    INVALID_REQUEST = "invalid_request"
    PROXY_UNREACHABLE = "proxy_unreachable"
    PROXY_AUTH_FAILED = "proxy_auth_failed"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    DECODE_ERROR = "decode_error"
    CANCELLED = "cancelled"


class ExecutionError(Exception):
    """A request that could not produce a response."""

    def __init__(self, kind: ErrorKind, message: str, url: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"{self.kind.value}: {self.message} ({self.url})"
        return f"{self.kind.value}: {self.message}"
