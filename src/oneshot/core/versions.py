"""HTTP protocol version selection."""

from enum import Enum


class ProtocolVersion(str, Enum):
    """Highest HTTP version a request may use."""

    HTTP_1_1 = "1.1"
    HTTP_2 = "2.0"
    HTTP_3 = "3.0"

    @property
    def label(self) -> str:
        return f"HTTP/{self.value}"

    @property
    def allows_http2(self) -> bool:
        """Whether the transport may negotiate HTTP/2."""
        return self is not ProtocolVersion.HTTP_1_1


def resolve_version(version: str | None) -> ProtocolVersion:
    """Map a free-form version string to a ProtocolVersion.

    Only the exact strings "3.0" and "2.0" select a newer protocol; anything
    else, including None, falls back to HTTP/1.1.
    """
    if version == "3.0":
        return ProtocolVersion.HTTP_3
    if version == "2.0":
        return ProtocolVersion.HTTP_2
    # Default arm: unknown, malformed or missing versions
    return ProtocolVersion.HTTP_1_1
