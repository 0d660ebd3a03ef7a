"""Protocol definitions and records shared by executor components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


@dataclass(frozen=True)
class Response:
    """HTTP response container."""

    url: str
    status: int
    content: bytes
    headers: list[tuple[str, str]] = field(default_factory=list)
    reason: str = ""
    http_version: str = "HTTP/1.1"

    @property
    def text(self) -> str:
        """Decode content as UTF-8."""
        return self.content.decode("utf-8", errors="replace")

    def header_groups(self) -> list[tuple[str, list[str]]]:
        """Group repeated header names, keeping first-seen order."""
        groups: dict[str, tuple[str, list[str]]] = {}
        for name, value in self.headers:
            key = name.lower()
            if key not in groups:
                groups[key] = (name, [])
            groups[key][1].append(value)
        return list(groups.values())


class TraceCategory(str, Enum):
    """Semantic category of a trace line."""

    REQUEST_META = "request-meta"
    REQUEST_HEADER = "request-header"
    REQUEST_COOKIE = "request-cookie"
    REQUEST_BODY = "request-body"
    RESPONSE_STATUS = "response-status"
    RESPONSE_HEADER = "response-header"
    RESPONSE_RAW = "response-raw"
    RESPONSE_BODY = "response-body"
    NO_HEADERS = "no-headers-marker"


@dataclass(frozen=True)
class TraceEvent:
    """One annotated line of a request/response trace."""

    category: TraceCategory
    text: str

    def to_dict(self) -> dict:
        return {"category": self.category.value, "text": self.text}


class TraceSink(Protocol):
    """Protocol for trace event consumers."""

    def emit(self, event: TraceEvent) -> None:
        """Consume a single trace event."""
        ...
