"""Trace rendering and the built-in trace sinks."""

import logging

import typer

from .models import RequestSpec
from .protocols import Response, TraceCategory, TraceEvent
from .versions import ProtocolVersion

logger = logging.getLogger(__name__)

PAYLOAD_LABEL = "Received Payload:"

CATEGORY_COLORS = {
    TraceCategory.REQUEST_META: typer.colors.WHITE,
    TraceCategory.REQUEST_HEADER: typer.colors.WHITE,
    TraceCategory.REQUEST_COOKIE: typer.colors.WHITE,
    TraceCategory.REQUEST_BODY: typer.colors.WHITE,
    TraceCategory.RESPONSE_STATUS: typer.colors.YELLOW,
    TraceCategory.RESPONSE_HEADER: typer.colors.MAGENTA,
    TraceCategory.NO_HEADERS: typer.colors.BRIGHT_RED,
    TraceCategory.RESPONSE_RAW: typer.colors.BRIGHT_YELLOW,
    TraceCategory.RESPONSE_BODY: typer.colors.GREEN,
}


def hex_dump(data: bytes) -> str:
    """Render bytes as two-digit uppercase hex values, comma separated."""
    return ", ".join(f"{b:02X}" for b in data)


def render_request(spec: RequestSpec, version: ProtocolVersion) -> list[TraceEvent]:
    """Trace lines describing the outgoing request."""
    events = [
        TraceEvent(TraceCategory.REQUEST_META, f"Request Method: {spec.method} / {version.label}"),
        TraceEvent(TraceCategory.REQUEST_META, f"Url: {spec.url}"),
    ]

    if spec.headers:
        events.append(TraceEvent(TraceCategory.REQUEST_HEADER, "Request Headers:"))
        for name, value in spec.headers.items():
            events.append(TraceEvent(TraceCategory.REQUEST_HEADER, f"  {name}: {value}"))

    if spec.cookies:
        events.append(TraceEvent(TraceCategory.REQUEST_COOKIE, "Request Cookies:"))
        for name, value in spec.cookies.items():
            events.append(TraceEvent(TraceCategory.REQUEST_COOKIE, f"  {name}={value}"))

    if spec.has_body:
        events.append(TraceEvent(TraceCategory.REQUEST_BODY, f"Request Body: {spec.body}"))

    return events


def render_response(response: Response, raw_output: bool = False) -> list[TraceEvent]:
    """Trace lines describing the received response."""
    status = f"{response.status} {response.reason}".rstrip()
    events = [
        TraceEvent(TraceCategory.RESPONSE_STATUS, f"Response Code: {status} / {response.http_version}"),
    ]

    groups = response.header_groups()
    if groups:
        events.append(TraceEvent(TraceCategory.RESPONSE_HEADER, "Received Headers:"))
        for name, values in groups:
            events.append(TraceEvent(TraceCategory.RESPONSE_HEADER, f"  {name}: {' '.join(values)}"))
    else:
        events.append(TraceEvent(TraceCategory.NO_HEADERS, "No Headers Received"))

    events.append(TraceEvent(TraceCategory.RESPONSE_BODY, PAYLOAD_LABEL))
    if raw_output:
        events.append(TraceEvent(TraceCategory.RESPONSE_RAW, hex_dump(response.content)))
    events.append(TraceEvent(TraceCategory.RESPONSE_BODY, response.text))

    return events


class NullSink:
    """Sink that discards every event."""

    def emit(self, event: TraceEvent) -> None:
        pass


class MemorySink:
    """Sink that keeps events in memory."""

    def __init__(self):
        self.events: list[TraceEvent] = []

    def emit(self, event: TraceEvent) -> None:
        self.events.append(event)

    @property
    def lines(self) -> list[str]:
        return [event.text for event in self.events]

    def by_category(self, category: TraceCategory) -> list[str]:
        """Lines recorded for a single category."""
        return [event.text for event in self.events if event.category == category]


class LoggingSink:
    """Sink that forwards events to a standard library logger."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.INFO):
        self.log = log or logger
        self.level = level

    def emit(self, event: TraceEvent) -> None:
        self.log.log(self.level, event.text, extra={"trace_category": event.category.value})


class EchoSink:
    """Sink that prints colored lines to the terminal."""

    def __init__(self, err: bool = True, color: bool | None = None):
        self.err = err
        self.color = color

    def emit(self, event: TraceEvent) -> None:
        typer.secho(
            event.text,
            fg=CATEGORY_COLORS.get(event.category),
            err=self.err,
            color=self.color,
        )


class MultiSink:
    """Fan out events to several sinks."""

    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def emit(self, event: TraceEvent) -> None:
        for sink in self.sinks:
            try:
                sink.emit(event)
            except Exception as e:
                logger.warning("Trace sink %s failed: %s", type(sink).__name__, e)
