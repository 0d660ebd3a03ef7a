"""Single-shot HTTP request executor using httpx."""

import asyncio
import logging
import re
import ssl
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from ..config import settings
from .errors import ErrorKind, ExecutionError
from .models import ProxyDescriptor, RequestSpec
from .protocols import Response, TraceEvent, TraceSink
from .trace import NullSink, render_request, render_response
from .versions import ProtocolVersion, resolve_version

logger = logging.getLogger(__name__)

PROXY_AUTH_RE = re.compile(r"\b407\b|auth|password", re.IGNORECASE)


class RequestExecutor:
    """Async HTTP executor that builds an isolated client for every request.

    Nothing is shared between calls, so one executor can serve any number of
    concurrent requests.
    """

    def __init__(
        self,
        sink: TraceSink | None = None,
        default_timeout: float | None = None,
    ):
        self.sink = sink if sink is not None else NullSink()
        if default_timeout is None or default_timeout <= 0:
            default_timeout = settings.default_timeout
        self.default_timeout = default_timeout

    def effective_timeout(self, spec: RequestSpec) -> float:
        """Timeout in seconds; non-positive values fall back to the default."""
        return spec.timeout if spec.timeout > 0 else self.default_timeout

    async def execute(
        self,
        spec: RequestSpec | Mapping[str, Any],
        proxy: ProxyDescriptor | None = None,
    ) -> str:
        """Send one request and return the decoded response body."""
        response = await self.send(spec, proxy)
        return response.text

    async def send(
        self,
        spec: RequestSpec | Mapping[str, Any],
        proxy: ProxyDescriptor | None = None,
    ) -> Response:
        """Send one request and return the captured response.

        Cancelling the awaiting task while the request is in flight raises
        ExecutionError(CANCELLED) rather than CancelledError. This includes
        cancellations issued by an enclosing asyncio.timeout() scope, which
        therefore surface as CANCELLED instead of TimeoutError; use the
        request timeout to bound the call.

        Raises:
            ExecutionError: on any failure; nothing is retried.
        """
        spec = RequestSpec.parse(spec)
        version = resolve_version(spec.version)
        timeout = self.effective_timeout(spec)

        self._emit_all(render_request(spec, version))

        try:
            response = await asyncio.wait_for(
                self._dispatch(spec, version, proxy, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExecutionError(
                ErrorKind.TIMEOUT, f"Request did not complete within {timeout:g}s", url=spec.url
            ) from e
        except asyncio.CancelledError as e:
            raise ExecutionError(ErrorKind.CANCELLED, "Request was cancelled", url=spec.url) from e

        self._emit_all(render_response(response, spec.raw_output))
        return response

    def _build_client(
        self,
        spec: RequestSpec,
        version: ProtocolVersion,
        proxy: ProxyDescriptor | None,
        timeout: float,
    ) -> httpx.AsyncClient:
        """Create a client scoped to a single request."""
        if version is ProtocolVersion.HTTP_3:
            # httpx speaks HTTP/1.1 and HTTP/2 only
            logger.debug("HTTP/3 requested, negotiating HTTP/2 or lower")

        return httpx.AsyncClient(
            http1=True,
            http2=version.allows_http2,
            timeout=httpx.Timeout(timeout),
            follow_redirects=spec.follow_redirects,
            proxy=proxy.to_httpx() if proxy else None,
            trust_env=False,
        )

    async def _dispatch(
        self,
        spec: RequestSpec,
        version: ProtocolVersion,
        proxy: ProxyDescriptor | None,
        timeout: float,
    ) -> Response:
        """Build the client and request, send once and read the full body."""
        try:
            client = self._build_client(spec, version, proxy, timeout)
        except (httpx.InvalidURL, ValueError) as e:
            raise ExecutionError(ErrorKind.INVALID_REQUEST, f"Invalid proxy: {e}", url=spec.url) from e

        async with client:
            try:
                request = client.build_request(
                    spec.method,
                    spec.url,
                    headers=spec.request_headers(),
                    content=spec.content,
                )
            except (httpx.InvalidURL, httpx.UnsupportedProtocol, UnicodeEncodeError, ValueError) as e:
                raise ExecutionError(ErrorKind.INVALID_REQUEST, str(e), url=spec.url) from e

            logger.debug(
                "Sending %s %s (%s ceiling, timeout %gs)", spec.method, spec.url, version.label, timeout
            )
            try:
                resp = await client.send(request)
            except httpx.HTTPError as e:
                raise classify_error(e, spec.url, proxy) from e

            logger.debug("Received %s over %s from %s", resp.status_code, resp.http_version, resp.url)

        if proxy is not None and resp.status_code == 407:
            raise ExecutionError(
                ErrorKind.PROXY_AUTH_FAILED,
                f"Proxy {proxy.host}:{proxy.port} rejected the credentials",
                url=spec.url,
            )

        return Response(
            url=str(resp.url),
            status=resp.status_code,
            content=resp.content,
            headers=[
                (name.decode(resp.headers.encoding), value.decode(resp.headers.encoding))
                for name, value in resp.headers.raw
            ],
            reason=resp.reason_phrase,
            http_version=resp.http_version,
        )

    def _emit_all(self, events: Iterable[TraceEvent]):
        """Send events to the sink; sink failures never fail the request."""
        for event in events:
            try:
                self.sink.emit(event)
            except Exception as e:
                logger.warning("Trace sink failed on %s event: %s", event.category.value, e)


def classify_error(
    error: httpx.HTTPError,
    url: str,
    proxy: ProxyDescriptor | None = None,
) -> ExecutionError:
    """Map an httpx exception to an ExecutionError."""
    message = str(error) or type(error).__name__

    if isinstance(error, httpx.TimeoutException):
        kind = ErrorKind.TIMEOUT
    elif isinstance(error, httpx.ProxyError):
        if PROXY_AUTH_RE.search(message):
            kind = ErrorKind.PROXY_AUTH_FAILED
        else:
            kind = ErrorKind.PROXY_UNREACHABLE
    elif isinstance(error, httpx.ConnectError) and proxy is not None and not _caused_by_tls(error):
        # TLS errors happen after the tunnel is up; anything earlier is the proxy
        kind = ErrorKind.PROXY_UNREACHABLE
    elif isinstance(error, httpx.DecodingError):
        kind = ErrorKind.DECODE_ERROR
    elif isinstance(error, (httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        kind = ErrorKind.INVALID_REQUEST
    else:
        kind = ErrorKind.NETWORK_ERROR

    return ExecutionError(kind, message, url=url)


def _caused_by_tls(error: BaseException) -> bool:
    """Whether an ssl.SSLError appears in the exception chain."""
    seen = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False
