"""Shared fixtures."""

import asyncio
import socket

import pytest

from oneshot.core import MemorySink, RequestExecutor


class SilentServer:
    """TCP server that accepts connections and never answers."""

    def __init__(self):
        self.url = ""
        self.connected = asyncio.Event()
        self.disconnected = asyncio.Event()

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.connected.set()
        # Read until the client closes its side
        await reader.read()
        self.disconnected.set()
        writer.close()


@pytest.fixture
async def silent_server():
    server = SilentServer()
    srv = await asyncio.start_server(server.handle, "127.0.0.1", 0)
    port = srv.sockets[0].getsockname()[1]
    server.url = f"http://127.0.0.1:{port}/slow"
    try:
        yield server
    finally:
        srv.close()


@pytest.fixture
def closed_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def executor(sink):
    return RequestExecutor(sink=sink)


class PlaintextTunnelProxy:
    """CONNECT proxy that opens the tunnel, then answers TLS with plain text."""

    def __init__(self):
        self.port = 0
        self.tunnels = 0

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        await reader.readuntil(b"\r\n\r\n")
        self.tunnels += 1
        writer.write(b"HTTP/1.1 200 Connection established\r\n\r\n")
        await writer.drain()
        # Wait for the ClientHello, then reply with something that is not TLS
        await reader.read(1024)
        writer.write(b"HTTP/1.1 400 Bad Request\r\n\r\n")
        await writer.drain()
        writer.close()


@pytest.fixture
async def tunnel_proxy():
    proxy = PlaintextTunnelProxy()
    srv = await asyncio.start_server(proxy.handle, "127.0.0.1", 0)
    proxy.port = srv.sockets[0].getsockname()[1]
    try:
        yield proxy
    finally:
        srv.close()
