"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpcodec import CodecConfig
from httpcodec.core import Connection


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /api/users?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + b"Content-Length: %d\r\n" % len(body)
        + b"Cookie: session=abc%20123; theme=dark\r\n"
        b"Accept-Encoding: gzip, br;q=1\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def config() -> CodecConfig:
    """Default test configuration."""
    return CodecConfig(log_level="WARNING")


@pytest.fixture
def socket_pair() -> Generator[Tuple[Connection, socket.socket], None, None]:
    """
    A connected (server Connection, client socket) pair.

    The client side gets a timeout so a broken test fails instead of
    hanging.
    """
    server_sock, client_sock = socket.socketpair()
    client_sock.settimeout(5.0)
    connection = Connection(socket=server_sock, address=("127.0.0.1", 54321))

    yield connection, client_sock

    connection.close()
    client_sock.close()


def read_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


class FakeSocket:
    """
    In-memory stand-in for a socket.

    Serves `incoming` to recv() one chunk at a time and records sendall().
    Set `fail_send` to make sendall() raise.
    """

    def __init__(self, incoming: bytes = b"", fail_send: bool = False):
        self.incoming = incoming
        self.sent = []
        self.recv_sizes = []
        self.fail_send = fail_send
        self.closed = False

    def setblocking(self, flag):
        pass

    def settimeout(self, value):
        pass

    def recv(self, size: int) -> bytes:
        self.recv_sizes.append(size)
        data, self.incoming = self.incoming[:size], self.incoming[size:]
        return data

    def sendall(self, data: bytes):
        if self.fail_send:
            raise BrokenPipeError("peer went away")
        self.sent.append(bytes(data))

    def shutdown(self, how):
        pass

    def close(self):
        self.closed = True
