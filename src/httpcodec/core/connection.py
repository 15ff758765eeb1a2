"""
=============================================================================
CONNECTION HANDLE
=============================================================================

Wraps an accepted client socket with the two blocking operations the
codec needs: one bounded read and one full write.

Accepting sockets is someone else's job. Whatever runs the listener
hands each accepted (socket, address) pair to Connection and passes
that to RequestParser.read().

=============================================================================
ONE READ, ONE WRITE
=============================================================================

    Client                         Connection
      │                               │
      │  GET / HTTP/1.1 ...  ───────► │  read_chunk()   one recv(buffer_size)
      │                               │
      │                               │  ... handler builds a response ...
      │                               │
      │ ◄─────── HTTP/1.1 200 OK ...  │  send(data)     sendall()
      │                               │
      │                               │  close()

TCP does not preserve message boundaries, so a single recv() may return
less than the whole request. The codec accepts that: a request must fit
in one read of buffer_size bytes (2048 by default). There is no
chunked decoding and no reassembly of bodies spanning several reads.

=============================================================================
ERRORS
=============================================================================

- recv() returning b"" means the peer closed before sending anything:
  ConnectionClosedError.
- Any other socket failure (OSError) propagates unchanged. The codec never
  retries.

=============================================================================
"""

import logging
import socket
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..http.errors import ConnectionClosedError


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response exchange."""
    NEW = "new"              # Accepted, nothing read yet
    READING = "reading"      # Inside recv()
    PROCESSING = "processing"  # Request read, waiting for a response
    WRITING = "writing"      # Inside sendall()
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    A client socket plus its peer address.

    Attributes:
        socket: The accepted client socket (blocking).
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current ConnectionState.
        buffer_size: Bytes requested by the single read.
        timeout: Socket timeout in seconds, or None to block indefinitely.
    """

    socket: socket.socket
    address: tuple[str, int] = ("", 0)

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW

    buffer_size: int = 2048
    timeout: Optional[float] = None

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @classmethod
    def from_config(cls, sock: socket.socket, address: tuple[str, int], config) -> "Connection":
        """Wrap an accepted socket with the read settings of a CodecConfig."""
        return cls(
            socket=sock,
            address=address,
            buffer_size=config.buffer_size,
            timeout=config.timeout,
        )

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_chunk(self) -> bytes:
        """
        Perform the one bounded read.

        Returns:
            Between 1 and buffer_size bytes.

        Raises:
            ConnectionClosedError: If the peer closed without sending.
            OSError: On any socket failure.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)

        if not data:
            logger.debug(f"[{self.id}] Peer closed before sending a request")
            raise ConnectionClosedError(f"Connection {self.id} closed by peer")

        self.state = ConnectionState.PROCESSING
        logger.debug(f"[{self.id}] Read {len(data)} bytes from {self.client_ip}")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> int:
        """
        Write all of data to the client.

        Returns:
            Number of bytes written (always len(data)).

        Raises:
            OSError: If the write fails; logged, then re-raised.
        """
        self.state = ConnectionState.WRITING

        try:
            # sendall() loops until every byte is out or the socket fails
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            raise

        self.state = ConnectionState.PROCESSING
        return len(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """Shut down the write side and release the socket. Idempotent."""
        if self.state == ConnectionState.CLOSED:
            return

        try:
            # Sends FIN so the client sees end-of-response
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        self.socket.close()
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
