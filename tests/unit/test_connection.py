"""
Unit tests for the connection handle and responding over it.
"""

import gzip

import pytest

from httpcodec.config import CodecConfig
from httpcodec.core.connection import Connection, ConnectionState
from httpcodec.http.compression import BodyEncoding
from httpcodec.http.errors import AlreadyRespondedError, ConnectionClosedError
from httpcodec.http.request import HTTPRequest, Method, RequestParser
from httpcodec.http.response import HTTPResponse, ok

from conftest import FakeSocket, read_all


class TestConnection:
    """Tests for Connection."""

    def test_defaults(self):
        """Test a freshly wrapped socket."""
        connection = Connection(socket=FakeSocket())

        assert connection.state is ConnectionState.NEW
        assert connection.buffer_size == 2048
        assert len(connection.id) == 8
        assert connection.client_ip == ""
        assert not connection.closed

    def test_from_config(self):
        """Test that read settings come from the config."""
        config = CodecConfig(buffer_size=512, timeout=3.0)

        connection = Connection.from_config(FakeSocket(), ("10.0.0.2", 8000), config)

        assert connection.buffer_size == 512
        assert connection.timeout == 3.0
        assert connection.client_ip == "10.0.0.2"
        assert connection.client_port == 8000

    def test_read_chunk(self):
        """Test the single bounded read."""
        sock = FakeSocket(b"abcdef")
        connection = Connection(socket=sock, buffer_size=4)

        assert connection.read_chunk() == b"abcd"
        assert sock.recv_sizes == [4]
        assert connection.state is ConnectionState.PROCESSING

    def test_read_chunk_eof(self):
        """Test that an empty read means the peer closed."""
        with pytest.raises(ConnectionClosedError):
            Connection(socket=FakeSocket()).read_chunk()

    def test_send(self):
        """Test that send writes everything and returns the count."""
        sock = FakeSocket()
        connection = Connection(socket=sock)

        assert connection.send(b"hello") == 5
        assert sock.sent == [b"hello"]

    def test_send_failure_propagates(self):
        """Test that write errors are re-raised."""
        connection = Connection(socket=FakeSocket(fail_send=True))

        with pytest.raises(OSError):
            connection.send(b"x")

    def test_close_idempotent(self):
        """Test closing twice."""
        sock = FakeSocket()
        connection = Connection(socket=sock)

        connection.close()
        connection.close()

        assert sock.closed
        assert connection.closed

    def test_context_manager(self):
        """Test that leaving the block closes the connection."""
        sock = FakeSocket()

        with Connection(socket=sock) as connection:
            assert not connection.closed

        assert sock.closed

    def test_real_socket_round_trip(self, socket_pair):
        """Test read and send over a socketpair."""
        connection, client = socket_pair

        client.sendall(b"ping")
        assert connection.read_chunk() == b"ping"

        connection.send(b"pong")
        connection.close()
        assert read_all(client) == b"pong"


class TestRespond:
    """Tests for HTTPRequest.respond."""

    def test_respond_writes_serialized_response(self, socket_pair):
        """Test a full read, respond, close exchange."""
        connection, client = socket_pair
        client.sendall(b"GET /hello HTTP/1.1\r\nHost: x\r\n\r\n")

        request = RequestParser().read(connection)
        written = request.respond(ok("hi"))
        connection.close()

        data = read_all(client)
        assert written == len(data)
        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert data.endswith(b"\r\n\r\nhi")
        assert request.responded

    def test_respond_compressed(self, socket_pair):
        """Test that negotiation applies when responding."""
        connection, client = socket_pair
        client.sendall(b"GET / HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n")

        request = RequestParser().read(connection)
        request.respond(HTTPResponse(body="zipped" * 50).set_body_encoding(BodyEncoding.GZIP))
        connection.close()

        _, _, body = read_all(client).partition(b"\r\n\r\n")
        assert gzip.decompress(body) == b"zipped" * 50

    def test_second_respond_rejected(self):
        """Test that only the first response is written."""
        sock = FakeSocket()
        request = RequestParser().parse(b"GET / HTTP/1.1\r\n\r\n", Connection(socket=sock))

        request.respond(ok("first"))
        with pytest.raises(AlreadyRespondedError):
            request.respond(ok("second"))

        assert len(sock.sent) == 1
        assert sock.sent[0].endswith(b"first")

    def test_respond_without_connection(self):
        """Test a request built without a connection."""
        request = HTTPRequest(method=Method.GET)

        with pytest.raises(ValueError):
            request.respond(ok())

        assert not request.responded

    def test_failed_write_still_counts(self):
        """Test that a failed write propagates and uses up the response."""
        sock = FakeSocket(fail_send=True)
        request = RequestParser().parse(b"GET / HTTP/1.1\r\n\r\n", Connection(socket=sock))

        with pytest.raises(OSError):
            request.respond(ok())

        assert request.responded
        with pytest.raises(AlreadyRespondedError):
            request.respond(ok())

    def test_head_response_has_no_body(self):
        """Test HEAD over a connection."""
        sock = FakeSocket()
        request = RequestParser().parse(b"HEAD / HTTP/1.1\r\n\r\n", Connection(socket=sock))

        request.respond(ok("body"))

        assert sock.sent[0].endswith(b"Content-Length: 4\r\nContent-Type: text/plain;charset=utf-8\r\n\r\n")

    def test_respond_with_int_status(self):
        """Test responding with a response built from a plain int status."""
        sock = FakeSocket()
        request = RequestParser().parse(b"GET / HTTP/1.1\r\n\r\n", Connection(socket=sock))

        request.respond(HTTPResponse(status=204, body="dropped"))

        assert sock.sent == [b"HTTP/1.1 204 No Content\r\nContent-Length: 7\r\n\r\n"]
