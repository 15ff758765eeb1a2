"""
Unit tests for HTTP request parsing.
"""

import pytest

from httpcodec.config import CodecConfig
from httpcodec.core.connection import Connection
from httpcodec.http.errors import (
    ConnectionClosedError,
    HeaderParseError,
    HTTPParseError,
    QueryParseError,
    RequestLineError,
)
from httpcodec.http.headers import ConnectionHeader, ConnectionOption, HostHeader, UnknownHeader
from httpcodec.http.mime import Mime
from httpcodec.http.request import (
    HTTPRequest,
    Method,
    RequestParser,
    UnknownMethod,
    UnknownVersion,
    Uri,
    Version,
    method_from_token,
    parse_request,
)

from conftest import FakeSocket


class TestRequestParser:
    """Tests for RequestParser.parse."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        request = RequestParser().parse(sample_get_request)

        assert request.method is Method.GET
        assert request.path == "/api/users"
        assert request.version is Version.HTTP_1_1
        assert request.host == "localhost:8080"

    def test_search_example(self):
        """Test repeated query keys and the Host header."""
        request = parse_request(b"GET /search?a=1&a=2 HTTP/1.1\r\nHost: x\r\n\r\n")

        assert request.method is Method.GET
        assert request.path == "/search"
        assert request.uri.query.get("a") == ["1", "2"]
        assert request.get_header("Host") == HostHeader("x")

    def test_parse_headers(self, sample_get_request: bytes):
        """Test that headers are typed and kept in order."""
        request = parse_request(sample_get_request)

        assert [header.name for header in request.headers] == [
            "Host", "User-Agent", "Accept", "Connection",
        ]
        assert request.get_header("connection") == ConnectionHeader(ConnectionOption.KEEP_ALIVE)
        assert request.get_header("user-agent").value == "pytest"
        assert request.get_header("X-Missing") is None

    def test_parse_query_params(self, sample_get_request: bytes):
        """Test query parameter accessors."""
        request = parse_request(sample_get_request)

        assert request.get_query("page") == "1"
        assert request.get_query("limit") == "10"
        assert request.get_query("missing") is None
        assert request.get_query("missing", "default") == "default"
        assert request.get_query_list("page") == ["1"]
        assert request.get_query_list("missing") == []

    def test_parse_post_with_body(self, sample_post_request: bytes):
        """Test body, Content-Type, Content-Length and cookies."""
        request = parse_request(sample_post_request)

        assert request.method is Method.POST
        assert request.body == '{"name": "John", "email": "john@example.com"}'
        assert request.content_type == Mime.application("json")
        assert request.content_length == len(request.body)
        assert request.get_cookie("session").value == "abc 123"
        assert request.get_cookie("THEME").value == "dark"
        assert request.get_cookie("missing") is None
        assert request.accept_encoding is not None

    def test_raw_keeps_whole_read(self, sample_get_request: bytes):
        """Test that raw holds the full request text."""
        assert parse_request(sample_get_request).raw == sample_get_request.decode()

    def test_path_percent_decoded(self):
        """Test URL-encoded path and query parsing."""
        request = parse_request(b"GET /a%20b/c?q=hello%20world HTTP/1.1\r\nHost: test\r\n\r\n")

        assert request.path == "/a b/c"
        assert request.get_query("q") == "hello world"

    def test_absolute_form(self):
        """Test that an absolute target supplies scheme, host and full path."""
        request = parse_request(
            b"GET https://example.com:8443/a/b?x=1 HTTP/1.1\r\nHost: ignored\r\n\r\n"
        )

        assert request.uri.scheme == "https"
        assert request.host == "example.com:8443"
        assert request.path == "/a/b"
        assert request.get_query("x") == "1"

    def test_absolute_form_without_path(self):
        """Test http://host and http://host?q."""
        assert parse_request(b"GET http://example.com HTTP/1.1\r\n\r\n").path == "/"

        request = parse_request(b"GET http://example.com?a=1 HTTP/1.1\r\n\r\n")
        assert request.host == "example.com"
        assert request.get_query("a") == "1"

    def test_missing_host(self):
        """Test that an origin-form request without Host has an empty host."""
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert request.host == ""
        assert request.headers == []
        assert str(request.uri) == "http:///"

    def test_no_blank_line(self):
        """Test headers with no terminating blank line."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n")

        assert request.host == "x"
        assert request.body == ""

    def test_no_headers_with_body(self):
        """Test a request with no headers but a body."""
        request = parse_request(b"POST / HTTP/1.0\r\n\r\nhello")

        assert request.headers == []
        assert request.body == "hello"
        assert request.version is Version.HTTP_1_0

    def test_unknown_header_kept(self):
        """Test that unrecognised headers pass through verbatim."""
        request = parse_request(b"GET / HTTP/1.1\r\nX-Trace: a: b\r\n\r\n")

        assert request.headers == [UnknownHeader("X-Trace", "a: b")]


class TestMethodAndVersion:
    """Tests for method and version classification."""

    def test_method_case_insensitive(self):
        """Test that lower-case methods are classified."""
        assert parse_request(b"get / HTTP/1.1\r\n\r\n").method is Method.GET
        assert method_from_token("Patch") is Method.PATCH

    def test_unknown_method_kept(self):
        """Test that unknown methods are not rejected."""
        request = parse_request(b"BREW /pot HTTP/1.1\r\n\r\n")

        assert request.method == UnknownMethod("BREW")
        assert str(request.method) == "BREW"

    def test_unknown_version_kept(self):
        """Test that versions are matched exactly."""
        assert parse_request(b"GET / HTTP/2.0\r\n\r\n").version is Version.HTTP_2_0
        assert parse_request(b"GET / http/1.1\r\n\r\n").version == UnknownVersion("http/1.1")


class TestParseErrors:
    """Tests for malformed input."""

    @pytest.mark.parametrize("raw", [
        b"",
        b"GET\r\nHost: test\r\n\r\n",
        b"GET /path\r\n\r\n",
        b" / HTTP/1.1\r\n\r\n",
        b"GET  HTTP/1.1\r\n\r\n",
        b"GET / HTTP/1.1",
        b"GET / HTTP/1.1\rX",
    ])
    def test_bad_request_line(self, raw: bytes):
        """Test that a broken request line is rejected."""
        with pytest.raises(RequestLineError):
            parse_request(raw)

    def test_malformed_header_line(self):
        """Test that a header line without ": " fails the whole parse."""
        with pytest.raises(HeaderParseError) as exc_info:
            parse_request(b"GET / HTTP/1.1\r\nHost: x\r\nMalformed\r\n\r\n")

        assert "Malformed" in str(exc_info.value)
        assert exc_info.value.status_code == 400

    def test_colon_without_space(self):
        """Test that "Name:value" is not accepted."""
        with pytest.raises(HeaderParseError):
            parse_request(b"GET / HTTP/1.1\r\nHost:x\r\n\r\n")

    @pytest.mark.parametrize("line", [
        b"Content-Length: ten",
        b"Accept-Encoding: gzip, zstd",
        b"Cookie: novalue",
        b"DNT: maybe",
        b"Content-Type: nonsense",
    ])
    def test_typed_header_failure(self, line: bytes):
        """Test that an invalid value for a known header fails the parse."""
        with pytest.raises(HTTPParseError):
            parse_request(b"GET / HTTP/1.1\r\n" + line + b"\r\n\r\n")

    def test_bad_query(self):
        """Test that a malformed query string fails the parse."""
        with pytest.raises(QueryParseError):
            parse_request(b"GET /search?a=1&b HTTP/1.1\r\nHost: x\r\n\r\n")

        with pytest.raises(QueryParseError):
            parse_request(b"GET http://x/search?a HTTP/1.1\r\n\r\n")

    def test_empty_query(self):
        """Test that a bare ? is an empty query."""
        request = parse_request(b"GET /search? HTTP/1.1\r\n\r\n")

        assert len(request.uri.query) == 0


class TestRead:
    """Tests for RequestParser.read over a connection."""

    def test_read_uses_buffer_size(self, sample_get_request: bytes):
        """Test the single bounded read."""
        sock = FakeSocket(sample_get_request)
        connection = Connection(socket=sock, address=("10.0.0.1", 5000), buffer_size=2048)

        request = RequestParser(CodecConfig()).read(connection)

        assert sock.recv_sizes == [2048]
        assert request.connection is connection
        assert request.client_address == ("10.0.0.1", 5000)

    def test_request_larger_than_one_read(self):
        """Test that only the first read is parsed."""
        raw = b"POST / HTTP/1.1\r\nHost: x\r\n\r\n" + b"a" * 100
        sock = FakeSocket(raw)
        connection = Connection(socket=sock, buffer_size=40)

        request = RequestParser().read(connection)

        assert request.body == "a" * (40 - len(b"POST / HTTP/1.1\r\nHost: x\r\n\r\n"))

    def test_closed_before_request(self):
        """Test a peer that sends nothing."""
        connection = Connection(socket=FakeSocket(b""))

        with pytest.raises(ConnectionClosedError):
            RequestParser().read(connection)

    def test_socket_error_propagates(self, socket_pair):
        """Test that OSError from recv is not translated."""
        connection, client = socket_pair
        connection.socket.close()

        with pytest.raises(OSError):
            RequestParser().read(connection)

    def test_config_carried_to_request(self, sample_get_request: bytes):
        """Test that the parser's config travels with the request."""
        config = CodecConfig(compression_level=9)

        request = RequestParser(config).parse(sample_get_request)

        assert request.config is config


class TestUri:
    """Tests for Uri."""

    def test_str(self):
        """Test rendering."""
        uri = Uri.from_origin_form("/search?q=a+b", "example.com")

        assert str(uri) == "http://example.com/search?q=a%20b"

    def test_defaults(self):
        """Test the empty Uri."""
        assert str(Uri()) == "http:///"


class TestHTTPRequest:
    """Tests for building HTTPRequest directly."""

    def test_detached_request(self):
        """Test a request with no connection."""
        request = HTTPRequest(method=Method.GET)

        assert request.client_address == ("", 0)
        assert request.content_length is None
        assert request.content_type is None
        assert request.accept_encoding is None
        assert request.responded is False
