"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes of one read into a structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    GET /search?a=1&a=2 HTTP/1.1\r\n                            │ │
    │  │    ─┬─ ───────┬─────── ────┬────                               │ │
    │  │     │         │            │                                    │ │
    │  │   Method    Target      Version                                 │ │
    │  │                                                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    Host: example.com\r\n                                       │ │
    │  │    Accept-Encoding: gzip, br\r\n                               │ │
    │  │    Cookie: session=abc\r\n                                     │ │
    │  │                                                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (whatever else came in the same read) ───────────────────┐ │
    │  │    name=value                                                   │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST TARGET FORMS
=============================================================================

    Origin form:    GET /search?q=x HTTP/1.1        + Host: example.com
                        └──────┬──────┘
                        path + query, host comes from the Host header

    Absolute form:  GET http://example.com/search?q=x HTTP/1.1
                        └──┬─┘ └────┬────┘└────┬───┘
                        scheme     host    path + query

Both end up as the same Uri: scheme, host, percent-decoded path, and
QueryParams.

=============================================================================
WHAT IS (AND ISN'T) SUPPORTED
=============================================================================

- One read of buffer_size bytes per request. The body is whatever text
  follows the blank line in that read; Content-Length is not used to
  wait for more.
- No chunked transfer-encoding, no keep-alive, no pipelining.
- Header lines must use ": " (colon + space) as the separator.
- Unknown methods and versions are kept, not rejected. Deciding what to
  do with "BREW /pot HTCPCP/1.0" is the handler's business.

=============================================================================
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple, Union
from urllib.parse import unquote

from ..access_log import log_response
from ..config import CodecConfig
from .accept import AcceptEncodings
from .cookies import RequestCookie
from .errors import AlreadyRespondedError, HeaderParseError, HTTPParseError, RequestLineError
from .headers import (
    AcceptEncodingHeader,
    ContentLengthHeader,
    ContentTypeHeader,
    CookieHeader,
    Header,
    find_header,
    parse_header,
)
from .mime import Mime
from .query import QueryParams
from .response import HTTPResponse, serialize_response

if TYPE_CHECKING:
    from ..core.connection import Connection


logger = logging.getLogger(__name__)


# =============================================================================
# METHOD AND VERSION
# =============================================================================

class Method(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownMethod:
    """A method token outside the standard set, kept as sent."""

    token: str

    def __str__(self) -> str:
        return self.token


def method_from_token(token: str) -> Union[Method, UnknownMethod]:
    """Classify a method token. Case is ignored: "get" is GET."""
    try:
        return Method(token.upper())
    except ValueError:
        return UnknownMethod(token)


class Version(Enum):
    HTTP_1_0 = "HTTP/1.0"
    HTTP_1_1 = "HTTP/1.1"
    HTTP_2_0 = "HTTP/2.0"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownVersion:
    token: str

    def __str__(self) -> str:
        return self.token


def version_from_token(token: str) -> Union[Version, UnknownVersion]:
    """Classify a version token. Matched exactly: "http/1.1" is unknown."""
    try:
        return Version(token)
    except ValueError:
        return UnknownVersion(token)


# =============================================================================
# URI
# =============================================================================

ABSOLUTE_PREFIXES = ("http://", "https://")


def _split_target(target: str) -> Tuple[str, QueryParams]:
    """
    Split "/path?query" into a decoded path and parsed query.

    Raises:
        QueryParseError: If the query part is malformed.
    """
    path, question, query = target.partition("?")
    params = QueryParams.parse(query) if question else QueryParams.empty()
    return unquote(path), params


@dataclass
class Uri:
    """
    Where a request is aimed.

    Attributes:
        scheme: "http" or "https"
        host:   Host (and port, if given) from the target or Host header
        path:   Percent-decoded path, without the query
        query:  Parsed query parameters
    """

    scheme: str = "http"
    host: str = ""
    path: str = "/"
    query: QueryParams = field(default_factory=QueryParams)

    @classmethod
    def from_origin_form(cls, target: str, host: str = "") -> "Uri":
        """Build from "/path?query" plus the Host header value."""
        path, query = _split_target(target)
        return cls(scheme="http", host=host, path=path, query=query)

    @classmethod
    def from_absolute(cls, target: str) -> "Uri":
        """
        Build from "scheme://host/path?query".

        The path is everything from the first "/" after the host, so
        "http://x/a/b" keeps "/a/b".
        """
        scheme, _, rest = target.partition("://")

        # Host ends at the first "/" or "?"
        end = len(rest)
        for separator in ("/", "?"):
            position = rest.find(separator)
            if position != -1:
                end = min(end, position)

        host, remainder = rest[:end], rest[end:]
        if not remainder.startswith("/"):
            remainder = "/" + remainder

        path, query = _split_target(remainder)
        return cls(scheme=scheme.lower(), host=host, path=path, query=query)

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}{self.query}"


# =============================================================================
# REQUEST
# =============================================================================

@dataclass
class HTTPRequest:
    """
    A parsed HTTP request, bound to the connection it came in on.

    =========================================================================
    REQUEST LIFECYCLE
    =========================================================================

        Raw bytes            HTTPRequest             Handler
        from socket ─parse─►  dataclass  ─handle─►   builds HTTPResponse
                                  │                        │
                                  │ ◄──── respond() ───────┘
                                  ▼
                        serialize, write, log
                        (exactly once per request)

    =========================================================================

    Attributes:
        method:      Method member, or UnknownMethod
        version:     Version member, or UnknownVersion
        uri:         Parsed target
        headers:     Typed headers in the order received
        body:        Text after the blank line (within the single read)
        raw:         The whole read as text
        connection:  Where respond() writes; None for detached requests
        responded:   Flips to True on the first respond()
        config:      Settings used when responding
        received_at: When parsing finished (for access log timing)
    """

    method: Union[Method, UnknownMethod]
    version: Union[Version, UnknownVersion] = Version.HTTP_1_1
    uri: Uri = field(default_factory=Uri)
    headers: List[Header] = field(default_factory=list)
    body: str = ""
    raw: str = ""
    connection: Optional["Connection"] = field(default=None, repr=False)
    responded: bool = False
    config: CodecConfig = field(default_factory=CodecConfig, repr=False)
    received_at: float = field(default_factory=time.time, repr=False)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def host(self) -> str:
        return self.uri.host

    @property
    def path(self) -> str:
        return self.uri.path

    @property
    def query(self) -> QueryParams:
        return self.uri.query

    @property
    def content_length(self) -> Optional[int]:
        header = self.get_header(ContentLengthHeader.name)
        return header.value if header is not None else None

    @property
    def content_type(self) -> Optional[Mime]:
        header = self.get_header(ContentTypeHeader.name)
        return header.value if header is not None else None

    @property
    def accept_encoding(self) -> Optional[AcceptEncodings]:
        header = self.get_header(AcceptEncodingHeader.name)
        return header.value if header is not None else None

    @property
    def client_address(self) -> Tuple[str, int]:
        if self.connection is None:
            return ("", 0)
        return self.connection.address

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str) -> Optional[Header]:
        """
        First header with the given name, compared case-insensitively.

        Example:
            request.get_header("content-type").value  # Mime(...)
        """
        return find_header(self.headers, name)

    def get_cookie(self, name: str) -> Optional[RequestCookie]:
        """First cookie with the given name across all Cookie headers."""
        for header in self.headers:
            if isinstance(header, CookieHeader):
                cookie = header.get(name)
                if cookie is not None:
                    return cookie
        return None

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        First value of a query parameter.

        Example:
            # URL: /users?page=1&page=2
            request.get_query("page")  # Returns "1"
        """
        return self.uri.query.get_first(name, default)

    def get_query_list(self, name: str) -> List[str]:
        """All values of a query parameter (empty list if absent)."""
        return list(self.uri.query.get(name) or [])

    # =========================================================================
    # RESPONDING
    # =========================================================================

    def respond(self, response: HTTPResponse) -> int:
        """
        Serialize a response and write it to the connection.

        May be called once. The request is marked as responded before the
        write, so a failed write still counts as the one response.

        Returns:
            Number of bytes written.

        Raises:
            AlreadyRespondedError: On a second call; nothing is written.
            ValueError: If the request has no connection.
            OSError: If the write fails.
        """
        if self.responded:
            raise AlreadyRespondedError(f"Request {self.method} {self.uri} was already answered")

        if self.connection is None:
            raise ValueError("Request has no connection to respond on")

        self.responded = True
        data = serialize_response(response, self)
        written = self.connection.send(data)

        log_response(self, response.status.code, written, self.config.log_format)
        return written


# =============================================================================
# PARSER
# =============================================================================

class RequestParser:
    """
    Reads and parses one request per connection.

    =========================================================================
    PARSING ALGORITHM
    =========================================================================

    1. Scan to "\\r", expect "\\n"     → request line
    2. Scan the line to the first space → method
    3. Scan to the next space          → request target, rest is version
    4. Split the rest at "\\r\\n\\r\\n" → header block, body
    5. Split the header block on "\\r\\n", each line on the first ": "
    6. Build the Uri (absolute form, or Host header + origin form)

    Any failure raises an HTTPParseError subclass. There is no partial
    request.
    =========================================================================
    """

    def __init__(self, config: Optional[CodecConfig] = None):
        self.config = config or CodecConfig()

    def read(self, connection: "Connection") -> HTTPRequest:
        """
        Do the single bounded read on a connection and parse it.

        Raises:
            ConnectionClosedError: If the peer sent nothing.
            OSError: On socket failure.
            HTTPParseError: If the bytes are not a valid request.
        """
        data = connection.read_chunk()
        return self.parse(data, connection)

    def parse(self, data: bytes, connection: Optional["Connection"] = None) -> HTTPRequest:
        """
        Parse bytes already read into an HTTPRequest.

        Args:
            data: Raw request bytes
            connection: Connection the request came in on, if any

        Raises:
            HTTPParseError: If the request is malformed.
        """
        text = data.decode("utf-8", errors="replace")

        try:
            request = self._parse_text(text)
        except HTTPParseError as e:
            logger.debug(f"Rejected request ({type(e).__name__}): {e}")
            raise

        request.connection = connection
        return request

    def _parse_text(self, text: str) -> HTTPRequest:
        # ---------------------------------------------------------------------
        # Request line
        # ---------------------------------------------------------------------
        line_end = text.find("\r")
        if line_end == -1:
            raise RequestLineError("Invalid request line: missing line terminator")

        if text[line_end + 1:line_end + 2] != "\n":
            raise RequestLineError("Invalid request line: expected \\r\\n after version")

        line = text[:line_end]

        method_end = line.find(" ")
        if method_end <= 0:
            raise RequestLineError(f"Invalid request line: missing method in {line!r}")

        target_end = line.find(" ", method_end + 1)
        if target_end == -1:
            raise RequestLineError(f"Invalid request line: missing version in {line!r}")

        target = line[method_end + 1:target_end]
        if not target:
            raise RequestLineError(f"Invalid request line: empty request target in {line!r}")

        method = method_from_token(line[:method_end])
        version = version_from_token(line[target_end + 1:])

        # ---------------------------------------------------------------------
        # Header block and body
        # ---------------------------------------------------------------------
        header_block, body = self._split_head(text[line_end + 2:])
        headers = self._parse_headers(header_block)

        # ---------------------------------------------------------------------
        # URI
        # ---------------------------------------------------------------------
        if target.lower().startswith(ABSOLUTE_PREFIXES):
            uri = Uri.from_absolute(target)
        else:
            host = find_header(headers, "Host")
            uri = Uri.from_origin_form(target, host.value if host is not None else "")

        return HTTPRequest(
            method=method,
            version=version,
            uri=uri,
            headers=headers,
            body=body,
            raw=text,
            config=self.config,
        )

    @staticmethod
    def _split_head(rest: str) -> Tuple[str, str]:
        """
        Split what follows the request line into (header block, body).

            "\\r\\n<body>"                 → no headers
            "A: 1\\r\\nB: 2\\r\\n\\r\\n<body>" → headers, body
            "A: 1\\r\\n"                   → headers only (no blank line)
        """
        if rest.startswith("\r\n"):
            return "", rest[2:]

        header_end = rest.find("\r\n\r\n")
        if header_end == -1:
            if rest.endswith("\r\n"):
                rest = rest[:-2]
            return rest, ""

        return rest[:header_end], rest[header_end + 4:]

    @staticmethod
    def _parse_headers(block: str) -> List[Header]:
        headers: List[Header] = []
        if not block:
            return headers

        for line in block.split("\r\n"):
            name, separator, value = line.partition(": ")
            if not separator or not name:
                raise HeaderParseError(f"Invalid header line: {line!r}")
            headers.append(parse_header(name, value))

        return headers


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(data: bytes, config: Optional[CodecConfig] = None) -> HTTPRequest:
    """
    Parse one request from bytes, without a connection.

    Use RequestParser directly to read from connections.
    """
    return RequestParser(config).parse(data)
