"""
=============================================================================
HTTP RESPONSE SERIALIZER
=============================================================================

Builds responses and turns them into wire bytes for a given request.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  │    ────┬─── ─┬─ ─┬─                                            │ │
    │  │        │     │   │                                              │ │
    │  │  Request's  Code Phrase                                        │ │
    │  │   version                                                       │ │
    │  │                                                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS (sorted by name) ─────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    Content-Encoding: gzip\r\n                                  │ │
    │  │    Content-Length: 37\r\n                                      │ │
    │  │    Content-Type: text/html\r\n                                 │ │
    │  │                                                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (possibly compressed; absent for HEAD and 204) ──────────┐ │
    │  │    <1f 8b 08 00 ...>                                            │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SERIALIZATION STEPS
=============================================================================

1. Copy the response's headers (the response itself is not modified).
2. If the response asks for an encoding and the request's Accept-Encoding
   allows it, compress the body and add Content-Encoding.
3. If there is a body and no explicit Content-Length, add one counting
   the bytes actually sent.
4. Sort the headers by canonical name. The order is part of the output
   contract: the same response always serializes to the same bytes.
5. Status line, header lines, blank line, then the body unless the
   request was HEAD or the status code is 204.

If compression fails, the body goes out uncompressed and no
Content-Encoding header is added, so the headers always describe the
bytes that follow. The failure is logged at WARNING.

=============================================================================
BODY KINDS
=============================================================================

    body = "text"     str    sent as UTF-8, Content-Length added
    body = b"\\x89PNG" bytes  sent as is, Content-Length added
    body = None              nothing after the blank line, no Content-Length

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Union

from .compression import BodyEncoding, compress
from .cookies import ResponseCookie, format_http_date
from .errors import CompressionError
from .headers import (
    CacheControlHeader,
    CacheDirective,
    ConnectionHeader,
    ConnectionOption,
    ContentEncodingHeader,
    ContentLengthHeader,
    ContentTypeHeader,
    Header,
    LocationHeader,
    SetCookieHeader,
    UnknownHeader,
    find_header,
    parse_header,
)
from .mime import Mime
from .status_codes import HTTPStatus, Status, status_from_code

if TYPE_CHECKING:
    from .request import HTTPRequest

__all__ = [
    "HTTPResponse",
    "ResponseBuilder",
    "serialize_response",
    "format_http_date",
    "ok",
    "created",
    "no_content",
    "redirect",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",
]


logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]


@dataclass
class HTTPResponse:
    """
    A response waiting to be serialized.

    Setters return self, so a response can be built in one expression:

        HTTPResponse().set_status(HTTPStatus.OK).set_body("hi")

    Attributes:
        status:            HTTPStatus, UnknownStatus or CustomStatus (a plain
                           int is mapped with status_from_code())
        headers:           Headers in insertion order
        body:              str (text), bytes (binary) or None (no body)
        encoding:          Compression to apply if the client accepts it
        compression_level: Level for that compression; None uses the
                           request's configured default
    """

    status: Status = HTTPStatus.OK
    headers: List[Header] = field(default_factory=list)
    body: Body = None
    encoding: Optional[BodyEncoding] = None
    compression_level: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.status, int) and not isinstance(self.status, HTTPStatus):
            self.status = status_from_code(self.status)

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def empty(cls) -> "HTTPResponse":
        """200 OK, no headers, no body."""
        return cls()

    @classmethod
    def redirect(cls, target: str, status: Optional[Status] = None) -> "HTTPResponse":
        """
        Redirect to target. Defaults to 302 Found.

        The body is a short text note for clients that do not follow
        redirects.
        """
        return cls(
            status=status if status is not None else HTTPStatus.FOUND,
            headers=[
                LocationHeader(target),
                ContentTypeHeader(Mime.text("plain")),
            ],
            body=f"Redirecting to {target}",
        )

    # =========================================================================
    # SETTERS
    # =========================================================================

    def set_status(self, status: Union[Status, int]) -> "HTTPResponse":
        """Set the status; a plain int is mapped with status_from_code()."""
        if isinstance(status, int) and not isinstance(status, HTTPStatus):
            status = status_from_code(status)
        self.status = status
        return self

    def add_header(self, header: Union[Header, str], value: Optional[str] = None) -> "HTTPResponse":
        """
        Append a header.

        Either a Header instance, or a name and value which are run
        through the header parser:

            response.add_header(ServerHeader("codec/1.0"))
            response.add_header("Cache-Control", "no-store")
            response.add_header("X-Request-Id", "42")    # UnknownHeader

        Raises:
            HeaderParseError: If a recognised name gets an invalid value.
        """
        if isinstance(header, str):
            if value is None:
                raise TypeError("add_header() needs a value when given a header name")
            header = parse_header(header, value)
        self.headers.append(header)
        return self

    def add_cookie(self, cookie: ResponseCookie) -> "HTTPResponse":
        """Append a Set-Cookie header for the cookie."""
        self.headers.append(SetCookieHeader(cookie))
        return self

    def set_body(self, body: Body) -> "HTTPResponse":
        self.body = body
        return self

    def set_content_type(self, content_type: Union[Mime, str]) -> "HTTPResponse":
        """Set Content-Type, replacing any existing one."""
        if isinstance(content_type, str):
            content_type = Mime.parse(content_type)
        self.remove_header(ContentTypeHeader.name)
        self.headers.append(ContentTypeHeader(content_type))
        return self

    def set_body_encoding(
        self,
        encoding: Optional[BodyEncoding],
        level: Optional[int] = None,
    ) -> "HTTPResponse":
        """Ask for the body to be compressed, if the client accepts it."""
        self.encoding = encoding
        self.compression_level = level
        return self

    # =========================================================================
    # HEADER HELPERS
    # =========================================================================

    def get_header(self, name: str) -> Optional[Header]:
        return find_header(self.headers, name)

    def has_header(self, name: str) -> bool:
        return find_header(self.headers, name) is not None

    def remove_header(self, name: str) -> "HTTPResponse":
        """Remove every header with the name (case-insensitive)."""
        wanted = name.lower()
        self.headers = [h for h in self.headers if h.name.lower() != wanted]
        return self

    def to_bytes(self, request: "HTTPRequest") -> bytes:
        """Serialize for the given request. See serialize_response()."""
        return serialize_response(self, request)


# =============================================================================
# SERIALIZATION
# =============================================================================

def _body_bytes(body: Body) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def _suppresses_body(response: HTTPResponse, request: "HTTPRequest") -> bool:
    """HEAD requests and 204 responses never carry a body on the wire."""
    if str(request.method) == "HEAD":
        return True
    return response.status.code == HTTPStatus.NO_CONTENT


def serialize_response(response: HTTPResponse, request: "HTTPRequest") -> bytes:
    """
    Turn a response into wire bytes for a request.

    Args:
        response: What to send
        request: What it answers. Supplies the version for the status line,
                 the method (HEAD), Accept-Encoding, and the default
                 compression level.

    Returns:
        Status line, sorted headers, blank line, and body.
    """
    headers = list(response.headers)
    body = _body_bytes(response.body)

    # ---------------------------------------------------------------------
    # Compression
    # ---------------------------------------------------------------------
    # Runs for HEAD and 204 too, so their headers match what GET would send
    accepted = request.accept_encoding
    if (
        body is not None
        and response.encoding is not None
        and accepted is not None
        and accepted.accepts(response.encoding)
    ):
        level = response.compression_level
        if level is None:
            level = request.config.compression_level

        try:
            body = compress(body, response.encoding, level)
        except CompressionError as e:
            logger.warning(f"Sending body uncompressed: {e}")
        else:
            headers.append(ContentEncodingHeader([response.encoding]))

    # ---------------------------------------------------------------------
    # Content-Length counts the bytes that actually follow
    # ---------------------------------------------------------------------
    if body is not None and find_header(headers, ContentLengthHeader.name) is None:
        headers.append(ContentLengthHeader(len(body)))

    # Stable sort, so repeated names keep their insertion order
    headers = sorted(headers, key=lambda header: header.name)

    head = f"{request.version} {response.status.text}\r\n"
    head += "".join(header.to_line() for header in headers)
    head += "\r\n"

    output = head.encode("utf-8")
    if body is not None and not _suppresses_body(response, request):
        output += body
    return output


# =============================================================================
# BUILDER
# =============================================================================

class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Each method returns the builder, build() returns the response:

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({"message": "Hello"})
            .compress(BodyEncoding.GZIP)
            .build())
    """

    def __init__(self):
        self._response = HTTPResponse()

    # =========================================================================
    # STATUS AND HEADERS
    # =========================================================================

    def status(self, status: Union[Status, int]) -> "ResponseBuilder":
        self._response.set_status(status)
        return self

    def header(self, header: Union[Header, str], value: Optional[str] = None) -> "ResponseBuilder":
        self._response.add_header(header, value)
        return self

    def content_type(self, content_type: Union[Mime, str]) -> "ResponseBuilder":
        self._response.set_content_type(content_type)
        return self

    def cookie(self, cookie: ResponseCookie) -> "ResponseBuilder":
        self._response.add_cookie(cookie)
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Body) -> "ResponseBuilder":
        self._response.set_body(body)
        return self

    def text(self, text: str) -> "ResponseBuilder":
        return self.content_type(Mime.text("plain").with_parameter("charset", "utf-8")).body(text)

    def html(self, html: str) -> "ResponseBuilder":
        return self.content_type(Mime.text("html").with_parameter("charset", "utf-8")).body(html)

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """
        Serialize data as the JSON body.

        Args:
            data: Anything json.dumps() accepts
            pretty: Indent the output
        """
        body = json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)
        return self.content_type(Mime.application("json")).body(body)

    def compress(self, encoding: BodyEncoding, level: Optional[int] = None) -> "ResponseBuilder":
        self._response.set_body_encoding(encoding, level)
        return self

    # =========================================================================
    # CACHING AND CONNECTION
    # =========================================================================

    def no_cache(self) -> "ResponseBuilder":
        """Cache-Control: no-cache, no-store, must-revalidate"""
        return self.header(CacheControlHeader([
            CacheDirective.no_cache(),
            CacheDirective.no_store(),
            CacheDirective("must-revalidate"),
        ]))

    def cache(self, max_age: int = 3600) -> "ResponseBuilder":
        """Cache-Control: public, max-age=<seconds>"""
        return self.header(CacheControlHeader([
            CacheDirective("public"),
            CacheDirective.max_age(max_age),
        ]))

    def close_connection(self) -> "ResponseBuilder":
        return self.header(ConnectionHeader(ConnectionOption.CLOSE))

    def redirect(self, location: str, permanent: bool = False) -> "ResponseBuilder":
        status = HTTPStatus.MOVED_PERMANENTLY if permanent else HTTPStatus.FOUND
        redirect_response = HTTPResponse.redirect(location, status)
        self._response.status = redirect_response.status
        self._response.headers.extend(redirect_response.headers)
        self._response.body = redirect_response.body
        return self

    def build(self) -> HTTPResponse:
        return self._response


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for common responses:
#
#     return ok({"message": "Success"})
#     return not_found("User not found")
#     return redirect("/login")
#

def _with_body(builder: ResponseBuilder, body: Union[str, bytes, dict, list]) -> ResponseBuilder:
    if isinstance(body, (dict, list)):
        return builder.json(body)
    if isinstance(body, bytes):
        return builder.content_type(Mime.application("octet-stream")).body(body)
    return builder.text(body)


def ok(body: Union[str, bytes, dict, list] = "") -> HTTPResponse:
    """200 OK. dict/list bodies become JSON, str text, bytes binary."""
    return _with_body(ResponseBuilder().status(HTTPStatus.OK), body).build()


def created(body: Union[str, bytes, dict, list] = "", location: Optional[str] = None) -> HTTPResponse:
    """201 Created, with a Location header when the new resource has a URL."""
    builder = _with_body(ResponseBuilder().status(HTTPStatus.CREATED), body)
    if location is not None:
        builder.header(LocationHeader(location))
    return builder.build()


def no_content() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()


def redirect(location: str, permanent: bool = False) -> HTTPResponse:
    return ResponseBuilder().redirect(location, permanent=permanent).build()


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).json({"error": message}).build()


def method_not_allowed(allowed_methods: List[str]) -> HTTPResponse:
    """405, with the Allow header listing what the resource does accept."""
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header(UnknownHeader("Allow", ", ".join(allowed_methods)))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).json({"error": message}).build()
