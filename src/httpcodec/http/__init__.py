"""
=============================================================================
HTTP/1.x MESSAGE CODEC
=============================================================================

Bytes in, HTTPRequest out. HTTPResponse in, bytes out.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Request / Response                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket ──► RequestParser ──► HTTPRequest ──► handler              │
    │                   │                                 │               │
    │          headers, query, mime,                 HTTPResponse          │
    │          cookies, accept                            │               │
    │                                                     ▼               │
    │   socket ◄── serialize_response ◄── request.respond(response)       │
    │                   │                                                  │
    │          negotiation, compression,                                   │
    │          sorted headers                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MODULE COMPONENTS
=============================================================================

    request.py       Request line, header block, Uri, HTTPRequest
    response.py      HTTPResponse, serializer, ResponseBuilder
    headers.py       Typed headers and their parse/format rules
    query.py         Query string codec
    mime.py          Media types
    cookies.py       Cookie header parsing, Set-Cookie building
    accept.py        Accept-Encoding parsing and negotiation
    compression.py   gzip / deflate / brotli
    status_codes.py  Status codes and reason phrases
    errors.py        Exception hierarchy

=============================================================================
"""

from .accept import AcceptEncoding, AcceptEncodings, Encoding, accepts
from .compression import BodyEncoding, CompressionLevel, compress, decompress
from .cookies import RequestCookie, ResponseCookie, format_cookies, parse_cookies
from .errors import (
    AcceptEncodingParseError,
    AlreadyRespondedError,
    CompressionError,
    ConnectionClosedError,
    CookieParseError,
    HeaderParseError,
    HTTPParseError,
    MimeParseError,
    QueryParseError,
    RequestLineError,
)
from .headers import Header, UnknownHeader, find_header, format_header, parse_header
from .mime import Mime, MimeType
from .query import QueryParams
from .request import (
    HTTPRequest,
    Method,
    RequestParser,
    UnknownMethod,
    UnknownVersion,
    Uri,
    Version,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    bad_request,
    created,
    internal_error,
    method_not_allowed,
    no_content,
    not_found,
    ok,
    redirect,
    serialize_response,
)
from .status_codes import CustomStatus, HTTPStatus, UnknownStatus, status_from_code

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",
    "Method",
    "UnknownMethod",
    "Version",
    "UnknownVersion",
    "Uri",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "serialize_response",
    "ok",
    "created",
    "no_content",
    "redirect",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Headers and their values
    "Header",
    "UnknownHeader",
    "parse_header",
    "format_header",
    "find_header",
    "QueryParams",
    "Mime",
    "MimeType",
    "RequestCookie",
    "ResponseCookie",
    "parse_cookies",
    "format_cookies",
    "AcceptEncoding",
    "AcceptEncodings",
    "Encoding",
    "accepts",

    # Compression
    "BodyEncoding",
    "CompressionLevel",
    "compress",
    "decompress",

    # Status codes
    "HTTPStatus",
    "UnknownStatus",
    "CustomStatus",
    "status_from_code",

    # Errors
    "HTTPParseError",
    "RequestLineError",
    "HeaderParseError",
    "QueryParseError",
    "MimeParseError",
    "CookieParseError",
    "AcceptEncodingParseError",
    "ConnectionClosedError",
    "AlreadyRespondedError",
    "CompressionError",
]
