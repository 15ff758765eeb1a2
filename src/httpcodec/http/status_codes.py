"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status part of a response line, "200 OK", as a closed family:

    HTTPStatus       - the standard codes, each with its reason phrase
    UnknownStatus    - a numeric code we have no phrase for ("599 Unknown")
    CustomStatus     - any code with an application-chosen reason phrase

All three expose the same two attributes, so the serializer never needs
to know which one it was handed:

    status.code  → 204
    status.text  → "204 No Content"

=============================================================================
MAPPING BOTH WAYS
=============================================================================

    status_from_code(404)  → HTTPStatus.NOT_FOUND
    status_from_code(299)  → UnknownStatus(299)
    HTTPStatus.NOT_FOUND.code → 404

The mapping is total: every integer maps to *some* status, which is what
a codec wants when an application hands it a number it got from
somewhere else.

=============================================================================
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class HTTPStatus(IntEnum):
    """
    Standard HTTP status codes.

    IntEnum, so members compare equal to their numeric code:

        >>> HTTPStatus.NO_CONTENT == 204
        True
        >>> HTTPStatus.NO_CONTENT.text
        '204 No Content'
    """

    # 1xx INFORMATIONAL
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204              # Never carries a body
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206

    # 3xx REDIRECTION
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def code(self) -> int:
        return int(self)

    @property
    def phrase(self) -> str:
        """
        The reason phrase for this status code.

            HTTP/1.1 200 OK
                     ─── ──
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def text(self) -> str:
        """Code and phrase as they appear on the status line."""
        return f"{self.code} {self.phrase}"


@dataclass(frozen=True)
class UnknownStatus:
    """A numeric code outside the HTTPStatus set."""

    code: int

    @property
    def phrase(self) -> str:
        return "Unknown"

    @property
    def text(self) -> str:
        return f"{self.code} {self.phrase}"


@dataclass(frozen=True)
class CustomStatus:
    """A status code with an application-chosen reason phrase."""

    code: int
    phrase: str

    @property
    def text(self) -> str:
        return f"{self.code} {self.phrase}"


Status = Union[HTTPStatus, UnknownStatus, CustomStatus]


def status_from_code(code: int) -> Status:
    """
    Map a numeric code to its status.

    Known codes return the HTTPStatus member, anything else an
    UnknownStatus carrying the number.
    """
    try:
        return HTTPStatus(code)
    except ValueError:
        return UnknownStatus(code)


# Reason phrases per RFC 7231 / RFC 6585. Purely informational on the
# wire: clients key off the number.
_STATUS_PHRASES = {
    HTTPStatus.CONTINUE: "Continue",
    HTTPStatus.SWITCHING_PROTOCOLS: "Switching Protocols",

    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.RESET_CONTENT: "Reset Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",

    HTTPStatus.MULTIPLE_CHOICES: "Multiple Choices",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.PROXY_AUTHENTICATION_REQUIRED: "Proxy Authentication Required",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.LENGTH_REQUIRED: "Length Required",
    HTTPStatus.PRECONDITION_FAILED: "Precondition Failed",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.URI_TOO_LONG: "URI Too Long",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTPStatus.RANGE_NOT_SATISFIABLE: "Range Not Satisfiable",
    HTTPStatus.EXPECTATION_FAILED: "Expectation Failed",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
