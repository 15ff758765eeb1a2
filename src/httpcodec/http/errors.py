"""
=============================================================================
CODEC ERRORS
=============================================================================

Every failure the codec can report, in one place.

=============================================================================
ERROR TAXONOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        WHAT CAN GO WRONG                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  TRANSPORT (socket)                                                 │
    │     └── OSError              read/write failed, surfaced unchanged  │
    │     └── ConnectionClosedError peer sent nothing (zero-byte read)    │
    │                                                                      │
    │  MALFORMED INPUT (one message)                                      │
    │     └── HTTPParseError                                              │
    │           ├── RequestLineError        "GET\r\n"                     │
    │           ├── HeaderParseError        "Malformed\r\n"               │
    │           ├── QueryParseError         "?a=1&b"                      │
    │           ├── MimeParseError          "Content-Type: text"          │
    │           ├── CookieParseError        "Cookie: =abc"                │
    │           └── AcceptEncodingParseError "Accept-Encoding: zip"       │
    │                                                                      │
    │  PROGRAMMER ERROR                                                   │
    │     └── AlreadyRespondedError  respond() called twice               │
    │                                                                      │
    │  RECOVERED INTERNALLY                                               │
    │     └── CompressionError       body sent uncompressed instead       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

None of these is fatal to the process. Each is scoped to the one
connection or message being handled.

=============================================================================
"""


class HTTPParseError(Exception):
    """
    Raised when an incoming HTTP message cannot be parsed.

    Carries the HTTP status code that should be returned to the client,
    so the transport can answer with a sensible error before closing:

        400 Bad Request     - Malformed request syntax (the default)

    Subclasses narrow down which part of the message was malformed.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code  # HTTP status to return


class RequestLineError(HTTPParseError):
    """The request line (METHOD SP target SP VERSION) is malformed."""


class HeaderParseError(HTTPParseError):
    """A header line is malformed or its value failed its typed parse."""


class QueryParseError(HTTPParseError):
    """A query-string segment is not a single key=value pair."""


class MimeParseError(HTTPParseError):
    """A media type is not of the form type/subtype[;key=value]."""


class CookieParseError(HTTPParseError):
    """A Cookie header holds a malformed pair, empty name, or bad value."""


class AcceptEncodingParseError(HTTPParseError):
    """An Accept-Encoding entry names an unsupported encoding."""


class ConnectionClosedError(ConnectionError):
    """The peer closed the connection before sending any request bytes."""


class AlreadyRespondedError(RuntimeError):
    """
    Raised when respond() is called on a request that was already answered.

    Exactly one response is written per connection. A second attempt is
    rejected before anything touches the socket.
    """


class CompressionError(Exception):
    """Compressing a response body failed."""
