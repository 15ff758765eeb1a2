"""
=============================================================================
HTTPCODEC - HTTP/1.x Message Codec
=============================================================================

Parses raw request bytes from a client connection into structured
requests, and serializes structured responses back into wire bytes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          WHAT'S INSIDE                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. REQUEST PARSING                                                │
    │      - Request line (method, target, version)                       │
    │      - Typed headers, unknown ones passed through                   │
    │      - Query strings, cookies, media types                          │
    │                                                                      │
    │   2. RESPONSE SERIALIZATION                                         │
    │      - Deterministic header order                                   │
    │      - Accept-Encoding negotiation                                  │
    │      - gzip / deflate / brotli bodies                               │
    │                                                                      │
    │   3. AROUND THE CODEC                                               │
    │      - Connection handle (one read, one write)                      │
    │      - Configuration from the environment                           │
    │      - Access logging                                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Listening for connections is left to the caller:

    config = CodecConfig.from_env()
    config.validate()
    setup_logging(config)
    parser = RequestParser(config)

    sock, address = listener.accept()
    with Connection.from_config(sock, address, config) as connection:
        request = parser.read(connection)
        request.respond(ok("hello"))

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httpcodec/
    ├── __init__.py          # This file - package exports
    ├── config.py            # CodecConfig dataclass
    ├── access_log.py        # Access log entries and logging setup
    ├── core/
    │   └── connection.py    # Connection wrapper
    └── http/                # The codec itself

=============================================================================
"""

__version__ = "1.0.0"

from .config import CodecConfig
from .http import HTTPRequest, HTTPResponse, RequestParser, ResponseBuilder, ok
from .core import Connection
from .access_log import setup_logging

__all__ = [
    "CodecConfig",
    "Connection",
    "HTTPRequest",
    "HTTPResponse",
    "RequestParser",
    "ResponseBuilder",
    "ok",
    "setup_logging",
    "__version__",
]
