"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log line per response written, on the "httpcodec.access" logger.

    GET /search?a=1 HTTP/1.1  ──►  handler  ──►  request.respond(response)
                                                       │
                                                       ▼
        127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET http://x/search?a=1 HTTP/1.1" 200 57 0.41ms

Two formats:

    text: Apache-style line, for people
    json: one JSON object per line, for log aggregators

The access logger is namespaced so it can be routed on its own:

    logging.getLogger("httpcodec.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass

from .config import CodecConfig


logger = logging.getLogger("httpcodec.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request/response exchange.

    Fields:
        request_id:     Short random ID for correlating log lines
        method:         Request method token (GET, POST, ...)
        uri:            Full request URI
        version:        Request protocol version
        client_ip:      Peer IP address ("-" when unknown)
        user_agent:     User-Agent header, or "-"
        status_code:    Response status code
        bytes_sent:     Bytes written to the socket, headers included
        duration_ms:    Time from parse to write
        timestamp:      When the response was written
    """

    request_id: str
    method: str
    uri: str
    version: str
    client_ip: str
    user_agent: str
    status_code: int
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "uri": self.uri,
            "version": self.version,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "bytes_sent": self.bytes_sent,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache common-log style line with a trailing duration."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.uri} {self.version}" {self.status_code} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


def log_response(request, status_code: int, bytes_sent: int, log_format: str = "text") -> RequestLog:
    """
    Build and emit the access log entry for a written response.

    Args:
        request: The HTTPRequest that was answered
        status_code: Code of the status line that was written
        bytes_sent: Bytes written to the connection
        log_format: "text" or "json"

    Returns:
        The RequestLog that was emitted
    """
    duration_ms = (time.time() - request.received_at) * 1000
    user_agent = request.get_header("User-Agent")

    entry = RequestLog(
        request_id=str(uuid.uuid4())[:8],
        method=str(request.method),
        uri=str(request.uri),
        version=str(request.version),
        client_ip=request.client_address[0] or "-",
        user_agent=user_agent.value if user_agent is not None else "-",
        status_code=status_code,
        bytes_sent=bytes_sent,
        duration_ms=duration_ms,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )

    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())

    return entry


def setup_logging(config: CodecConfig) -> None:
    """Configure the root logger and the httpcodec loggers from config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpcodec").setLevel(level)
