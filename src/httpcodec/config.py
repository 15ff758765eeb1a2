"""
=============================================================================
CODEC CONFIGURATION
=============================================================================

All the knobs of the codec in one dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Explicit arguments                                             │
    │      └── CodecConfig(buffer_size=4096)                              │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTPCODEC_BUFFER_SIZE=4096                                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validate once, at startup. A bad value should stop the process before
the first connection is read, not halfway through serving one.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class CodecConfig:
    """
    Configuration for reading requests and writing responses.

    Example:
        config = CodecConfig.from_env()
        config.validate()
        parser = RequestParser(config)
    """

    # ─────────────────────────────────────────────────────────────────────
    # READING
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 2048
    """
    Bytes requested by the single read of a request.
    The whole request (line, headers and body) must fit in it.
    """

    timeout: Optional[float] = None
    """
    Socket timeout in seconds for connections built by Connection.from_config().
    None = block indefinitely.
    """

    # ─────────────────────────────────────────────────────────────────────
    # WRITING
    # ─────────────────────────────────────────────────────────────────────

    compression_level: int = 1
    """
    Level used when a response asks for an encoding but not a level.
    0 = store only, 1 = fast, 9 = best (brotli goes up to 11).
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    JSON is better for log aggregators, text for human reading.
    """

    @classmethod
    def from_env(cls) -> "CodecConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPCODEC_BUFFER_SIZE        Read size in bytes (default: 2048)
        HTTPCODEC_TIMEOUT            Socket timeout in seconds (default: none)
        HTTPCODEC_COMPRESSION_LEVEL  Default level (default: 1)
        HTTPCODEC_LOG_LEVEL          Logging level (default: INFO)
        HTTPCODEC_LOG_FORMAT         text or json (default: text)

        =====================================================================
        """
        timeout = os.getenv("HTTPCODEC_TIMEOUT")
        return cls(
            buffer_size=int(os.getenv("HTTPCODEC_BUFFER_SIZE", "2048")),
            timeout=float(timeout) if timeout else None,
            compression_level=int(os.getenv("HTTPCODEC_COMPRESSION_LEVEL", "1")),
            log_level=os.getenv("HTTPCODEC_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("HTTPCODEC_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Check every value, raising ValueError on the first bad one.
        """
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {self.buffer_size}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not 0 <= self.compression_level <= 11:
            raise ValueError(
                f"Invalid compression_level: {self.compression_level}. Must be 0-11."
            )

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")

