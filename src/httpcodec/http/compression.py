"""
=============================================================================
BODY COMPRESSION
=============================================================================

The codecs a response body can be passed through before it goes on the
wire, and the levels they run at.

=============================================================================
SUPPORTED ENCODINGS
=============================================================================

    ┌──────────────┬───────────────┬──────────────────────────────────────┐
    │ Token        │ Library       │ Notes                                │
    ├──────────────┼───────────────┼──────────────────────────────────────┤
    │ gzip         │ gzip (stdlib) │ Universally supported                │
    │ deflate      │ zlib (stdlib) │ zlib-wrapped deflate stream          │
    │ br           │ brotli        │ Best ratio for text, more CPU        │
    └──────────────┴───────────────┴──────────────────────────────────────┘

The token is what goes into Content-Encoding and what the client lists
in Accept-Encoding.

=============================================================================
COMPRESSION LEVELS
=============================================================================

    NONE (0) ─── FAST (1) ──────────────────── BEST (9)
      │            │                              │
    store        default: cheap on CPU,      smallest output,
    only         good enough for dynamic     slowest
                 responses

Brotli accepts 0-11; the same numbers are passed straight through as its
"quality" setting.

=============================================================================
"""

import gzip
import zlib
from enum import Enum

import brotli

from .errors import CompressionError


class BodyEncoding(Enum):
    """Encodings the serializer can apply to a response body."""

    GZIP = "gzip"
    DEFLATE = "deflate"
    BROTLI = "br"

    @property
    def token(self) -> str:
        """Content-Encoding token for this encoding."""
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "BodyEncoding":
        """
        Map a Content-Encoding token to its encoding.

        Raises:
            ValueError: If the token is not gzip, deflate or br.
        """
        return cls(token.strip())


class CompressionLevel(int):
    """
    A compression level.

    A plain int underneath, with names for the levels callers actually
    reach for.
    """

    NONE: "CompressionLevel"
    FAST: "CompressionLevel"
    BEST: "CompressionLevel"

    def __repr__(self) -> str:
        return f"CompressionLevel({int(self)})"


CompressionLevel.NONE = CompressionLevel(0)
CompressionLevel.FAST = CompressionLevel(1)
CompressionLevel.BEST = CompressionLevel(9)

# Brotli window size (log2) used for every response.
BROTLI_WINDOW_BITS = 20


def compress(data: bytes, encoding: BodyEncoding, level: int = CompressionLevel.FAST) -> bytes:
    """
    Compress a body with the given encoding.

    Args:
        data: Uncompressed body bytes
        encoding: Which codec to run
        level: Compression level (see CompressionLevel)

    Returns:
        Compressed bytes

    Raises:
        CompressionError: If the codec rejects the input or the level.
    """
    try:
        if encoding is BodyEncoding.GZIP:
            return gzip.compress(data, compresslevel=level)

        if encoding is BodyEncoding.DEFLATE:
            return zlib.compress(data, level)

        if encoding is BodyEncoding.BROTLI:
            return brotli.compress(data, quality=level, lgwin=BROTLI_WINDOW_BITS)
    except (ValueError, OverflowError, zlib.error, brotli.error) as e:
        raise CompressionError(f"{encoding.token} compression failed: {e}") from e

    raise CompressionError(f"Unsupported encoding: {encoding!r}")


def decompress(data: bytes, encoding: BodyEncoding) -> bytes:
    """
    Undo compress().

    Not used when serializing. Handy for clients of the codec and for
    checking what was sent.
    """
    if encoding is BodyEncoding.GZIP:
        return gzip.decompress(data)

    if encoding is BodyEncoding.DEFLATE:
        return zlib.decompress(data)

    if encoding is BodyEncoding.BROTLI:
        return brotli.decompress(data)

    return data
