"""
=============================================================================
ACCEPT-ENCODING NEGOTIATION
=============================================================================

Parses the client's Accept-Encoding header and answers one question:
"may I send this body compressed with X?"

=============================================================================
HEADER FORMAT
=============================================================================

    Accept-Encoding: gzip, deflate;q=0, br;q=1, *
                     ──┬─  ───┬───────  ──┬───  ┬
                       │      │           │     │
                    token  token+weight   │   wildcard
                                          │
                            quality weight (stored, not ranked)

=============================================================================
NEGOTIATION RULE
=============================================================================

An encoding is acceptable if ANY entry names it exactly, or any entry is
the wildcard "*". The first structural match wins.

Quality weights are parsed and kept so the header can be re-emitted, but
they are NOT consulted: "br;q=0" still accepts br. This is a deliberate
simplification of RFC 7231 §5.3.4 weighted negotiation.

Parsing is strict. An unknown token ("zstd", "identity") rejects the
whole header rather than being skipped.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from .compression import BodyEncoding
from .errors import AcceptEncodingParseError


class Encoding(Enum):
    """Tokens allowed in an Accept-Encoding entry."""

    GZIP = "gzip"
    DEFLATE = "deflate"
    BR = "br"
    ANY = "*"


# Which Accept-Encoding token names which body encoding
_BODY_ENCODINGS = {
    Encoding.GZIP: BodyEncoding.GZIP,
    Encoding.DEFLATE: BodyEncoding.DEFLATE,
    Encoding.BR: BodyEncoding.BROTLI,
}


@dataclass(frozen=True)
class AcceptEncoding:
    """One entry of an Accept-Encoding list."""

    encoding: Encoding
    quality: Optional[float] = None

    @classmethod
    def parse(cls, raw: str) -> "AcceptEncoding":
        """
        Parse "token[;q=weight]".

        An unparseable weight is stored as None rather than failing.

        Raises:
            AcceptEncodingParseError: If the token is not recognised.
        """
        token, _, params = raw.partition(";")
        token = token.strip()

        try:
            encoding = Encoding(token)
        except ValueError:
            raise AcceptEncodingParseError(f"Unsupported encoding: {token!r}")

        quality = None
        if params:
            _, equals, weight = params.partition("=")
            if equals:
                try:
                    quality = float(weight.strip())
                except ValueError:
                    quality = None

        return cls(encoding, quality)

    def accepts(self, candidate: BodyEncoding) -> bool:
        if self.encoding is Encoding.ANY:
            return True
        return _BODY_ENCODINGS[self.encoding] is candidate

    def __str__(self) -> str:
        if self.quality is None:
            return self.encoding.value
        return f"{self.encoding.value};q={self.quality:g}"


@dataclass(frozen=True)
class AcceptEncodings:
    """The parsed Accept-Encoding header: entries in the order sent."""

    entries: List[AcceptEncoding] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> "AcceptEncodings":
        """
        Parse a comma-separated Accept-Encoding value.

        Empty entries (", ,") are skipped.

        Raises:
            AcceptEncodingParseError: If any entry has an unknown token.
        """
        entries = [
            AcceptEncoding.parse(part)
            for part in raw.split(",")
            if part.strip()
        ]
        return cls(entries)

    def accepts(self, candidate: BodyEncoding) -> bool:
        """True if any entry names the candidate or is the wildcard."""
        return any(entry.accepts(candidate) for entry in self.entries)

    def __iter__(self) -> Iterator[AcceptEncoding]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return ", ".join(str(entry) for entry in self.entries)


def accepts(encodings: AcceptEncodings, candidate: BodyEncoding) -> bool:
    """
    Check whether a parsed Accept-Encoding list allows an encoding.

    Examples:
        >>> accepts(AcceptEncodings.parse("gzip, br;q=1"), BodyEncoding.BROTLI)
        True
        >>> accepts(AcceptEncodings.parse("gzip"), BodyEncoding.BROTLI)
        False
    """
    return encodings.accepts(candidate)
