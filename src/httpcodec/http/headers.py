"""
=============================================================================
TYPED HEADERS
=============================================================================

Every header the codec understands has its own class that knows how to
parse its value on the way in and format it on the way out. Anything
else becomes an UnknownHeader and passes through verbatim.

=============================================================================
THE HEADER FAMILY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           Header                                     │
    ├──────────────────────┬──────────────────────────────────────────────┤
    │ Class                │ Decoded value                                │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ ContentLengthHeader  │ int            "42"                          │
    │ ContentTypeHeader    │ Mime           "text/html;charset=utf-8"     │
    │ AcceptEncodingHeader │ AcceptEncodings "gzip, br;q=1"               │
    │ CookieHeader         │ [RequestCookie] "a=1; b=2"                   │
    │ SetCookieHeader      │ ResponseCookie "id=1;Path=/"  (emit only)    │
    │ CacheControlHeader   │ [CacheDirective] "no-cache, max-age=60"      │
    │ PragmaHeader         │ [CacheDirective] "no-cache"                  │
    │ ConnectionHeader     │ ConnectionOption | str  "keep-alive"         │
    │ DNTHeader            │ DntPreference  "1"                           │
    │ ContentEncodingHeader│ [BodyEncoding] "gzip"                        │
    │ HostHeader, ...      │ str            (kept as sent)                │
    │ UnknownHeader        │ (name, str)    anything else                 │
    └──────────────────────┴──────────────────────────────────────────────┘

=============================================================================
NAMES AND CASE
=============================================================================

HTTP header names are case-insensitive (RFC 7230 §3.2). On the way in we
classify by the lower-cased name; on the way out each class writes its
canonical spelling:

    "content-length: 5"  ──parse──►  ContentLengthHeader(5)
                         ──format─►  "Content-Length: 5\r\n"

Unknown headers keep the name exactly as received.

=============================================================================
FAILURE POLICY
=============================================================================

A recognised header whose value does not parse is an error
(HeaderParseError), never silently dropped. Two exceptions:

- Cache-Control / Pragma: unrecognised directives are dropped.
- Connection: unrecognised options are kept as raw strings.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterable, List, Optional, Type, Union

from .accept import AcceptEncodings
from .compression import BodyEncoding
from .cookies import RequestCookie, ResponseCookie, format_cookies, parse_cookies
from .errors import HeaderParseError, HTTPParseError
from .mime import Mime


def _parse_unsigned(text: str) -> Optional[int]:
    """Parse a non-negative decimal integer, or return None."""
    text = text.strip()
    if not text.isascii() or not text.isdigit():
        return None
    return int(text)


# =============================================================================
# BASE CLASS
# =============================================================================

class Header:
    """
    Base of the header family.

    Subclasses set `name` to the canonical header name and implement
    parse() and format_value().
    """

    name: ClassVar[str] = ""

    @classmethod
    def parse(cls, raw: str) -> "Header":
        raise NotImplementedError

    def format_value(self) -> str:
        raise NotImplementedError

    def to_line(self) -> str:
        """Render as a wire line: "Name: value\\r\\n"."""
        return f"{self.name}: {self.format_value()}\r\n"


# =============================================================================
# PLAIN TEXT HEADERS
# =============================================================================
#
# Headers whose value the codec does not interpret. The string is kept
# exactly as received.
#

@dataclass(frozen=True)
class TextHeader(Header):
    value: str

    @classmethod
    def parse(cls, raw: str) -> "TextHeader":
        return cls(raw)

    def format_value(self) -> str:
        return self.value


class HostHeader(TextHeader):
    name = "Host"


class UserAgentHeader(TextHeader):
    name = "User-Agent"


class AcceptHeader(TextHeader):
    name = "Accept"


class AcceptLanguageHeader(TextHeader):
    name = "Accept-Language"


class AcceptCharsetHeader(TextHeader):
    name = "Accept-Charset"


class AcceptDatetimeHeader(TextHeader):
    name = "Accept-Datetime"


class AcceptRangesHeader(TextHeader):
    name = "Accept-Ranges"


class DateHeader(TextHeader):
    name = "Date"


class TrailerHeader(TextHeader):
    name = "Trailer"


class TransferEncodingHeader(TextHeader):
    name = "Transfer-Encoding"


class UpgradeHeader(TextHeader):
    name = "Upgrade"


class ServerHeader(TextHeader):
    name = "Server"


class OriginHeader(TextHeader):
    name = "Origin"


class LocationHeader(TextHeader):
    name = "Location"


# =============================================================================
# CONNECTION / PROXY-CONNECTION
# =============================================================================

class ConnectionOption(Enum):
    KEEP_ALIVE = "keep-alive"
    CLOSE = "close"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class ConnectionHeader(Header):
    """
    Connection: keep-alive | close | upgrade

    Matched case-insensitively. Other options ("TE", custom tokens) are
    kept as the raw string.
    """

    name = "Connection"

    value: Union[ConnectionOption, str]

    @classmethod
    def parse(cls, raw: str) -> "ConnectionHeader":
        try:
            return cls(ConnectionOption(raw.strip().lower()))
        except ValueError:
            return cls(raw)

    def format_value(self) -> str:
        if isinstance(self.value, ConnectionOption):
            return self.value.value
        return self.value


class ProxyConnectionHeader(ConnectionHeader):
    name = "Proxy-Connection"


# =============================================================================
# CONTENT-LENGTH / CONTENT-TYPE / CONTENT-ENCODING
# =============================================================================

@dataclass(frozen=True)
class ContentLengthHeader(Header):
    name = "Content-Length"

    value: int

    @classmethod
    def parse(cls, raw: str) -> "ContentLengthHeader":
        length = _parse_unsigned(raw)
        if length is None:
            raise HeaderParseError(f"Invalid Content-Length: {raw!r}")
        return cls(length)

    def format_value(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContentTypeHeader(Header):
    name = "Content-Type"

    value: Mime

    @classmethod
    def parse(cls, raw: str) -> "ContentTypeHeader":
        return cls(Mime.parse(raw))

    def format_value(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContentEncodingHeader(Header):
    """Content-Encoding: the codecs applied to the body, in order."""

    name = "Content-Encoding"

    value: List[BodyEncoding] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> "ContentEncodingHeader":
        encodings = []
        for token in raw.split(","):
            if not token.strip():
                continue
            try:
                encodings.append(BodyEncoding.from_token(token))
            except ValueError:
                raise HeaderParseError(f"Unsupported content encoding: {token.strip()!r}")
        return cls(encodings)

    def format_value(self) -> str:
        return ", ".join(encoding.token for encoding in self.value)


# =============================================================================
# NEGOTIATION AND COOKIES
# =============================================================================

@dataclass(frozen=True)
class AcceptEncodingHeader(Header):
    name = "Accept-Encoding"

    value: AcceptEncodings

    @classmethod
    def parse(cls, raw: str) -> "AcceptEncodingHeader":
        return cls(AcceptEncodings.parse(raw))

    def format_value(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CookieHeader(Header):
    name = "Cookie"

    value: List[RequestCookie] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> "CookieHeader":
        return cls(parse_cookies(raw))

    def format_value(self) -> str:
        return format_cookies(self.value)

    def get(self, name: str) -> Optional[RequestCookie]:
        """First cookie with the given name, compared case-insensitively."""
        wanted = name.lower()
        for cookie in self.value:
            if cookie.name.lower() == wanted:
                return cookie
        return None


@dataclass(frozen=True)
class SetCookieHeader(Header):
    """
    Set-Cookie is emitted by responses only.

    A Set-Cookie line arriving in a request is not interpreted and comes
    through as an UnknownHeader.
    """

    name = "Set-Cookie"

    value: ResponseCookie

    def format_value(self) -> str:
        return self.value.format()


# =============================================================================
# CACHE-CONTROL / PRAGMA
# =============================================================================
#
#   Cache-Control: public, max-age=3600, stale-if-error=60, foo
#                  ──┬───  ─────┬──────  ───────┬─────────  ─┬─
#                    │          │               │            │
#                  bare    key=integer     key=integer   dropped
#

BARE_CACHE_DIRECTIVES = frozenset({
    "no-cache",
    "must-revalidate",
    "proxy-revalidate",
    "no-store",
    "private",
    "public",
    "must-understand",
    "no-transform",
    "immutable",
    "only-if-cached",
})

INTEGER_CACHE_DIRECTIVES = frozenset({
    "max-age",
    "stale-while-revalidate",
    "stale-if-error",
    "max-stale",
    "min-fresh",
})


@dataclass(frozen=True)
class CacheDirective:
    """One Cache-Control directive: a bare token or key=seconds."""

    name: str
    value: Optional[int] = None

    @classmethod
    def parse(cls, raw: str) -> Optional["CacheDirective"]:
        """Parse one directive, or return None if it is not recognised."""
        raw = raw.strip()
        key, equals, value = raw.partition("=")

        if equals:
            if key not in INTEGER_CACHE_DIRECTIVES:
                return None
            seconds = _parse_unsigned(value)
            return cls(key, seconds) if seconds is not None else None

        if raw in BARE_CACHE_DIRECTIVES:
            return cls(raw)
        return None

    @classmethod
    def parse_list(cls, raw: str) -> List["CacheDirective"]:
        directives = (cls.parse(part) for part in raw.split(","))
        return [directive for directive in directives if directive is not None]

    # Shorthands for the common ones
    @classmethod
    def max_age(cls, seconds: int) -> "CacheDirective":
        return cls("max-age", seconds)

    @classmethod
    def no_cache(cls) -> "CacheDirective":
        return cls("no-cache")

    @classmethod
    def no_store(cls) -> "CacheDirective":
        return cls("no-store")

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class CacheControlHeader(Header):
    name = "Cache-Control"

    value: List[CacheDirective] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> "CacheControlHeader":
        return cls(CacheDirective.parse_list(raw))

    def format_value(self) -> str:
        return ", ".join(str(directive) for directive in self.value)


class PragmaHeader(CacheControlHeader):
    name = "Pragma"


# =============================================================================
# DNT (Do Not Track)
# =============================================================================

class DntPreference(Enum):
    ALLOW_TRACKING = "0"
    NO_TRACKING = "1"
    NOT_SPECIFIED = "null"


@dataclass(frozen=True)
class DNTHeader(Header):
    """DNT: 0 | 1 | null, compared case-insensitively."""

    name = "DNT"

    value: DntPreference

    @classmethod
    def parse(cls, raw: str) -> "DNTHeader":
        try:
            return cls(DntPreference(raw.strip().lower()))
        except ValueError:
            raise HeaderParseError(f"Invalid DNT value: {raw!r}")

    def format_value(self) -> str:
        return self.value.value


# =============================================================================
# UNKNOWN
# =============================================================================

@dataclass(frozen=True)
class UnknownHeader(Header):
    """Any header outside the recognised set, name and value as sent."""

    # field() keeps the inherited class-level name from becoming a default
    name: str = field()
    value: str = field()

    @classmethod
    def parse(cls, raw: str) -> "UnknownHeader":
        raise TypeError("UnknownHeader needs a name; use parse_header()")

    def format_value(self) -> str:
        return self.value


# =============================================================================
# REGISTRY AND ENTRY POINTS
# =============================================================================

# Headers the request parser interprets, keyed by lower-cased name.
# SetCookieHeader is absent on purpose: it only travels server → client.
HEADER_TYPES: Dict[str, Type[Header]] = {
    cls.name.lower(): cls
    for cls in (
        ConnectionHeader,
        ProxyConnectionHeader,
        ContentLengthHeader,
        ContentTypeHeader,
        ContentEncodingHeader,
        HostHeader,
        UserAgentHeader,
        AcceptHeader,
        AcceptEncodingHeader,
        AcceptLanguageHeader,
        AcceptCharsetHeader,
        AcceptDatetimeHeader,
        AcceptRangesHeader,
        CacheControlHeader,
        PragmaHeader,
        CookieHeader,
        DateHeader,
        TrailerHeader,
        TransferEncodingHeader,
        UpgradeHeader,
        ServerHeader,
        OriginHeader,
        DNTHeader,
        LocationHeader,
    )
}


def parse_header(name: str, raw_value: str) -> Header:
    """
    Turn one (name, value) pair into a typed header.

    Args:
        name: Header name in any case
        raw_value: Header value as received

    Returns:
        The matching Header subclass, or UnknownHeader

    Raises:
        HeaderParseError: If a recognised header's value fails to parse.
    """
    header_type = HEADER_TYPES.get(name.lower())
    if header_type is None:
        return UnknownHeader(name, raw_value)

    try:
        return header_type.parse(raw_value)
    except HeaderParseError:
        raise
    except HTTPParseError as e:
        raise HeaderParseError(f"Invalid {header_type.name} header: {e}") from e


def format_header(header: Header) -> str:
    """Render a header as its wire line."""
    return header.to_line()


def find_header(headers: Iterable[Header], name: str) -> Optional[Header]:
    """First header whose name matches, compared case-insensitively."""
    wanted = name.lower()
    for header in headers:
        if header.name.lower() == wanted:
            return header
    return None
