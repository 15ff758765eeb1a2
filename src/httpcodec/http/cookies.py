"""
=============================================================================
COOKIES
=============================================================================

Request side: parse the Cookie header into (name, value) pairs.
Response side: build the value of a Set-Cookie header.

=============================================================================
THE TWO DIRECTIONS
=============================================================================

    Browser ──► Server                    Server ──► Browser
    ─────────────────                     ─────────────────
    Cookie: session=abc%201; theme=dark   Set-Cookie: session=abc;Max-Age=3600;Path=/;HttpOnly
            ───────┬──────── ────┬────                ───────────────────┬────────────────────
                   │             │                                       │
             RequestCookie  RequestCookie                         ResponseCookie
           ("session","abc 1") ("theme","dark")        (one cookie + its attributes)

The request side only ever carries name=value pairs, so that is all
RequestCookie holds. Attributes (Max-Age, Path, ...) travel only from
server to client, so ResponseCookie is build-only: nothing here parses a
Set-Cookie header.

=============================================================================
PARSING RULES
=============================================================================

- Pairs are separated by "; " (semicolon + space, as browsers send).
- Each pair splits on its first "=": base64 values keep their padding.
- An empty name, a pair with no "=", or a value that does not
  percent-decode to UTF-8 fails the whole header.

=============================================================================
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Union
from urllib.parse import quote, unquote

from .errors import CookieParseError


@dataclass(frozen=True)
class RequestCookie:
    """A cookie sent by the client: name and percent-decoded value."""

    name: str
    value: str


def parse_cookies(raw: str) -> List[RequestCookie]:
    """
    Parse a Cookie header value.

    Args:
        raw: "a=1; b=hello%20world"

    Returns:
        Cookies in the order sent

    Raises:
        CookieParseError: On a malformed pair, empty name, or bad value.
    """
    cookies = []

    for pair in raw.split("; "):
        name, equals, value = pair.partition("=")

        if not equals:
            raise CookieParseError(f"Invalid cookie pair: {pair!r}")

        if not name:
            raise CookieParseError(f"Invalid cookie name in pair: {pair!r}")

        try:
            value = unquote(value, errors="strict")
        except UnicodeDecodeError:
            raise CookieParseError(f"Invalid cookie value for {name!r}")

        cookies.append(RequestCookie(name, value))

    return cookies


def format_cookies(cookies: Iterable[RequestCookie]) -> str:
    """
    Render cookies as a Cookie header value.

    Values are percent-encoded so that parse_cookies() gets them back.
    """
    return "; ".join(f"{cookie.name}={quote(cookie.value, safe='')}" for cookie in cookies)


@dataclass
class ResponseCookie:
    """
    A cookie the server asks the client to store.

    Attributes:
        name, value: The cookie itself (value is sent as given)
        max_age:     Seconds until expiry (Max-Age)
        expires:     Absolute expiry; a datetime is rendered as an HTTP-date
        path:        URL path prefix the cookie applies to
        domain:      Domain the cookie applies to
        secure:      Only send over HTTPS
        http_only:   Hide from JavaScript (document.cookie)
    """

    name: str
    value: str
    max_age: Optional[int] = None
    expires: Optional[Union[str, datetime]] = None
    path: Optional[str] = None
    domain: Optional[str] = None
    secure: bool = False
    http_only: bool = False

    def format(self) -> str:
        """
        Build the Set-Cookie value.

        Attributes follow in a fixed order:
        Max-Age, Expires, Path, Domain, Secure, HttpOnly.

        Example:
            >>> ResponseCookie("id", "42", max_age=60, http_only=True).format()
            'id=42;Max-Age=60;HttpOnly'
        """
        parts = [f"{self.name}={self.value}"]

        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")

        if self.expires is not None:
            expires = self.expires
            if isinstance(expires, datetime):
                expires = format_http_date(expires)
            parts.append(f"Expires={expires}")

        if self.path is not None:
            parts.append(f"Path={self.path}")

        if self.domain is not None:
            parts.append(f"Domain={self.domain}")

        if self.secure:
            parts.append("Secure")

        if self.http_only:
            parts.append("HttpOnly")

        return ";".join(parts)

    def __str__(self) -> str:
        return self.format()


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Thu, 01 Jan 2026 12:00:00 GMT

    HTTP dates are always GMT. Pass a UTC datetime.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
