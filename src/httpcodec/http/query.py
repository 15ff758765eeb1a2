"""
=============================================================================
QUERY STRING CODEC
=============================================================================

Parses and produces the "?key=value&key=value" part of a URI.

=============================================================================
QUERY STRING ANATOMY
=============================================================================

    /search?tag=python&tag=http&q=hello+world
           ────────────────┬─────────────────
                           │
             ┌─────────────┼──────────────────┐
             │             │                  │
          tag=python    tag=http        q=hello+world
             │             │                  │
             └──────┬──────┘                  │
                    ▼                         ▼
        "tag" → ["python", "http"]    "q" → ["hello world"]

Rules:
- A leading "?" is ignored.
- Segments are separated by "&" and each must hold exactly one "=".
- Keys and values are percent-decoded ("%20" → " ") and "+" means space.
- A repeated key appends to the value list of the first occurrence, so
  a key never appears twice and first-seen order is kept.

Parsing is all-or-nothing: one bad segment fails the whole string.

=============================================================================
WHY NOT urllib.parse.parse_qs?
=============================================================================

parse_qs returns a plain dict and silently drops malformed segments
("a=1&b" gives {"a": ["1"]}). We want the malformed case reported, and we
want a type that can format itself back onto the wire.

=============================================================================
"""

from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote, unquote_plus

from .errors import QueryParseError


class QueryParams:
    """
    Ordered collection of query parameters, key → list of values.

    Example:
        >>> params = QueryParams.parse("?a=1&b=2&a=3")
        >>> params.get("a")
        ['1', '3']
        >>> list(params.keys())
        ['a', 'b']
        >>> str(params)
        '?a=1&a=3&b=2'
    """

    def __init__(self, items: Optional[List[Tuple[str, List[str]]]] = None):
        # dicts keep insertion order, which is the key order on the wire
        self._params: Dict[str, List[str]] = {}
        for key, values in items or []:
            for value in values:
                self.add(key, value)

    # =========================================================================
    # PARSING
    # =========================================================================

    @classmethod
    def empty(cls) -> "QueryParams":
        return cls()

    @classmethod
    def parse(cls, raw: str) -> "QueryParams":
        """
        Parse a query string.

        Args:
            raw: "a=1&b=2", with or without the leading "?"

        Returns:
            Parsed QueryParams (empty for "" and "?")

        Raises:
            QueryParseError: If any segment is not exactly one key=value pair.
        """
        if raw.startswith("?"):
            raw = raw[1:]

        params = cls()
        if not raw:
            return params

        for segment in raw.split("&"):
            key, value = _parse_pair(segment)
            params.add(key, value)

        return params

    # =========================================================================
    # FORMATTING
    # =========================================================================

    def format(self) -> str:
        """
        Render as a query string.

        Each key/value pair is percent-encoded. A non-empty set gets a
        leading "?", an empty one renders as "" so it can be appended to a
        path unconditionally.
        """
        if not self._params:
            return ""

        pairs = [
            f"{quote(key, safe='')}={quote(value, safe='')}"
            for key, values in self._params.items()
            for value in values
        ]
        return "?" + "&".join(pairs)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"QueryParams({list(self._params.items())!r})"

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get(self, key: str) -> Optional[List[str]]:
        """All values for a key, or None if absent."""
        return self._params.get(key)

    def get_first(self, key: str, default: Optional[str] = None) -> Optional[str]:
        values = self._params.get(key)
        return values[0] if values else default

    def add(self, key: str, value: str) -> None:
        """Append a value, merging into an existing key if there is one."""
        self._params.setdefault(key, []).append(value)

    def remove(self, key: str) -> None:
        """
        Remove a key and all of its values.

        Raises:
            KeyError: If the key is not present.
        """
        del self._params[key]

    def keys(self) -> Iterator[str]:
        return iter(self._params.keys())

    def values(self) -> Iterator[List[str]]:
        return iter(self._params.values())

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        return iter(self._params.items())

    def to_dict(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._params.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return self.keys()

    def __len__(self) -> int:
        return len(self._params)

    def __bool__(self) -> bool:
        return bool(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return list(self._params.items()) == list(other._params.items())


def _parse_pair(segment: str) -> Tuple[str, str]:
    """Split and decode one "key=value" segment."""
    parts = segment.split("=")
    if len(parts) != 2:
        raise QueryParseError(f"Invalid query parameter: {segment!r}")

    key, value = parts
    return unquote_plus(key), unquote_plus(value)
