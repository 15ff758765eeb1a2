"""
=============================================================================
MIME TYPES
=============================================================================

Parses and produces media types as they appear in Content-Type headers.

=============================================================================
ANATOMY OF A MEDIA TYPE
=============================================================================

    text/html;charset=utf-8
    ─┬── ─┬── ──────┬──────
     │    │         │
    type subtype  parameter (at most one is recognised)

The top-level type is a small closed set registered with IANA:

    text, application, audio, image, message, model, video

Anything else ("font", "multipart", "x-custom") is kept as a plain string
so it still round-trips through the codec unchanged.

=============================================================================
LIMITATIONS
=============================================================================

1. ONE PARAMETER:
   "text/html;charset=utf-8;q=1" keeps charset=utf-8 and drops the rest.
   Multi-parameter media types are not modelled.

2. CASE:
   The top-level type is matched case-sensitively, so "TEXT/html" becomes
   a custom type "TEXT". Browsers always send lowercase.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import MimeParseError


class MimeType(Enum):
    """Registered top-level media types."""

    TEXT = "text"
    APPLICATION = "application"
    AUDIO = "audio"
    IMAGE = "image"
    MESSAGE = "message"
    MODEL = "model"
    VIDEO = "video"


# =============================================================================
# EXTENSION TABLE
# =============================================================================
#
# Intentionally small. Extensions are matched without their leading dot.
#
EXTENSION_TYPES = {
    "txt": "text/plain",
    "html": "text/html",
    "js": "application/javascript",
    "mp3": "audio/mpeg",
    "mp4": "video/mp4",
}


@dataclass(frozen=True)
class Mime:
    """
    A parsed media type.

    Attributes:
        type:      MimeType member, or the raw string for a custom type
        subtype:   "html", "json", "svg+xml", ...
        parameter: Optional (key, value) pair, e.g. ("charset", "utf-8")
    """

    type: Union[MimeType, str]
    subtype: str
    parameter: Optional[Tuple[str, str]] = None

    @classmethod
    def new(
        cls,
        type_: str,
        subtype: str,
        parameter: Optional[Tuple[str, str]] = None,
    ) -> "Mime":
        """Build a Mime, classifying the top-level type."""
        try:
            kind: Union[MimeType, str] = MimeType(type_)
        except ValueError:
            kind = type_
        return cls(kind, subtype, parameter)

    @classmethod
    def parse(cls, raw: str) -> "Mime":
        """
        Parse "type/subtype[;key=value]".

        Raises:
            MimeParseError: If there is no "/" or the parameter has no "=".
        """
        type_, slash, rest = raw.partition("/")
        if not slash:
            raise MimeParseError(f"Invalid MIME type: {raw!r}")

        # Only the text up to a further "/" is the subtype
        rest = rest.split("/", 1)[0]

        subtype, semicolon, params = rest.partition(";")
        parameter = None

        if semicolon:
            # Only the first parameter is recognised
            first = params.split(";", 1)[0]
            key, equals, value = first.partition("=")
            if not equals:
                raise MimeParseError(f"Invalid MIME parameter: {first!r}")
            parameter = (key.strip(), value.strip())

        return cls.new(type_.strip(), subtype.strip(), parameter)

    @classmethod
    def from_extension(
        cls,
        extension: str,
        default: Optional["Mime"] = None,
    ) -> Optional["Mime"]:
        """
        Look up the media type for a file extension.

        Args:
            extension: "txt", ".html", "..js" - leading dots are ignored
            default: Returned when the extension is not in the table

        Examples:
            >>> str(Mime.from_extension(".html"))
            'text/html'
            >>> Mime.from_extension("xyz") is None
            True
        """
        raw = EXTENSION_TYPES.get(extension.lstrip("."))
        if raw is None:
            return default

        try:
            return cls.parse(raw)
        except MimeParseError:
            return default

    # -------------------------------------------------------------------------
    # Convenience constructors
    # -------------------------------------------------------------------------

    @classmethod
    def text(cls, subtype: str) -> "Mime":
        return cls(MimeType.TEXT, subtype)

    @classmethod
    def application(cls, subtype: str) -> "Mime":
        return cls(MimeType.APPLICATION, subtype)

    @classmethod
    def audio(cls, subtype: str) -> "Mime":
        return cls(MimeType.AUDIO, subtype)

    @classmethod
    def image(cls, subtype: str) -> "Mime":
        return cls(MimeType.IMAGE, subtype)

    @classmethod
    def message(cls, subtype: str) -> "Mime":
        return cls(MimeType.MESSAGE, subtype)

    @classmethod
    def model(cls, subtype: str) -> "Mime":
        return cls(MimeType.MODEL, subtype)

    @classmethod
    def video(cls, subtype: str) -> "Mime":
        return cls(MimeType.VIDEO, subtype)

    @classmethod
    def custom(cls, type_: str, subtype: str) -> "Mime":
        return cls(type_, subtype)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def is_custom(self) -> bool:
        return not isinstance(self.type, MimeType)

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, MimeType) else self.type

    @property
    def essence(self) -> str:
        """The media type without its parameter: "text/html"."""
        return f"{self.type_name}/{self.subtype}"

    def with_parameter(self, key: str, value: str) -> "Mime":
        return Mime(self.type, self.subtype, (key, value))

    def __str__(self) -> str:
        if self.parameter is None:
            return self.essence
        key, value = self.parameter
        return f"{self.essence};{key}={value}"
