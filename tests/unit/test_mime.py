"""
Unit tests for media type parsing.
"""

import pytest

from httpcodec.http.mime import Mime, MimeType
from httpcodec.http.errors import MimeParseError


class TestMimeParse:
    """Tests for Mime.parse."""

    def test_parse_simple(self):
        """Test a plain type/subtype."""
        mime = Mime.parse("text/html")

        assert mime.type is MimeType.TEXT
        assert mime.subtype == "html"
        assert mime.parameter is None

    def test_parse_with_parameter(self):
        """Test a type with a charset parameter."""
        mime = Mime.parse("text/html; charset=utf-8")

        assert mime.parameter == ("charset", "utf-8")
        assert str(mime) == "text/html;charset=utf-8"

    def test_only_first_parameter_kept(self):
        """Test that later parameters are ignored."""
        mime = Mime.parse("multipart/form-data;boundary=xyz;charset=utf-8")

        assert mime.parameter == ("boundary", "xyz")

    def test_custom_type(self):
        """Test that unknown top-level types are kept as strings."""
        mime = Mime.parse("multipart/form-data")

        assert mime.type == "multipart"
        assert mime.is_custom
        assert mime.essence == "multipart/form-data"

    def test_type_is_case_sensitive(self):
        """Test that "Text" is not the text type."""
        assert Mime.parse("Text/plain").type == "Text"

    def test_missing_slash_fails(self):
        """Test that a type without a subtype is rejected."""
        with pytest.raises(MimeParseError):
            Mime.parse("text")

    def test_parameter_without_equals_fails(self):
        """Test that a parameter must be key=value."""
        with pytest.raises(MimeParseError):
            Mime.parse("text/html;charset")


class TestMimeConstruction:
    """Tests for the constructors and extension lookup."""

    def test_convenience_constructors(self):
        """Test one constructor per top-level type."""
        assert str(Mime.application("json")) == "application/json"
        assert str(Mime.image("png")) == "image/png"
        assert str(Mime.custom("font", "woff2")) == "font/woff2"

    def test_with_parameter(self):
        """Test adding a parameter."""
        mime = Mime.text("plain").with_parameter("charset", "utf-8")

        assert str(mime) == "text/plain;charset=utf-8"

    def test_from_extension(self):
        """Test the extension table."""
        assert str(Mime.from_extension("txt")) == "text/plain"
        assert str(Mime.from_extension(".html")) == "text/html"
        assert str(Mime.from_extension("js")) == "application/javascript"
        assert str(Mime.from_extension("mp3")) == "audio/mpeg"
        assert str(Mime.from_extension("mp4")) == "video/mp4"

    def test_from_extension_default(self):
        """Test the fallback for unknown extensions."""
        fallback = Mime.application("octet-stream")

        assert Mime.from_extension("xyz") is None
        assert Mime.from_extension("xyz", fallback) == fallback

    def test_equality(self):
        """Test that parsed and constructed values compare equal."""
        assert Mime.parse("text/plain") == Mime.text("plain")
