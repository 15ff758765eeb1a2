"""
Unit tests for status codes.
"""

from httpcodec.http.status_codes import (
    CustomStatus,
    HTTPStatus,
    UnknownStatus,
    status_from_code,
)


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test reason phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.FOUND.phrase == "Found"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"

    def test_text(self):
        """Test the status-line rendering."""
        assert HTTPStatus.OK.text == "200 OK"
        assert HTTPStatus.NO_CONTENT.text == "204 No Content"

    def test_every_member_has_phrase(self):
        """Test that no member is missing from the phrase table."""
        for status in HTTPStatus:
            assert status.phrase

    def test_is_int(self):
        """Test that statuses compare as integers."""
        assert HTTPStatus.OK == 200
        assert HTTPStatus.NOT_FOUND.code == 404


class TestOtherStatuses:
    """Tests for UnknownStatus, CustomStatus and status_from_code."""

    def test_from_known_code(self):
        """Test mapping a standard code."""
        assert status_from_code(404) is HTTPStatus.NOT_FOUND

    def test_from_unknown_code(self):
        """Test that unknown codes keep their number."""
        status = status_from_code(299)

        assert status == UnknownStatus(299)
        assert status.text == "299 Unknown"

    def test_custom(self):
        """Test a custom reason phrase."""
        status = CustomStatus(418, "I'm a teapot")

        assert status.code == 418
        assert status.text == "418 I'm a teapot"
