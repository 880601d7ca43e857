"""Unit tests for upload validation ordering and error details."""

import pytest

from docvault.documents.settings import DEFAULT_ALLOWED_TYPES
from docvault.documents.validation import validate_upload
from docvault.exceptions import (
    ErrorCode,
    FileTooLargeError,
    InvalidFileTypeError,
    ValidationError,
)

ALLOWED = list(DEFAULT_ALLOWED_TYPES)


def _validate(data=b"hello", content_type="text/plain", title="Notes", max_bytes=10):
    return validate_upload(data, content_type, title, max_bytes=max_bytes, allowed_types=ALLOWED)


class TestValidateUpload:
    def test_returns_trimmed_title(self):
        assert _validate(title="  Quarterly report \n") == "Quarterly report"

    def test_missing_file(self):
        with pytest.raises(ValidationError) as exc:
            _validate(data=None)
        assert exc.value.code == ErrorCode.INVALID_INPUT
        assert exc.value.user_message == "File is required"

    @pytest.mark.parametrize("title", [None, "", "   \t"])
    def test_blank_title(self, title):
        with pytest.raises(ValidationError) as exc:
            _validate(title=title)
        assert exc.value.code == ErrorCode.INVALID_INPUT
        assert exc.value.user_message == "Title is required"

    def test_exactly_at_limit_is_accepted(self):
        assert _validate(data=b"x" * 10, max_bytes=10) == "Notes"

    def test_one_byte_over_limit(self):
        with pytest.raises(FileTooLargeError) as exc:
            _validate(data=b"x" * 11, max_bytes=10)
        assert exc.value.code == ErrorCode.FILE_TOO_LARGE
        assert exc.value.status_code == 400
        assert exc.value.details == {"maxBytes": 10, "actualBytes": 11}

    def test_disallowed_type_lists_allow_list_in_order(self):
        with pytest.raises(InvalidFileTypeError) as exc:
            _validate(content_type="application/zip")
        assert exc.value.code == ErrorCode.INVALID_FILE_TYPE
        assert exc.value.details == {"allowedTypes": ALLOWED, "providedType": "application/zip"}
        assert exc.value.details["allowedTypes"][0] == "application/pdf"
        assert exc.value.details["allowedTypes"][-1] == "image/gif"

    def test_missing_file_wins_over_blank_title(self):
        with pytest.raises(ValidationError) as exc:
            _validate(data=None, title="")
        assert exc.value.user_message == "File is required"

    def test_size_checked_before_type(self):
        with pytest.raises(FileTooLargeError):
            _validate(data=b"x" * 50, content_type="application/zip", max_bytes=10)

    def test_empty_file_is_allowed(self):
        assert _validate(data=b"") == "Notes"
