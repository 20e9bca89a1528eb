"""Tests for the error-kind taxonomy."""

import pytest

from s3_upload.exceptions import (
    AuthError,
    ConfigurationError,
    ErrorKind,
    S3UploadError,
    UploadError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc_cls, kind, exit_code",
    [
        (ConfigurationError, ErrorKind.CONFIGURATION, 2),
        (ValidationError, ErrorKind.CONFIGURATION, 2),
        (AuthError, ErrorKind.AUTH, 3),
        (UploadError, ErrorKind.UPLOAD, 4),
    ],
)
def test_kinds(exc_cls, kind, exit_code):
    error = exc_cls("message")
    assert isinstance(error, S3UploadError)
    assert error.kind is kind
    assert error.kind.exit_code == exit_code
    assert error.message == str(error) == "message"
