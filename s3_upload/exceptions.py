"""Custom exception definitions for the S3 upload step."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure categories, each with the process exit code it maps to."""

    CONFIGURATION = 2
    AUTH = 3
    UPLOAD = 4

    @property
    def exit_code(self) -> int:
        return self.value


class S3UploadError(Exception):
    """Base exception for the package."""

    kind: ErrorKind = ErrorKind.UPLOAD

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(S3UploadError):
    """Raised when inputs, configuration or the target bucket are unusable."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(ConfigurationError):
    """Raised when configuration file validation fails."""


class AuthError(S3UploadError):
    """Raised when credentials cannot be resolved or are rejected."""

    kind = ErrorKind.AUTH


class UploadError(S3UploadError):
    """Raised when a transfer does not reach the completed state."""

    kind = ErrorKind.UPLOAD
