"""Upload a local file or directory to an S3 bucket as a build pipeline step."""

__version__ = "1.0.0"

from .config import ConfigManager, UploadRequest
from .exceptions import AuthError, ConfigurationError, ErrorKind, S3UploadError, UploadError
from .main import S3UploadStep

__all__ = [
    "AuthError",
    "ConfigManager",
    "ConfigurationError",
    "ErrorKind",
    "S3UploadError",
    "S3UploadStep",
    "UploadError",
    "UploadRequest",
]
