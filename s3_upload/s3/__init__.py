"""S3 integration helpers."""

from .client import bucket_exists, create_s3_client, validate_region
from .credentials import Credentials, resolve_credentials
from .transfer import CannedAcl, Transfer, TransferState, object_acl_policy
from .uploader import S3Uploader, TransferOutcome

__all__ = [
    "CannedAcl",
    "Credentials",
    "S3Uploader",
    "Transfer",
    "TransferOutcome",
    "TransferState",
    "bucket_exists",
    "create_s3_client",
    "object_acl_policy",
    "resolve_credentials",
    "validate_region",
]
