"""S3 client construction and bucket checks."""

from __future__ import annotations

import logging
from typing import Set

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
)

from ..exceptions import AuthError, ConfigurationError
from .credentials import Credentials, SessionFactory

LOGGER = logging.getLogger(__name__)

AUTH_ERROR_CODES = {
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "InvalidToken",
    "TokenRefreshRequired",
}
NOT_FOUND_CODES = {"404", "NoSuchBucket", "NotFound"}
FORBIDDEN_CODES = {"403", "AccessDenied", "Forbidden"}


def get_known_regions(session_factory: SessionFactory = boto3.session.Session) -> Set[str]:
    """Return every S3 region identifier botocore knows about, across partitions."""
    session = session_factory()
    regions: Set[str] = set()
    for partition in session.get_available_partitions():
        regions.update(session.get_available_regions("s3", partition_name=partition))
    return regions


def validate_region(region: str, session_factory: SessionFactory = boto3.session.Session) -> str:
    if not region:
        raise ConfigurationError("A region must be specified.")
    if region not in get_known_regions(session_factory):
        raise ConfigurationError(f"Unknown region: {region}")
    return region


def create_s3_client(credentials: Credentials, region: str):
    """Build an S3 client bound to the region from the session that resolved the credentials."""
    try:
        client = credentials.session.client("s3", region_name=region)
    except (NoCredentialsError, PartialCredentialsError) as exc:
        raise AuthError(f"Unable to create S3 client: {exc}") from exc
    except BotoCoreError as exc:  # pragma: no cover - depends on AWS
        raise ConfigurationError(f"Unable to create S3 client: {exc}") from exc

    LOGGER.debug("Created S3 client for region %s (credentials via %s)", region, credentials.method)
    return client


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _explain_forbidden_head(s3_client, bucket_name: str) -> bool:
    """Tell rejected credentials apart from a denied bucket after a bodiless HEAD 403.

    ListObjectsV2 returns an error document, so its code names the real cause.
    """
    try:
        s3_client.list_objects_v2(Bucket=bucket_name, MaxKeys=0)
    except ClientError as exc:
        code = _error_code(exc)
        if code in AUTH_ERROR_CODES:
            raise AuthError(f"AWS rejected the credentials: {exc}") from exc
        LOGGER.debug("ListObjectsV2 for %s returned %s", bucket_name, code)
        if code in NOT_FOUND_CODES or code in FORBIDDEN_CODES:
            return False
        raise ConfigurationError(f"Unable to check bucket {bucket_name}: {exc}") from exc
    return True


def bucket_exists(s3_client, bucket_name: str) -> bool:
    """Return True if the bucket is reachable with the client's credentials.

    Rejected credentials raise AuthError instead of reporting a missing bucket.
    """
    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError as exc:
        code = _error_code(exc)
        if code in AUTH_ERROR_CODES:
            raise AuthError(f"AWS rejected the credentials: {exc}") from exc
        if code in NOT_FOUND_CODES:
            LOGGER.debug("HeadBucket for %s returned %s", bucket_name, code)
            return False
        if code in FORBIDDEN_CODES:
            return _explain_forbidden_head(s3_client, bucket_name)
        raise ConfigurationError(f"Unable to check bucket {bucket_name}: {exc}") from exc
    except (NoCredentialsError, PartialCredentialsError) as exc:
        raise AuthError(f"Unable to resolve AWS credentials: {exc}") from exc
    except EndpointConnectionError as exc:
        LOGGER.warning("Unable to reach S3 endpoint for bucket %s: %s", bucket_name, exc)
        return False
    return True
