"""Core application entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import boto3
from boto3.s3.transfer import TransferConfig, create_transfer_manager

from .config import UploadRequest
from .exceptions import ConfigurationError, UploadError
from .s3 import S3Uploader, TransferOutcome, bucket_exists, create_s3_client, resolve_credentials, validate_region
from .s3.credentials import SessionFactory
from .s3.uploader import ManagerFactory
from .utils import ProgressTracker

LOGGER = logging.getLogger(__name__)


class S3UploadStep:
    """Coordinates validation, client construction and the upload of one request."""

    def __init__(
        self,
        transfer_settings: Optional[Dict[str, Any]] = None,
        *,
        session_factory: SessionFactory = boto3.session.Session,
        manager_factory: ManagerFactory = create_transfer_manager,
    ) -> None:
        settings = dict(transfer_settings or {})
        self.show_progress = bool(settings.pop("show_progress", False))
        self.transfer_config = TransferConfig(**settings)
        self.session_factory = session_factory
        self.manager_factory = manager_factory

    def run(self, request: UploadRequest) -> Optional[TransferOutcome]:
        """Upload the request's source; returns None for a dry run."""
        self.validate(request.source)

        s3_client = self.resolve_client(
            request.access_key, request.secret_key, request.region, profile=request.profile
        )
        self.check_bucket(s3_client, request.bucket_name)

        if request.dry_run:
            LOGGER.info(
                "File %s would have been uploaded to %s (dry run)",
                request.source,
                request.get_s3_uri(),
            )
            return None

        uploader = S3Uploader(
            s3_client,
            request,
            transfer_config=self.transfer_config,
            manager_factory=self.manager_factory,
            progress_tracker=ProgressTracker() if self.show_progress else None,
        )
        outcome = uploader.transfer(request.source)
        if not outcome.completed:
            if outcome.failed_keys:
                LOGGER.error(
                    "Failed to upload %s object(s): %s", len(outcome.failed_keys), ", ".join(outcome.failed_keys)
                )
            LOGGER.debug("Transfer finished in state %s", outcome.state.value)
            raise UploadError("Unable to upload file to S3.")

        LOGGER.info("File %s uploaded to %s", request.source, request.get_s3_uri())
        return outcome

    @staticmethod
    def validate(source: Path) -> None:
        if not Path(source).exists():
            raise ConfigurationError(f"File/folder doesn't exist: {source}")

    def resolve_client(
        self,
        access_key: Optional[str],
        secret_key: Optional[str],
        region: str,
        *,
        profile: Optional[str] = None,
    ):
        validate_region(region, self.session_factory)
        credentials = resolve_credentials(
            access_key, secret_key, profile=profile, session_factory=self.session_factory
        )
        return create_s3_client(credentials, region)

    @staticmethod
    def check_bucket(s3_client, bucket_name: str) -> None:
        if not bucket_exists(s3_client, bucket_name):
            raise ConfigurationError(f"Bucket doesn't exist: {bucket_name}")
