"""S3 upload of a local file or directory through the managed transfer client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from boto3.s3.transfer import TransferConfig, create_transfer_manager
from s3transfer.manager import TransferManager

from ..config import UploadRequest
from ..exceptions import ConfigurationError
from ..utils.progress import ProgressTracker
from .transfer import (
    Transfer,
    TransferInterruptedError,
    TransferState,
    object_acl_policy,
    submit_directory,
    submit_file,
)

LOGGER = logging.getLogger(__name__)

ManagerFactory = Callable[..., TransferManager]


@dataclass
class TransferOutcome:
    """Summary of one finished (or abandoned) transfer."""

    bytes_total: int
    bytes_transferred: int
    state: TransferState
    failed_keys: List[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.state is TransferState.COMPLETED

    @classmethod
    def from_transfer(cls, transfer: Transfer) -> "TransferOutcome":
        progress = transfer.get_progress()
        return cls(
            progress.total_bytes,
            progress.bytes_transferred,
            transfer.state,
            [key for key, _ in transfer.errors],
        )


def object_key(destination: Optional[str], filename: str) -> str:
    """Return the key of a single-file upload."""
    if destination:
        return f"{destination}/{filename}"
    return filename


class S3Uploader:
    """Uploads a file or directory described by an UploadRequest."""

    def __init__(
        self,
        s3_client,
        request: UploadRequest,
        transfer_config: Optional[TransferConfig] = None,
        manager_factory: ManagerFactory = create_transfer_manager,
        progress_tracker: Optional[ProgressTracker] = None,
    ) -> None:
        self.s3_client = s3_client
        self.request = request
        self.transfer_config = transfer_config or TransferConfig()
        self.manager_factory = manager_factory
        self.progress_tracker = progress_tracker
        self.acl_policy = object_acl_policy(request.make_public)

    def upload(self, source_file: Path) -> bool:
        """Upload the source and return True iff the transfer completed."""
        return self.transfer(source_file).completed

    def transfer(self, source_file: Path) -> TransferOutcome:
        source_file = Path(source_file)
        if not source_file.is_file() and not source_file.is_dir():
            raise ConfigurationError(f"File is neither a regular file nor a directory {source_file}")

        listener = self.progress_tracker.add_bytes if self.progress_tracker else None

        with self.manager_factory(self.s3_client, self.transfer_config) as manager:
            if source_file.is_file():
                transfer = self._submit_file(manager, source_file, listener)
            else:
                transfer = self._submit_directory(manager, source_file, listener)
            return self._wait(transfer)

    def _submit_file(self, manager, source_file: Path, listener) -> Transfer:
        key = object_key(self.request.destination, source_file.name)
        acl = self.acl_policy(source_file)
        LOGGER.debug("Uploading %s as s3://%s/%s with ACL %s", source_file, self.request.bucket_name, key, acl.value)
        return submit_file(manager, self.request.bucket_name, key, source_file, acl, listener)

    def _submit_directory(self, manager, source_dir: Path, listener) -> Transfer:
        return submit_directory(
            manager,
            self.request.bucket_name,
            self.request.destination,
            source_dir,
            self.request.recursive,
            self.acl_policy,
            listener,
        )

    def _wait(self, transfer: Transfer) -> TransferOutcome:
        progress = transfer.get_progress()
        LOGGER.debug("Transferring %s bytes...", progress.total_bytes)
        if self.progress_tracker is not None:
            self.progress_tracker.start(progress.total_bytes)
        try:
            transfer.wait_for_completion()
        except TransferInterruptedError as exc:
            LOGGER.error("%s", exc)
            return TransferOutcome.from_transfer(transfer)
        finally:
            if self.progress_tracker is not None:
                self.progress_tracker.finish()

        LOGGER.info("Transferred %s bytes.", progress.bytes_transferred)
        return TransferOutcome.from_transfer(transfer)
