"""Transfer handles over s3transfer futures.

A :class:`Transfer` aggregates the futures of one upload (a single object or
every file of a directory) and exposes the state, progress and blocking wait
the uploader branches on.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from s3transfer.exceptions import CancelledError
from s3transfer.subscribers import BaseSubscriber

from ..exceptions import UploadError

LOGGER = logging.getLogger(__name__)


class CannedAcl(str, Enum):
    """Canned access control policies applied to uploaded objects."""

    BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"
    PUBLIC_READ = "public-read"


AclPolicy = Callable[[Path], CannedAcl]


def object_acl_policy(make_public: bool) -> AclPolicy:
    """Return the per-object ACL policy for an upload."""
    acl = CannedAcl.PUBLIC_READ if make_public else CannedAcl.BUCKET_OWNER_FULL_CONTROL

    def policy(path: Path) -> CannedAcl:
        return acl

    return policy


class TransferState(Enum):
    SUBMITTED = "Submitted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (TransferState.COMPLETED, TransferState.FAILED, TransferState.CANCELED)


class TransferInterruptedError(UploadError):
    """Raised when the wait on a transfer is interrupted."""


class TransferProgress:
    """Thread-safe byte counter updated from transfer worker threads."""

    def __init__(self, total_bytes: int, listener: Optional[Callable[[int], None]] = None) -> None:
        self.total_bytes = total_bytes
        self._bytes_transferred = 0
        self._listener = listener
        self._lock = threading.Lock()

    @property
    def bytes_transferred(self) -> int:
        with self._lock:
            return self._bytes_transferred

    def add(self, amount: int) -> None:
        with self._lock:
            self._bytes_transferred += amount
        if self._listener is not None:
            self._listener(amount)


class ProgressSubscriber(BaseSubscriber):
    """Feeds s3transfer progress callbacks into a TransferProgress."""

    def __init__(self, progress: TransferProgress) -> None:
        self._progress = progress

    def on_progress(self, future, bytes_transferred, **kwargs):
        self._progress.add(bytes_transferred)


class Transfer:
    """Aggregate handle over the futures of one upload."""

    def __init__(
        self,
        description: str,
        futures: Sequence[Tuple[str, object]],
        progress: TransferProgress,
    ) -> None:
        self.description = description
        self._futures = list(futures)
        self._progress = progress
        self._state: Optional[TransferState] = None
        self.errors: List[Tuple[str, BaseException]] = []

    def get_progress(self) -> TransferProgress:
        return self._progress

    @property
    def state(self) -> TransferState:
        if self._state is not None:
            return self._state
        if self._progress.bytes_transferred > 0:
            return TransferState.IN_PROGRESS
        return TransferState.SUBMITTED

    def cancel(self) -> None:
        for _, future in self._futures:
            if not future.done():
                future.cancel()

    def wait_for_completion(self) -> TransferState:
        """Block until every object reaches a terminal state.

        A failed object does not stop the wait on the remaining ones. An
        interrupt cancels whatever is still outstanding and raises
        TransferInterruptedError.
        """
        if self._state is not None:
            return self._state

        failed = False
        canceled = False
        try:
            for key, future in self._futures:
                try:
                    future.result()
                except CancelledError:
                    LOGGER.debug("Upload of %s was cancelled", key)
                    canceled = True
                except Exception as exc:
                    LOGGER.error("Upload of %s failed: %s", key, exc)
                    self.errors.append((key, exc))
                    failed = True
        except KeyboardInterrupt as exc:
            LOGGER.warning("Interrupted while waiting for %s; cancelling", self.description)
            self.cancel()
            self._state = TransferState.CANCELED
            raise TransferInterruptedError(f"Interrupted while waiting for {self.description}") from exc

        if failed:
            self._state = TransferState.FAILED
        elif canceled:
            self._state = TransferState.CANCELED
        else:
            self._state = TransferState.COMPLETED
        return self._state


def list_directory_files(directory: Path, recursive: bool) -> List[Path]:
    """Return the regular files of a directory, descending only when recursive."""
    candidates = directory.rglob("*") if recursive else directory.iterdir()
    return sorted(path for path in candidates if path.is_file())


def directory_object_key(prefix: Optional[str], directory: Path, file_path: Path) -> str:
    relative_key = file_path.relative_to(directory).as_posix()
    if not prefix:
        return relative_key
    if not prefix.endswith("/"):
        prefix = f"{prefix}/"
    return f"{prefix}{relative_key}"


def submit_file(
    manager,
    bucket: str,
    key: str,
    file_path: Path,
    acl: CannedAcl,
    listener: Optional[Callable[[int], None]] = None,
) -> Transfer:
    """Submit a single object upload and return its handle."""
    progress = TransferProgress(file_path.stat().st_size, listener)
    future = manager.upload(
        str(file_path),
        bucket,
        key,
        extra_args={"ACL": acl.value},
        subscribers=[ProgressSubscriber(progress)],
    )
    return Transfer(f"upload of {file_path} to s3://{bucket}/{key}", [(key, future)], progress)


def submit_directory(
    manager,
    bucket: str,
    prefix: Optional[str],
    directory: Path,
    recursive: bool,
    acl_policy: AclPolicy,
    listener: Optional[Callable[[int], None]] = None,
) -> Transfer:
    """Submit one upload per file under the directory and return the aggregate handle."""
    files = list_directory_files(directory, recursive)
    progress = TransferProgress(sum(path.stat().st_size for path in files), listener)
    subscriber = ProgressSubscriber(progress)

    futures = []
    for file_path in files:
        key = directory_object_key(prefix, directory, file_path)
        acl = acl_policy(file_path)
        futures.append(
            (
                key,
                manager.upload(
                    str(file_path),
                    bucket,
                    key,
                    extra_args={"ACL": acl.value},
                    subscribers=[subscriber],
                ),
            )
        )

    LOGGER.debug("Submitted %s file(s) from %s (recursive=%s)", len(futures), directory, recursive)
    return Transfer(f"upload of {directory} to s3://{bucket}/{prefix or ''}", futures, progress)
