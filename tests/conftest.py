"""Shared fixtures: in-memory stand-ins for the s3transfer manager and boto3 session."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber
from s3transfer.exceptions import CancelledError


class FakeFuture:
    """Mimics an s3transfer TransferFuture; reports all bytes when result() is called."""

    def __init__(self, size, subscribers, error=None, cancelled=False, interrupt=False, sent_before_interrupt=0):
        self.size = size
        self.subscribers = list(subscribers or [])
        self.error = error
        self.cancelled = cancelled
        self.interrupt = interrupt
        self.sent_before_interrupt = sent_before_interrupt
        self.cancel_called = False
        self._done = False

    def _report(self, amount):
        for subscriber in self.subscribers:
            subscriber.on_progress(future=self, bytes_transferred=amount)

    def result(self):
        if self.interrupt:
            self._report(self.sent_before_interrupt)
            raise KeyboardInterrupt()
        self._done = True
        if self.cancelled or self.cancel_called:
            raise CancelledError("cancelled")
        if self.error is not None:
            raise self.error
        self._report(self.size)
        return None

    def done(self):
        return self._done

    def cancel(self):
        self.cancel_called = True


class FakeTransferManager:
    """Records submitted uploads; per-key behaviour is set through ``failures``."""

    def __init__(self):
        self.uploads = []
        self.futures = []
        self.failures = {}
        self.entered = False
        self.exited = False
        self.client = None
        self.config = None

    def __call__(self, client, config):
        self.client = client
        self.config = config
        return self

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.exited = True
        return False

    def upload(self, fileobj, bucket, key, extra_args=None, subscribers=None):
        self.uploads.append(
            {"fileobj": fileobj, "bucket": bucket, "key": key, "extra_args": extra_args or {}}
        )
        behaviour = self.failures.get(key, {})
        future = FakeFuture(Path(fileobj).stat().st_size, subscribers, **behaviour)
        self.futures.append(future)
        return future

    @property
    def keys(self):
        return [upload["key"] for upload in self.uploads]


@pytest.fixture
def fake_manager():
    return FakeTransferManager()


@pytest.fixture
def s3_client():
    client = MagicMock(name="s3_client")
    client.head_bucket.return_value = {}
    return client


@pytest.fixture
def fake_session(s3_client):
    """A boto3 Session stand-in that knows two regions and hands out ``s3_client``."""
    session = MagicMock(name="session")
    session.get_available_partitions.return_value = ["aws"]
    session.get_available_regions.return_value = ["us-east-1", "ap-northeast-2"]
    session.client.return_value = s3_client
    session.get_credentials.return_value = None
    return session


@pytest.fixture
def session_factory(fake_session):
    return MagicMock(name="session_factory", return_value=fake_session)


@pytest.fixture
def stubbed_client():
    """A real botocore S3 client whose responses are queued on a Stubber."""
    session = boto3.session.Session(
        aws_access_key_id="AKIDEXAMPLE", aws_secret_access_key="wJalrXUtnFEMI", region_name="us-east-1"
    )
    client = session.client("s3")
    with Stubber(client) as stubber:
        yield client, stubber


@pytest.fixture
def source_tree(tmp_path):
    """dist/ with a.txt at the top level and sub/b.txt one level down."""
    dist = tmp_path / "dist"
    (dist / "sub").mkdir(parents=True)
    (dist / "a.txt").write_text("alpha")
    (dist / "sub" / "b.txt").write_text("bravo!!")
    return dist


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in ("boto3", "botocore", "s3transfer", "urllib3"):
        logging.getLogger(name).setLevel(logging.NOTSET)
