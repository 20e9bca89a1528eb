"""Tests for logging configuration."""

import logging

import pytest

from s3_upload.exceptions import ValidationError
from s3_upload.utils import configure_logging
from s3_upload.utils.logger import parse_level


def test_level_and_console_handler():
    configure_logging({"level": "warning"})

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.StreamHandler)


def test_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "upload.log"

    configure_logging({"level": "INFO", "console": False, "file": str(log_file)})
    logging.getLogger("s3_upload.test").info("hello %s", "file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_sdk_loggers_quiet_unless_debug():
    configure_logging({"level": "INFO"})
    assert logging.getLogger("botocore").level == logging.WARNING

    configure_logging({"level": "DEBUG"})
    assert logging.getLogger("s3transfer").level == logging.DEBUG


def test_sdk_level_override():
    configure_logging({"level": "INFO", "sdk_level": "debug"})

    assert logging.getLogger("botocore").level == logging.DEBUG
    assert logging.getLogger().level == logging.INFO


def test_unknown_level_is_rejected():
    with pytest.raises(ValidationError, match="Unknown log level: LOUD"):
        configure_logging({"level": "LOUD"})


def test_parse_level_defaults_to_info():
    assert parse_level(None) == logging.INFO
    assert parse_level("error") == logging.ERROR


def test_custom_format_reaches_handlers(tmp_path):
    log_file = tmp_path / "upload.log"

    configure_logging({"console": False, "file": str(log_file), "format": "[%(levelname)s] %(message)s"})
    logging.getLogger("s3_upload.test").warning("careful")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file.read_text(encoding="utf-8") == "[WARNING] careful\n"
