"""Logging setup for upload runs.

Log records from the step itself follow the configured level. The AWS SDK
loggers (boto3, botocore, s3transfer and urllib3) log every request at DEBUG,
so they get their own level: ``logging.sdk_level`` when set, otherwise DEBUG
only when the step itself runs at DEBUG and WARNING in every other case.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..exceptions import ValidationError

DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SDK_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


def parse_level(name: Optional[str], default: str = "INFO") -> int:
    """Map a level name such as ``"warning"`` to its numeric value."""
    level_name = str(name or default).upper()
    if level_name not in LOG_LEVELS:
        raise ValidationError(f"Unknown log level: {name}")
    return logging.getLevelName(level_name)


def sdk_log_level(step_level: int, override: Optional[str] = None) -> int:
    if override:
        return parse_level(override)
    return logging.DEBUG if step_level <= logging.DEBUG else logging.WARNING


def _attach(root_logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def configure_logging(config: Dict[str, Any]) -> None:
    """Route log records to the console and/or a file per the ``logging`` section."""
    level = parse_level(config.get("level"))
    formatter = logging.Formatter(config.get("format") or DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if config.get("console", True):
        _attach(root_logger, logging.StreamHandler(), formatter)

    log_file = config.get("file")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _attach(root_logger, logging.FileHandler(path, encoding="utf-8"), formatter)

    sdk_level = sdk_log_level(level, config.get("sdk_level"))
    for name in SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)

    # deprecation warnings from the SDK land in the same handlers
    logging.captureWarnings(True)
