"""Configuration management utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigurationError, ValidationError
from ..utils.logger import DEFAULT_FORMAT, LOG_LEVELS

DEFAULT_REGION = "ap-northeast-2"


@dataclass
class UploadRequest:
    """Everything a single upload run needs, resolved from CLI and configuration."""

    source: Path
    bucket_name: str
    region: str = DEFAULT_REGION
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    destination: Optional[str] = None
    recursive: bool = False
    make_public: bool = True
    dry_run: bool = False
    profile: Optional[str] = None

    def __post_init__(self) -> None:
        self.source = Path(self.source)

    def has_destination(self) -> bool:
        return bool(self.destination)

    def get_s3_uri(self) -> str:
        """Return the bucket URI, with the destination appended when one is set."""
        if self.has_destination():
            return f"s3://{self.bucket_name}/{self.destination}"
        return f"s3://{self.bucket_name}"


class ConfigManager:
    """Handles loading and validation of the optional YAML configuration file."""

    _BOOL_KEYS = {
        "upload": ("recursive", "make_public", "do_not_upload"),
        "transfer": ("use_threads", "show_progress"),
        "logging": ("console",),
    }
    _INT_KEYS = ("multipart_threshold", "multipart_chunksize", "max_concurrency")

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """Load and validate the configuration file, if one was given."""
        if self.config_path is None:
            self.config = {}
            return self.config

        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with self.config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:  # pragma: no cover - passthrough
            raise ConfigurationError(f"Failed to parse configuration: {exc}") from exc

        self.config = data
        self.validate()
        return self.config

    def validate(self) -> bool:
        """Validate the loaded configuration contents."""
        if not isinstance(self.config, dict):
            raise ValidationError("Configuration must be a mapping.")

        for section in ("aws", "upload", "transfer", "logging"):
            value = self.config.get(section, {})
            if value is None:
                self.config[section] = {}
            elif not isinstance(value, dict):
                raise ValidationError(f"Section '{section}' must be a mapping.")

        aws_cfg = self.config.get("aws", {})
        for key in ("region", "access_key", "secret_key", "profile"):
            value = aws_cfg.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"aws.{key} must be a string if specified.")

        upload_cfg = self.config.get("upload", {})
        for key in ("source", "bucket_name", "destination"):
            value = upload_cfg.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"upload.{key} must be a string if specified.")

        for section, keys in self._BOOL_KEYS.items():
            section_cfg = self.config.get(section, {})
            for key in keys:
                value = section_cfg.get(key)
                if value is not None and not isinstance(value, bool):
                    raise ValidationError(f"{section}.{key} must be boolean if specified.")

        transfer_cfg = self.config.get("transfer", {})
        unknown = set(transfer_cfg) - set(self._INT_KEYS) - set(self._BOOL_KEYS["transfer"])
        if unknown:
            raise ValidationError(f"Unknown transfer settings: {', '.join(sorted(unknown))}")
        for key in self._INT_KEYS:
            value = transfer_cfg.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValidationError(f"transfer.{key} must be a positive integer if specified.")

        logging_cfg = self.config.get("logging", {})
        for key in ("level", "sdk_level"):
            value = logging_cfg.get(key)
            if value is not None and str(value).upper() not in LOG_LEVELS:
                raise ValidationError(f"logging.{key} must be one of {', '.join(LOG_LEVELS)}.")
        for key in ("file", "format"):
            value = logging_cfg.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"logging.{key} must be a string if specified.")

        return True

    def build_request(self, **overrides: Any) -> UploadRequest:
        """Merge CLI overrides over file values and defaults into an UploadRequest.

        Overrides whose value is ``None`` are ignored so that unset command line
        options fall back to the configuration file.
        """
        aws_cfg = self.config.get("aws") or {}
        upload_cfg = self.config.get("upload") or {}

        merged: Dict[str, Any] = {
            "access_key": aws_cfg.get("access_key"),
            "secret_key": aws_cfg.get("secret_key"),
            "region": aws_cfg.get("region") or DEFAULT_REGION,
            "profile": aws_cfg.get("profile"),
            "source": upload_cfg.get("source"),
            "bucket_name": upload_cfg.get("bucket_name"),
            "destination": upload_cfg.get("destination"),
            "recursive": upload_cfg.get("recursive", False),
            "make_public": upload_cfg.get("make_public", True),
            "dry_run": upload_cfg.get("do_not_upload", False),
        }
        merged.update({key: value for key, value in overrides.items() if value is not None})

        if not merged["source"]:
            raise ConfigurationError("A source file/folder must be specified.")
        if not merged["bucket_name"]:
            raise ConfigurationError("A bucket name must be specified.")

        return UploadRequest(**merged)

    def get_transfer_config(self) -> Dict[str, Any]:
        """Return transfer manager settings with defaults."""
        defaults = {
            "multipart_threshold": 8 * 1024 * 1024,
            "multipart_chunksize": 8 * 1024 * 1024,
            "max_concurrency": 10,
            "use_threads": True,
            "show_progress": False,
        }
        transfer_cfg = self.config.get("transfer") or {}
        merged = {**defaults, **transfer_cfg}
        return merged

    def get_logging_config(self) -> Dict[str, Any]:
        """Return the ``logging`` section with unset keys filled in.

        ``sdk_level`` stays ``None`` unless configured; configure_logging then
        derives the AWS SDK level from ``level``.
        """
        logging_cfg = {key: value for key, value in (self.config.get("logging") or {}).items() if value is not None}
        return {
            "level": str(logging_cfg.get("level", "INFO")).upper(),
            "sdk_level": logging_cfg.get("sdk_level"),
            "console": logging_cfg.get("console", True),
            "file": logging_cfg.get("file"),
            "format": logging_cfg.get("format", DEFAULT_FORMAT),
        }
