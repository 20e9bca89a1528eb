"""Configuration utilities for the S3 upload step."""

from .config_manager import DEFAULT_REGION, ConfigManager, UploadRequest

__all__ = ["ConfigManager", "DEFAULT_REGION", "UploadRequest"]
