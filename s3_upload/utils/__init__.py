"""Utility helpers for the S3 upload step."""

from .logger import configure_logging
from .progress import ProgressTracker

__all__ = ["configure_logging", "ProgressTracker"]
