"""Command line entry point for the S3 upload step."""

from __future__ import annotations

import logging
from typing import Optional

import click

from . import __version__
from .config import ConfigManager
from .exceptions import S3UploadError
from .main import S3UploadStep
from .utils import configure_logging

LOGGER = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to an optional YAML configuration file.")
@click.option("--access-key", envvar="S3_UPLOAD_ACCESS_KEY", help="Access key for S3.")
@click.option("--secret-key", envvar="S3_UPLOAD_SECRET_KEY", help="Secret key for S3.")
@click.option("--region", envvar="S3_UPLOAD_REGION", help="S3 region (default: ap-northeast-2).")
@click.option("--profile", envvar="S3_UPLOAD_PROFILE", help="Named AWS profile for the default credential chain.")
@click.option("--source", envvar="S3_UPLOAD_SOURCE", type=click.Path(), help="The file/folder to upload.")
@click.option("--bucket-name", envvar="S3_UPLOAD_BUCKET_NAME", help="The bucket to upload into.")
@click.option("--destination", envvar="S3_UPLOAD_DESTINATION", help="The file/folder (in the bucket) to create.")
@click.option("--recursive/--no-recursive", default=None, envvar="S3_UPLOAD_RECURSIVE", help="Recursively upload the contents of a directory.")
@click.option("--make-public/--no-make-public", default=None, envvar="S3_UPLOAD_MAKE_PUBLIC", help="Make uploaded objects publicly readable (default: on).")
@click.option("--do-not-upload/--upload", "dry_run", default=None, envvar="S3_UPLOAD_DO_NOT_UPLOAD", help="Run every step except the upload itself, then log the s3:// URI that would have been written (s3://BUCKET when no destination is set).")
@click.option("--progress/--no-progress", "show_progress", default=None, help="Show a byte progress bar while uploading.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False), help="Override logging level.")
@click.version_option(version=__version__)
def main(
    config_path: Optional[str],
    access_key: Optional[str],
    secret_key: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    source: Optional[str],
    bucket_name: Optional[str],
    destination: Optional[str],
    recursive: Optional[bool],
    make_public: Optional[bool],
    dry_run: Optional[bool],
    show_progress: Optional[bool],
    log_level: Optional[str],
) -> None:
    """Upload a file or directory to an S3 bucket."""
    config = ConfigManager(config_path)
    configure_logging({"level": log_level or "INFO"})

    try:
        config_dict = config.load()
        if log_level is not None:
            config_dict.setdefault("logging", {})["level"] = log_level.upper()
        if show_progress is not None:
            config_dict.setdefault("transfer", {})["show_progress"] = show_progress
        configure_logging(config.get_logging_config())

        request = config.build_request(
            access_key=access_key,
            secret_key=secret_key,
            region=region,
            profile=profile,
            source=source,
            bucket_name=bucket_name,
            destination=destination,
            recursive=recursive,
            make_public=make_public,
            dry_run=dry_run,
        )
        S3UploadStep(config.get_transfer_config()).run(request)
    except S3UploadError as exc:
        LOGGER.error("Execution failed: %s", exc)
        raise SystemExit(exc.kind.exit_code) from exc


if __name__ == "__main__":
    main()
