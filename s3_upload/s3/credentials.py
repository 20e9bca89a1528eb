"""Credential resolution for the S3 client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound

from ..exceptions import AuthError

LOGGER = logging.getLogger(__name__)

EXPLICIT_METHOD = "explicit"

SessionFactory = Callable[..., boto3.session.Session]


@dataclass(frozen=True)
class Credentials:
    """The session that resolved a run's credentials and the provider that produced them.

    Clients are built from ``session`` so refreshable credentials (assume-role,
    SSO, instance and container roles) keep refreshing during long uploads.
    """

    session: boto3.session.Session
    method: str = EXPLICIT_METHOD

    @property
    def is_explicit(self) -> bool:
        return self.method == EXPLICIT_METHOD

    def __repr__(self) -> str:
        return f"Credentials(method={self.method!r})"


def resolve_credentials(
    access_key: Optional[str],
    secret_key: Optional[str],
    *,
    profile: Optional[str] = None,
    session_factory: SessionFactory = boto3.session.Session,
) -> Credentials:
    """Return explicit credentials when both keys are given, else the default chain's.

    The default chain is botocore's: environment variables, shared credentials
    and config files, then container and instance metadata.
    """
    if access_key and secret_key:
        LOGGER.debug("Using explicitly configured access key")
        session = session_factory(aws_access_key_id=access_key, aws_secret_access_key=secret_key)
        return Credentials(session=session, method=EXPLICIT_METHOD)

    if access_key or secret_key:
        LOGGER.warning("Only one of access key/secret key was given; using the default credential chain")

    try:
        session = session_factory(profile_name=profile) if profile else session_factory()
        resolved = session.get_credentials()
    except ProfileNotFound as exc:
        raise AuthError(f"AWS profile not found: {profile}") from exc
    except BotoCoreError as exc:
        raise AuthError(f"Unable to resolve AWS credentials: {exc}") from exc

    if resolved is None:
        raise AuthError("Unable to resolve AWS credentials from the default credential chain.")

    method = getattr(resolved, "method", None) or "default-chain"
    LOGGER.debug("Resolved AWS credentials via %s", method)
    return Credentials(session=session, method=method)
