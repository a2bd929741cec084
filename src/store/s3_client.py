"""S3 client helpers for S3-backed config stores.

This module encapsulates boto3 session and client creation.
It is shared by store backends that read from s3:// roots.
"""

from __future__ import annotations

from typing import Any

from core.config import TagrootConfig
from core.errors import TagrootDependencyError


def create_s3_client(config: TagrootConfig) -> Any:
    """Create a boto3 S3 client for store reads.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        TagrootDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TagrootDependencyError(
            "S3 config stores require boto3, but it is not installed. "
            "Install boto3 to read s3:// store roots."
        ) from error
    session = boto3.session.Session(**build_session_kwargs(config))
    return session.client("s3")


def build_session_kwargs(config: TagrootConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config.

    Args:
        config: Runtime config.

    Returns:
        Session keyword arguments.
    """
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
