"""Runtime configuration model for Tagroot.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS
from core.errors import TagrootConfigError


@dataclass(frozen=True)
class TagrootConfig:
    """Validated runtime configuration.

    Attributes:
        s3_region: Optional default AWS region for S3-backed stores.
        s3_profile: Optional AWS profile for boto3 session initialization.
        log_level: Minimum level emitted by module loggers.
    """

    s3_region: str | None
    s3_profile: str | None
    log_level: str

    @classmethod
    def from_env(cls) -> "TagrootConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TagrootConfigError: If environment values are invalid.
        """
        return cls(
            s3_region=os.getenv("TAGROOT_S3_REGION"),
            s3_profile=os.getenv("TAGROOT_S3_PROFILE"),
            log_level=parse_log_level(os.getenv("TAGROOT_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def parse_log_level(raw_value: str) -> str:
    """Normalize and validate a log level name.

    Args:
        raw_value: Raw level name from environment or CLI.

    Returns:
        Lowercase supported level name.

    Raises:
        TagrootConfigError: If the level is not supported.
    """
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise TagrootConfigError(
            f"Invalid TAGROOT_LOG_LEVEL value: got '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return normalized
