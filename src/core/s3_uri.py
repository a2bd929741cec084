"""S3 location parsing helpers.

This module centralizes bucket/prefix parsing for S3-backed stores.
It keeps URI validation behavior consistent across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import S3_STORE_SCHEME
from core.errors import TagrootLocationError
from core.location import Location


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str

    def key_for(self, relative_key: str) -> str:
        """Join a relative key onto the prefix."""
        if not self.prefix:
            return relative_key
        return f"{self.prefix}/{relative_key}"


def parse_s3_location(location: Location) -> S3Location:
    """Parse and validate an S3 store location.

    Args:
        location: Location in format ``s3://bucket/prefix``.

    Returns:
        Parsed bucket and prefix pair; the prefix has no surrounding slashes.

    Raises:
        TagrootLocationError: If the location is not a valid S3 URI.
    """
    if location.scheme != S3_STORE_SCHEME or not location.authority:
        raise TagrootLocationError(
            f"Invalid S3 URI '{location}': expected s3://bucket/prefix. "
            "Provide both the s3 scheme and a bucket name."
        )
    return S3Location(bucket=location.authority, prefix=location.path.strip("/"))
