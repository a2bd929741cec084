"""Job settings for config-based dataset discovery.

This module resolves raw job properties into the store root, common
dataset root, whitelist tag, and optional blacklist tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, cast

import yaml

from core.constants import (
    BLACKLIST_SEPARATOR,
    BLACKLIST_TAGS_KEY,
    DATASET_COMMON_ROOT_KEY,
    REQUIRED_JOB_KEYS,
    STORE_URI_KEY,
    STORE_VERSION_KEY,
    WHITELIST_TAG_KEY,
)
from core.errors import TagrootConfigError
from core.location import Location
from core.paths import merge_paths


@dataclass(frozen=True)
class JobSettings:
    """Resolved discovery settings.

    Attributes:
        store_root: Base location of the config store.
        common_root: Location every valid dataset must lie under.
        whitelist_tag: Tag datasets must import to be included.
        blacklist_tags: Tags that exclude importers. None when no blacklist
            is configured, an empty tuple when it is configured but empty.
        store_version: Optional pinned store version.
        properties: Read-only copy of the raw job properties.
    """

    store_root: Location
    common_root: Location
    whitelist_tag: Location
    blacklist_tags: tuple[Location, ...] | None
    store_version: str | None
    properties: Mapping[str, object]

    @classmethod
    def from_properties(cls, properties: Mapping[str, object]) -> "JobSettings":
        """Resolve settings from job properties.

        Args:
            properties: Flat job property mapping.

        Returns:
            Immutable job settings.

        Raises:
            TagrootConfigError: If a required key is missing.
            TagrootLocationError: If the store URI is malformed.
        """
        for key in REQUIRED_JOB_KEYS:
            if key not in properties:
                raise TagrootConfigError(
                    f"Missing required config entry '{key}'. "
                    f"Set {', '.join(REQUIRED_JOB_KEYS)} in the job properties."
                )
        store_root = Location.parse(str(properties[STORE_URI_KEY]))
        return cls(
            store_root=store_root,
            common_root=merge_paths(store_root, str(properties[DATASET_COMMON_ROOT_KEY])),
            whitelist_tag=merge_paths(store_root, str(properties[WHITELIST_TAG_KEY])),
            blacklist_tags=_parse_blacklist(store_root, properties),
            store_version=_optional_string(properties, STORE_VERSION_KEY),
            properties=MappingProxyType(dict(properties)),
        )


def load_job_properties(job_path: str) -> dict[str, object]:
    """Load flat job properties from a YAML file.

    Args:
        job_path: File path to a YAML mapping of property keys.

    Returns:
        Property mapping with string keys and scalar values.

    Raises:
        TagrootConfigError: If the file is missing, invalid, or nested.
    """
    job_file = Path(job_path).expanduser().resolve()
    if not job_file.exists():
        raise TagrootConfigError(
            f"Job file does not exist at {job_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(job_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise TagrootConfigError(
            f"Failed to read job file at {job_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise TagrootConfigError(
            f"Failed to parse YAML job file at {job_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if not isinstance(payload, dict):
        raise TagrootConfigError(
            f"Invalid job file at {job_file}: expected mapping, got {type(payload).__name__}."
        )
    properties: dict[str, object] = {}
    for key, value in payload.items():
        if not isinstance(key, str):
            raise TagrootConfigError(
                f"Invalid job file at {job_file}: expected string keys, got {type(key).__name__}."
            )
        if isinstance(value, (dict, list)):
            raise TagrootConfigError(
                f"Invalid job property '{key}' in {job_file}: expected a scalar value."
            )
        properties[key] = value
    return properties


def _parse_blacklist(
    store_root: Location,
    properties: Mapping[str, object],
) -> tuple[Location, ...] | None:
    if BLACKLIST_TAGS_KEY not in properties:
        return None
    raw_value = properties[BLACKLIST_TAGS_KEY]
    entries = str(raw_value).split(BLACKLIST_SEPARATOR) if raw_value is not None else []
    return tuple(
        merge_paths(store_root, entry.strip()) for entry in entries if entry.strip()
    )


def _optional_string(properties: Mapping[str, object], key: str) -> str | None:
    raw_value = properties.get(key)
    if raw_value is None:
        return None
    normalized_value = str(raw_value).strip()
    return normalized_value if normalized_value else None
