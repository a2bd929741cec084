"""Config store backends.

This module lists store versions and reads raw node payloads from
local directories or S3 prefixes. Parsing happens in the topology layer.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Protocol
from urllib.parse import unquote

from core.config import TagrootConfig
from core.constants import (
    CONFIG_STORE_DIR_NAME,
    LOCAL_STORE_SCHEMES,
    NODE_FILE_NAME,
    S3_STORE_SCHEME,
)
from core.errors import TagrootStoreCreationError, TagrootStoreFactoryError
from core.location import Location
from core.logging_config import get_logger
from core.s3_uri import S3Location, parse_s3_location
from store.s3_client import create_s3_client

_LOGGER = get_logger(__name__)


class StoreBackend(Protocol):
    """Raw read operations a config store backend provides."""

    def list_versions(self) -> list[str]: ...

    def read_node_payloads(self, version: str) -> Mapping[str, str]: ...


class LocalStoreBackend:
    """Config store laid out in a local directory tree."""

    def __init__(self, store_dir: Path) -> None:
        """Open a local store.

        Args:
            store_dir: Store root directory containing ``_CONFIG_STORE``.

        Raises:
            TagrootStoreCreationError: If the store directory is missing.
        """
        self._versions_dir = store_dir / CONFIG_STORE_DIR_NAME
        if not self._versions_dir.is_dir():
            raise TagrootStoreCreationError(
                f"Config store not found at {store_dir}: missing {CONFIG_STORE_DIR_NAME} "
                "directory. Point config.store.uri at an existing store root."
            )

    def list_versions(self) -> list[str]:
        """Return version directory names in arbitrary order."""
        return [entry.name for entry in self._versions_dir.iterdir() if entry.is_dir()]

    def read_node_payloads(self, version: str) -> Mapping[str, str]:
        """Read node files of one version.

        Args:
            version: Existing version name.

        Returns:
            Mapping of store-relative node path to raw ``node.yaml`` text.
            Directories without a node file map to an empty string.

        Raises:
            TagrootStoreCreationError: If a node file cannot be read.
        """
        version_dir = self._versions_dir / version
        payloads = {"": _read_local_node(version_dir)}
        for node_dir in sorted(version_dir.rglob("*")):
            if not node_dir.is_dir():
                continue
            node_path = node_dir.relative_to(version_dir).as_posix()
            payloads[node_path] = _read_local_node(node_dir)
        _LOGGER.debug("store_version_read", version=version, node_count=len(payloads))
        return payloads


class S3StoreBackend:
    """Config store laid out under an S3 prefix."""

    def __init__(self, s3_client: Any, location: S3Location) -> None:
        """Open an S3 store.

        Args:
            s3_client: Boto3 S3 client.
            location: Store root bucket and prefix.
        """
        self._s3_client = s3_client
        self._bucket = location.bucket
        self._versions_prefix = location.key_for(CONFIG_STORE_DIR_NAME) + "/"

    def list_versions(self) -> list[str]:
        """Return version names found as common prefixes.

        Raises:
            TagrootStoreCreationError: If listing fails or finds no store.
        """
        versions: list[str] = []
        for page in self._paginate(Prefix=self._versions_prefix, Delimiter="/"):
            for common_prefix in page.get("CommonPrefixes", []):
                name = common_prefix["Prefix"][len(self._versions_prefix) :].strip("/")
                if name:
                    versions.append(name)
        if not versions:
            raise TagrootStoreCreationError(
                f"Config store not found at s3://{self._bucket}/{self._versions_prefix}: "
                "no version prefixes exist. Upload a store version and retry."
            )
        return versions

    def read_node_payloads(self, version: str) -> Mapping[str, str]:
        """Read node objects of one version.

        Args:
            version: Existing version name.

        Returns:
            Mapping of store-relative node path to raw ``node.yaml`` text.
            Every key prefix counts as a node, with an empty payload when it
            has no node object.
        """
        version_prefix = f"{self._versions_prefix}{version}/"
        payloads: dict[str, str] = {"": ""}
        for page in self._paginate(Prefix=version_prefix):
            for obj in page.get("Contents", []):
                key_path = PurePosixPath(obj["Key"][len(version_prefix) :])
                for parent in key_path.parents:
                    payloads.setdefault(_node_path(parent), "")
                if key_path.name == NODE_FILE_NAME:
                    payloads[_node_path(key_path.parent)] = self._read_object(obj["Key"])
        _LOGGER.debug("store_version_read", version=version, node_count=len(payloads))
        return payloads

    def _paginate(self, **kwargs: str) -> Any:
        paginator = self._s3_client.get_paginator("list_objects_v2")
        try:
            return list(paginator.paginate(Bucket=self._bucket, **kwargs))
        except Exception as error:
            raise TagrootStoreCreationError(
                f"Failed to list config store objects in s3://{self._bucket}/"
                f"{kwargs['Prefix']}: {error}. Check AWS credentials and retry."
            ) from error

    def _read_object(self, key: str) -> str:
        try:
            body = self._s3_client.get_object(Bucket=self._bucket, Key=key)["Body"]
            return body.read().decode("utf-8")
        except Exception as error:
            raise TagrootStoreCreationError(
                f"Failed to read config store node s3://{self._bucket}/{key}: {error}. "
                "Check AWS credentials and retry."
            ) from error


def open_store_backend(
    store_root: Location,
    config: TagrootConfig,
    s3_client: Any | None = None,
) -> StoreBackend:
    """Select and open the backend for a store root.

    Args:
        store_root: Store root location.
        config: Runtime config for S3 session defaults.
        s3_client: Optional preconfigured S3 client.

    Returns:
        Opened store backend.

    Raises:
        TagrootStoreFactoryError: If no backend handles the URI scheme.
        TagrootStoreCreationError: If the store cannot be opened.
    """
    if store_root.scheme in LOCAL_STORE_SCHEMES:
        return LocalStoreBackend(Path(unquote(store_root.path)))
    if store_root.scheme == S3_STORE_SCHEME:
        client = s3_client if s3_client is not None else create_s3_client(config)
        return S3StoreBackend(client, parse_s3_location(store_root))
    raise TagrootStoreFactoryError(
        f"No config store backend for scheme '{store_root.scheme}' in {store_root}. "
        f"Use one of: file, {S3_STORE_SCHEME}."
    )


def _read_local_node(node_dir: Path) -> str:
    node_file = node_dir / NODE_FILE_NAME
    if not node_file.is_file():
        return ""
    try:
        return node_file.read_text(encoding="utf-8")
    except OSError as error:
        raise TagrootStoreCreationError(
            f"Failed to read config store node {node_file}: {error}. "
            "Check file permissions and retry."
        ) from error


def _node_path(path: PurePosixPath) -> str:
    text = path.as_posix()
    return "" if text == "." else text
