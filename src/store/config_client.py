"""Config store client.

This module exposes the metadata query contract used by the finder and
a concrete client that answers it from a versioned config store.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Collection, ContextManager, Iterator, Protocol, runtime_checkable

from core.config import TagrootConfig
from core.errors import TagrootLocationError
from core.location import Location
from core.logging_config import get_logger
from core.paths import is_ancestor, merge_paths, relative_path
from store.backends import open_store_backend
from store.topology import StoreTopology, resolve_version

_LOGGER = get_logger(__name__)


class MetadataQueryService(Protocol):
    """Tag import queries required by dataset discovery."""

    def get_imported_by(self, tag: Location, recursive: bool) -> Collection[Location]: ...


@runtime_checkable
class ConsistentViewSource(Protocol):
    """Source that can answer a batch of queries from one store version."""

    def consistent_view(self) -> ContextManager[None]: ...


class ConfigClient:
    """Read-only client for one config store root.

    Every query reopens the store and re-reads the resolved version, so
    results always reflect the current store contents. Inside
    ``consistent_view`` all queries share the version read first.
    """

    def __init__(
        self,
        store_root: Location,
        version: str | None = None,
        config: TagrootConfig | None = None,
        s3_client: Any | None = None,
    ) -> None:
        """Create a config store client.

        Args:
            store_root: Store root location.
            version: Optional pinned store version; latest when omitted.
            config: Optional runtime configuration.
            s3_client: Optional preconfigured S3 client for s3:// roots.
        """
        self._store_root = store_root
        self._version = version
        self._config = config or TagrootConfig.from_env()
        self._s3_client = s3_client
        self._view_depth = 0
        self._view_topology: tuple[StoreTopology, str] | None = None

    @property
    def store_root(self) -> Location:
        """Return the store root location."""
        return self._store_root

    @contextmanager
    def consistent_view(self) -> Iterator[None]:
        """Answer every query inside the block from one store version.

        The version is resolved and read by the first query in the block
        and dropped when the outermost block exits. Nested blocks share it.
        """
        self._view_depth += 1
        try:
            yield
        finally:
            self._view_depth -= 1
            if not self._view_depth:
                self._view_topology = None

    def get_imported_by(self, tag: Location, recursive: bool) -> list[Location]:
        """Return locations importing a tag.

        Args:
            tag: Tag location under the store root.
            recursive: Include transitive and inherited importers.

        Returns:
            Importer locations sorted by path.

        Raises:
            TagrootLocationError: If the tag is outside the store root.
            TagrootStoreError: If the store cannot be opened or read.
        """
        tag_path = self._node_path(tag)
        topology, version = self._load_topology()
        importers = [
            merge_paths(self._store_root, node_path)
            for node_path in topology.imported_by(tag_path, recursive)
        ]
        _LOGGER.debug(
            "imported_by_resolved",
            tag=str(tag),
            version=version,
            recursive=recursive,
            importer_count=len(importers),
        )
        return importers

    def get_config(self, location: Location) -> dict[str, object]:
        """Return the resolved config of a store node.

        Args:
            location: Node location under the store root.

        Returns:
            Merged config mapping.

        Raises:
            TagrootLocationError: If the location is outside the store root.
            TagrootStoreError: If the store cannot be opened or read.
        """
        node_path = self._node_path(location)
        topology, _ = self._load_topology()
        return topology.resolve_config(node_path)

    def _load_topology(self) -> tuple[StoreTopology, str]:
        if self._view_topology is not None:
            return self._view_topology
        backend = open_store_backend(self._store_root, self._config, self._s3_client)
        version = resolve_version(backend.list_versions(), self._version)
        loaded = StoreTopology.from_payloads(backend.read_node_payloads(version)), version
        if self._view_depth:
            self._view_topology = loaded
            _LOGGER.debug("store_view_pinned", store_root=str(self._store_root), version=version)
        return loaded

    def _node_path(self, location: Location) -> str:
        if not is_ancestor(self._store_root, location):
            raise TagrootLocationError(
                f"Location '{location}' is not under config store root '{self._store_root}'. "
                "Use store-relative paths in job configuration."
            )
        return relative_path(self._store_root, location)
