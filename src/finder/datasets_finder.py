"""Config-based dataset finder.

This module ties settings, candidate gathering, and leaf reduction
into the discovery surface consumed by replication and retention jobs.
Dataset objects are produced by an injected materializer strategy.
Each discovery call reads one store version when the service supports it.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import Any, ContextManager, Generic, Iterator, Mapping, Protocol, TypeVar

from core.config import TagrootConfig
from core.errors import TagrootConfigError
from core.location import Location
from core.logging_config import get_logger
from core.types import ConfigBasedDataset
from finder.candidate_gatherer import gather_candidates
from finder.job_settings import JobSettings
from finder.leaf_reducer import reduce_to_leaves
from store.config_client import ConfigClient, ConsistentViewSource, MetadataQueryService

_LOGGER = get_logger(__name__)

DatasetT = TypeVar("DatasetT", covariant=True)


class DatasetMaterializer(Protocol[DatasetT]):
    """Turns a leaf location into a domain dataset object."""

    def materialize(self, location: Location, properties: Mapping[str, object]) -> DatasetT: ...


class ConfigDatasetMaterializer:
    """Materializer attaching resolved config store values to each dataset."""

    def __init__(self, client: ConfigClient) -> None:
        self._client = client

    def consistent_view(self) -> ContextManager[None]:
        """Pin the backing client to one store version."""
        return self._client.consistent_view()

    def materialize(
        self,
        location: Location,
        properties: Mapping[str, object],
    ) -> ConfigBasedDataset:
        """Build a dataset carrying its resolved store config."""
        return ConfigBasedDataset(
            location=location,
            dataset_config=self._client.get_config(location),
            job_properties=properties,
        )


class ConfigBasedDatasetsFinder(Generic[DatasetT]):
    """Finds leaf dataset locations tagged in a config store.

    Settings are fixed at construction. Every discovery call re-queries
    the metadata service and keeps no state between calls.
    """

    def __init__(
        self,
        settings: JobSettings,
        service: MetadataQueryService,
        materializer: DatasetMaterializer[DatasetT] | None = None,
    ) -> None:
        """Create a finder.

        Args:
            settings: Resolved job settings.
            service: Metadata query service for tag lookups.
            materializer: Optional strategy for building dataset objects.
        """
        self._settings = settings
        self._service = service
        self._materializer = materializer

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, object],
        service: MetadataQueryService | None = None,
        materializer: DatasetMaterializer[Any] | None = None,
        config: TagrootConfig | None = None,
    ) -> "ConfigBasedDatasetsFinder[Any]":
        """Build a finder from raw job properties.

        When no service is given, a ``ConfigClient`` for the configured
        store root is created and also backs the default materializer.

        Args:
            properties: Flat job property mapping.
            service: Optional metadata query service.
            materializer: Optional dataset materializer.
            config: Optional runtime configuration.

        Returns:
            Configured finder.

        Raises:
            TagrootConfigError: If a required property is missing.
        """
        settings = JobSettings.from_properties(properties)
        if service is None:
            client = ConfigClient(
                settings.store_root,
                version=settings.store_version,
                config=config,
            )
            service = client
            if materializer is None:
                materializer = ConfigDatasetMaterializer(client)
        return cls(settings, service, materializer)

    @property
    def settings(self) -> JobSettings:
        """Return the resolved job settings."""
        return self._settings

    def common_dataset_root(self) -> Location:
        """Return the root every valid dataset lies under."""
        return self._settings.common_root

    def find_valid_dataset_locations(self) -> frozenset[Location]:
        """Discover enabled leaf dataset locations.

        Returns:
            Leaf locations under the common root.

        Raises:
            TagrootDiscoveryError: If a metadata query fails.
        """
        with self._consistent_view(self._service):
            return self._find_leaves()

    def find_datasets(self) -> list[DatasetT]:
        """Discover leaf locations and materialize them in path order.

        Discovery and materialization read the same store version.

        Returns:
            Materialized dataset objects.

        Raises:
            TagrootConfigError: If the finder has no materializer.
            TagrootDiscoveryError: If a metadata query fails.
        """
        if self._materializer is None:
            raise TagrootConfigError(
                "Dataset materialization requires a materializer. "
                "Pass one when constructing the finder."
            )
        with self._consistent_view(self._service, self._materializer):
            return [
                self._materializer.materialize(location, self._settings.properties)
                for location in sorted(self._find_leaves())
            ]

    def _find_leaves(self) -> frozenset[Location]:
        snapshot = gather_candidates(self._service, self._settings)
        leaves = reduce_to_leaves(
            snapshot.candidates,
            snapshot.disabled,
            self._settings.common_root,
        )
        _LOGGER.info(
            "dataset_locations_found",
            common_root=str(self._settings.common_root),
            candidate_count=len(snapshot.candidates),
            leaf_count=len(leaves),
        )
        return leaves

    @staticmethod
    @contextmanager
    def _consistent_view(*sources: object) -> Iterator[None]:
        """Hold the single-version view of every source supporting one."""
        with ExitStack() as stack:
            for source in sources:
                if isinstance(source, ConsistentViewSource):
                    stack.enter_context(source.consistent_view())
            yield
