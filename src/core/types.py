"""Shared typed models.

This module defines immutable data models used by the store,
finder, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from core.location import Location


@dataclass(frozen=True)
class StoreNode:
    """One parsed config store node.

    Attributes:
        path: Node path relative to the store root, empty for the root node.
        imports: Store-relative paths of explicitly imported nodes, in order.
        config: Node-local configuration values.
    """

    path: str
    imports: tuple[str, ...] = ()
    config: Mapping[str, object] = field(default_factory=dict)

    @property
    def parent_path(self) -> str | None:
        """Return the parent node path, or None for the root node."""
        if not self.path:
            return None
        head, _, _ = self.path.rpartition("/")
        return head


@dataclass(frozen=True)
class CandidateSnapshot:
    """Raw discovery inputs gathered from the metadata service.

    Attributes:
        candidates: Locations importing the whitelist tag.
        disabled: Union of locations importing any blacklist tag.
    """

    candidates: frozenset[Location]
    disabled: frozenset[Location]


@dataclass(frozen=True)
class ConfigBasedDataset:
    """Dataset materialized from a leaf location.

    Attributes:
        location: Leaf dataset location.
        dataset_config: Resolved config store values for the location.
        job_properties: Job properties the finder was built from.
    """

    location: Location
    dataset_config: Mapping[str, object]
    job_properties: Mapping[str, object]
