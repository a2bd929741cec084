"""Public SDK surface for Tagroot.

This module provides a stable import path for discovery users.
It re-exports the finder, store client, and typed models.
"""

from __future__ import annotations

from core.config import TagrootConfig
from core.location import Location
from core.types import CandidateSnapshot, ConfigBasedDataset
from finder.datasets_finder import (
    ConfigBasedDatasetsFinder,
    ConfigDatasetMaterializer,
    DatasetMaterializer,
)
from finder.job_settings import JobSettings, load_job_properties
from finder.leaf_reducer import path_length_key, reduce_to_leaves
from store.config_client import ConfigClient, ConsistentViewSource, MetadataQueryService

__all__ = [
    "CandidateSnapshot",
    "ConfigBasedDataset",
    "ConfigBasedDatasetsFinder",
    "ConfigClient",
    "ConfigDatasetMaterializer",
    "ConsistentViewSource",
    "DatasetMaterializer",
    "JobSettings",
    "Location",
    "MetadataQueryService",
    "TagrootConfig",
    "load_job_properties",
    "path_length_key",
    "reduce_to_leaves",
]
