"""Candidate gathering for dataset discovery.

This module queries the metadata service for whitelist importers and
the union of blacklist importers. Service failures abort the call.
"""

from __future__ import annotations

from core.errors import (
    TagrootDependencyError,
    TagrootDiscoveryError,
    TagrootLocationError,
    TagrootStoreError,
)
from core.location import Location
from core.logging_config import get_logger
from core.types import CandidateSnapshot
from finder.job_settings import JobSettings
from store.config_client import MetadataQueryService

_LOGGER = get_logger(__name__)


def gather_candidates(service: MetadataQueryService, settings: JobSettings) -> CandidateSnapshot:
    """Collect candidate and disabled locations.

    Args:
        service: Metadata query service.
        settings: Resolved job settings.

    Returns:
        Whitelist importers and the union of blacklist importers.

    Raises:
        TagrootDiscoveryError: If any metadata query fails.
    """
    candidates = _query_importers(service, settings.whitelist_tag)
    disabled: set[Location] = set()
    if settings.blacklist_tags is not None:
        for blacklist_tag in settings.blacklist_tags:
            disabled.update(_query_importers(service, blacklist_tag))
    _LOGGER.info(
        "candidates_gathered",
        whitelist_tag=str(settings.whitelist_tag),
        candidate_count=len(candidates),
        disabled_count=len(disabled),
    )
    return CandidateSnapshot(candidates=candidates, disabled=frozenset(disabled))


def _query_importers(service: MetadataQueryService, tag: Location) -> frozenset[Location]:
    try:
        return frozenset(service.get_imported_by(tag, True))
    except (TagrootStoreError, TagrootLocationError, TagrootDependencyError) as error:
        _LOGGER.error(
            "imported_by_failed",
            tag=str(tag),
            error_type=type(error).__name__,
            error=str(error),
        )
        raise TagrootDiscoveryError(
            f"Failed to get datasets importing '{tag}': {error}"
        ) from error
