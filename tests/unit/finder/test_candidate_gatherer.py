"""Unit tests for candidate gathering."""

from __future__ import annotations

from typing import Collection, Mapping

import pytest
from structlog.testing import capture_logs

from core.errors import (
    TagrootDependencyError,
    TagrootDiscoveryError,
    TagrootLocationError,
    TagrootStoreCreationError,
    TagrootStoreFactoryError,
    TagrootStoreVersionError,
)
from core.location import Location
from finder.candidate_gatherer import gather_candidates
from finder.job_settings import JobSettings


class _RecordingService:
    def __init__(
        self,
        importers: Mapping[str, Collection[str]],
        error: Exception | None = None,
    ) -> None:
        self._importers = importers
        self._error = error
        self.calls: list[tuple[str, bool]] = []

    def get_imported_by(self, tag: Location, recursive: bool) -> list[Location]:
        self.calls.append((tag.path, recursive))
        if self._error is not None:
            raise self._error
        return [Location(path) for path in self._importers.get(tag.path, ())]


def _settings(blacklist: str | None = None) -> JobSettings:
    properties: dict[str, object] = {
        "config.store.uri": "/store",
        "configbased.whitelist.tag": "tags/wl",
        "configbased.dataset.common.root": "data",
    }
    if blacklist is not None:
        properties["configbased.blacklist.tags"] = blacklist
    return JobSettings.from_properties(properties)


def test_gather_queries_whitelist_recursively() -> None:
    """Whitelist importers become the candidate set."""
    service = _RecordingService({"/store/tags/wl": ["/store/data/a", "/store/data/b"]})

    snapshot = gather_candidates(service, _settings())

    assert snapshot.candidates == {Location("/store/data/a"), Location("/store/data/b")}
    assert service.calls == [("/store/tags/wl", True)]


def test_gather_without_blacklist_has_empty_disabled_set() -> None:
    """No blacklist configured means nothing is disabled."""
    snapshot = gather_candidates(_RecordingService({}), _settings())

    assert snapshot.disabled == frozenset()


def test_gather_unions_blacklist_importers() -> None:
    """Each blacklist tag is queried once and results are merged."""
    service = _RecordingService(
        {
            "/store/tags/bl1": ["/store/data/a"],
            "/store/tags/bl2": ["/store/data/b", "/store/data/a"],
        }
    )

    snapshot = gather_candidates(service, _settings("tags/bl1,tags/bl2"))

    assert snapshot.disabled == {Location("/store/data/a"), Location("/store/data/b")}
    assert service.calls[1:] == [("/store/tags/bl1", True), ("/store/tags/bl2", True)]


def test_gather_with_empty_blacklist_only_queries_whitelist() -> None:
    """A configured empty blacklist issues no blacklist queries."""
    service = _RecordingService({})

    gather_candidates(service, _settings(""))

    assert service.calls == [("/store/tags/wl", True)]


@pytest.mark.parametrize(
    "error",
    [
        TagrootStoreCreationError("store missing"),
        TagrootStoreVersionError("no versions"),
        TagrootLocationError("bad identifier"),
        TagrootStoreFactoryError("unsupported scheme"),
        TagrootDependencyError("boto3 missing"),
    ],
)
def test_gather_wraps_service_failures(error: Exception) -> None:
    """Service failures are logged and re-raised as discovery errors."""
    service = _RecordingService({}, error=error)

    with capture_logs() as logs, pytest.raises(TagrootDiscoveryError) as raised:
        gather_candidates(service, _settings())

    assert raised.value.__cause__ is error
    assert logs[0]["event"] == "imported_by_failed" and logs[0]["tag"] == "/store/tags/wl"
