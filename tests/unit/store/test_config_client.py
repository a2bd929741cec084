"""Unit tests for the config store client."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import TagrootConfig
from core.errors import (
    TagrootLocationError,
    TagrootStoreCreationError,
    TagrootStoreVersionError,
)
from core.location import Location
from core.paths import merge_paths
from store import config_client
from store.config_client import ConfigClient
from tests.fixture_paths import fixture_store_root


def _client(version: str | None = None) -> ConfigClient:
    config = TagrootConfig(s3_region=None, s3_profile=None, log_level="info")
    return ConfigClient(fixture_store_root(), version=version, config=config)


def _relative_uris(locations: list[Location]) -> list[str]:
    root_path = fixture_store_root().path
    return [location.path[len(root_path) + 1 :] for location in locations]


def test_get_imported_by_reads_latest_version() -> None:
    """Recursive lookups should read the newest store version."""
    tag = merge_paths(fixture_store_root(), "tags/replicate")

    importers = _client().get_imported_by(tag, True)

    assert _relative_uris(importers) == [
        "data/metrics",
        "data/tracking",
        "data/tracking/events",
        "data/tracking/page_views",
        "other/audit",
        "tags/replicate/high_priority",
    ]


def test_get_imported_by_returns_store_scheme_locations() -> None:
    """Importer locations should share the store root scheme."""
    tag = merge_paths(fixture_store_root(), "tags/disabled")

    importers = _client().get_imported_by(tag, True)

    assert [location.scheme for location in importers] == ["file"]


def test_get_imported_by_direct_lookup() -> None:
    """Non-recursive lookups only return explicit importers."""
    tag = merge_paths(fixture_store_root(), "tags/replicate")

    importers = _client().get_imported_by(tag, False)

    assert _relative_uris(importers) == ["data/tracking", "other/audit"]


def test_get_imported_by_reads_pinned_version() -> None:
    """A pinned version should be queried instead of the latest."""
    tag = merge_paths(fixture_store_root(), "tags/replicate")

    importers = _client(version="v1").get_imported_by(tag, True)

    assert _relative_uris(importers) == ["data/legacy"]


def test_get_imported_by_raises_for_unknown_version() -> None:
    """Unknown pinned versions cannot be resolved."""
    tag = merge_paths(fixture_store_root(), "tags/replicate")

    with pytest.raises(TagrootStoreVersionError):
        _client(version="v9").get_imported_by(tag, True)


def test_get_imported_by_raises_for_tag_outside_store() -> None:
    """Tags outside the store root are malformed identifiers."""
    with pytest.raises(TagrootLocationError):
        _client().get_imported_by(Location("file:///elsewhere/tags/replicate"), True)


def test_get_imported_by_raises_for_missing_store(tmp_path: Path) -> None:
    """A store root without a config store cannot be created."""
    client = ConfigClient(Location(tmp_path.as_uri()))

    with pytest.raises(TagrootStoreCreationError):
        client.get_imported_by(Location(tmp_path.as_uri() + "/tags/x"), True)


def test_get_imported_by_rereads_store_on_every_call(tmp_path: Path) -> None:
    """Results should reflect store changes between calls."""
    version_dir = tmp_path / "_CONFIG_STORE" / "v1"
    (version_dir / "tags" / "x").mkdir(parents=True)
    client = ConfigClient(Location(tmp_path.as_uri()))
    tag = merge_paths(client.store_root, "tags/x")
    first = client.get_imported_by(tag, True)
    node_dir = version_dir / "data" / "a"
    node_dir.mkdir(parents=True)
    (node_dir / "node.yaml").write_text("imports: [tags/x]\n", encoding="utf-8")

    second = client.get_imported_by(tag, True)

    assert first == []
    assert second == [merge_paths(client.store_root, "data/a")]


def test_get_config_resolves_inherited_values() -> None:
    """Resolved config should combine the node, its imports, and ancestors."""
    location = merge_paths(fixture_store_root(), "data/tracking/events")

    config = _client().get_config(location)

    assert config == {
        "owner": "tracking-team",
        "replication.enabled": True,
        "copy.mode": "full",
        "format": "avro",
    }


def _write_node(version_dir: Path, node_path: str, content: str) -> None:
    node_dir = version_dir / node_path
    node_dir.mkdir(parents=True, exist_ok=True)
    (node_dir / "node.yaml").write_text(content, encoding="utf-8")


def test_consistent_view_keeps_first_version_read(tmp_path: Path) -> None:
    """Versions published inside a view should not be seen until it closes."""
    store_dir = tmp_path / "_CONFIG_STORE"
    _write_node(store_dir / "v1", "data/a", "imports: [tags/x]\n")
    _write_node(store_dir / "v1", "tags/x", "{}\n")
    client = ConfigClient(Location(tmp_path.as_uri()))
    tag = merge_paths(client.store_root, "tags/x")

    with client.consistent_view():
        first = client.get_imported_by(tag, True)
        _write_node(store_dir / "v2", "data/b", "imports: [tags/x]\n")
        _write_node(store_dir / "v2", "tags/x", "{}\n")
        second = client.get_imported_by(tag, True)
    after = client.get_imported_by(tag, True)

    assert first == second == [merge_paths(client.store_root, "data/a")]
    assert after == [merge_paths(client.store_root, "data/b")]


def test_consistent_view_reads_store_once(monkeypatch: pytest.MonkeyPatch) -> None:
    """Queries inside one view should share a single store read."""
    opened: list[Location] = []
    original_open = config_client.open_store_backend

    def _counting_open(store_root: Location, *args: object) -> object:
        opened.append(store_root)
        return original_open(store_root, *args)

    monkeypatch.setattr(config_client, "open_store_backend", _counting_open)
    client = _client()
    tag = merge_paths(fixture_store_root(), "tags/replicate")

    with client.consistent_view():
        with client.consistent_view():
            client.get_imported_by(tag, True)
        client.get_config(merge_paths(fixture_store_root(), "data/tracking/events"))
    client.get_imported_by(tag, False)

    assert len(opened) == 2


def test_get_imported_by_rejects_tag_in_other_bucket() -> None:
    """Tags in another bucket are outside the store root."""
    config = TagrootConfig(s3_region=None, s3_profile=None, log_level="info")
    client = ConfigClient(Location("s3://bucket-a/stores"), config=config, s3_client=object())

    with pytest.raises(TagrootLocationError):
        client.get_imported_by(Location("s3://bucket-b/stores/tags/x"), True)
