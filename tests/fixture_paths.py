"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from core.location import Location


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path


def fixture_store_root() -> Location:
    """Return the sample config store root as a file location."""
    return Location(fixture_path("config_store").as_uri())


def fixture_job_properties(overrides: Mapping[str, object] | None = None) -> dict[str, object]:
    """Build job properties pointing at the sample config store.

    Args:
        overrides: Property values replacing or extending the defaults.

    Returns:
        Job property mapping.
    """
    properties: dict[str, object] = {
        "config.store.uri": fixture_store_root().uri,
        "configbased.whitelist.tag": "tags/replicate",
        "configbased.dataset.common.root": "data",
    }
    properties.update(overrides or {})
    return properties
