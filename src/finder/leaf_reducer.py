"""Leaf reduction of candidate dataset locations.

This module keeps only the most specific candidates under the common
root and drops disabled locations, so a parent and its included
children are never both returned.
"""

from __future__ import annotations

import bisect
from typing import Collection

from core.location import Location
from core.logging_config import get_logger
from core.paths import is_ancestor, is_strict_ancestor

_LOGGER = get_logger(__name__)


def path_length_key(location: Location) -> int:
    """Order locations so shorter paths are processed first.

    Ancestors normally have shorter paths than their descendants, which
    lets the reducer find parents without building a tree.
    """
    return len(location.path)


def reduce_to_leaves(
    candidates: Collection[Location],
    disabled: Collection[Location],
    common_root: Location,
) -> frozenset[Location]:
    """Reduce candidates to enabled leaf locations under a common root.

    Args:
        candidates: Locations importing the whitelist tag.
        disabled: Locations importing any blacklist tag.
        common_root: Root every returned location must lie under.

    Returns:
        Leaf locations with no candidate descendants and none disabled.
    """
    if not candidates:
        return frozenset()
    in_root = [u for u in sorted(set(candidates)) if is_ancestor(common_root, u)]
    ordered = sorted(in_root, key=path_length_key)

    accepted: list[Location] = []
    non_leaf: set[Location] = set()
    for location in ordered:
        floor = _floor(accepted, location)
        if floor is not None and is_strict_ancestor(floor, location):
            non_leaf.add(floor)
        bisect.insort(accepted, location)

    leaves = {location for location in accepted if location not in non_leaf}
    for location in sorted(set(disabled)):
        if location in leaves:
            leaves.remove(location)
            _LOGGER.info("dataset_disabled", location=str(location))
    return frozenset(leaves)


def _floor(accepted: list[Location], location: Location) -> Location | None:
    """Return the greatest accepted location ordered at or before a location."""
    index = bisect.bisect_right(accepted, location)
    return accepted[index - 1] if index else None
