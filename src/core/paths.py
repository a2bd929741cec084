"""Path ancestry helpers for locations.

This module compares location paths within one scheme and authority
and composes store-relative paths onto a base location.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from core.location import Location


def is_ancestor(possible_ancestor: Location, location: Location) -> bool:
    """Return whether a location lies at or below a possible ancestor.

    Scheme and authority must match when both locations carry one, so
    ``file:///a`` is an ancestor of the bare path ``/a/b`` while
    ``s3://bucket-a/a`` is not an ancestor of ``s3://bucket-b/a/b``.

    Args:
        possible_ancestor: Candidate parent location.
        location: Candidate child location.

    Returns:
        True for descendants and for equal paths.
    """
    if not _same_namespace(possible_ancestor.scheme, location.scheme):
        return False
    if not _same_namespace(possible_ancestor.authority, location.authority):
        return False
    ancestor_parts = _path_parts(possible_ancestor)
    location_parts = _path_parts(location)
    if len(ancestor_parts) > len(location_parts):
        return False
    return location_parts[: len(ancestor_parts)] == ancestor_parts


def is_strict_ancestor(possible_ancestor: Location, location: Location) -> bool:
    """Return whether a location lies strictly below a possible ancestor."""
    if _path_parts(possible_ancestor) == _path_parts(location):
        return False
    return is_ancestor(possible_ancestor, location)


def merge_paths(base: Location, relative_path: str) -> Location:
    """Append a store-relative path to a base location.

    Args:
        base: Base location, usually the store root.
        relative_path: Path to append; a leading ``/`` is ignored.

    Returns:
        Merged location keeping the base scheme and authority.
    """
    base_path = PurePosixPath(base.path or "/")
    relative = relative_path.strip().lstrip("/")
    merged_path = base_path / relative if relative else base_path
    return base.with_path(str(merged_path))


def relative_path(root: Location, location: Location) -> str:
    """Return the path of a location relative to a root.

    Args:
        root: Root location.
        location: Location at or below the root.

    Returns:
        Relative posix path, empty for the root itself.

    Raises:
        ValueError: If the location is not under the root.
    """
    if not is_ancestor(root, location):
        raise ValueError(f"{location} is not under {root}")
    relative_parts = _path_parts(location)[len(_path_parts(root)) :]
    return "/".join(relative_parts)


def _path_parts(location: Location) -> tuple[str, ...]:
    return PurePosixPath(location.path).parts


def _same_namespace(first: str, second: str) -> bool:
    return not first or not second or first == second
