"""Config store node topology.

This module parses raw node payloads and answers import queries.
A node imports its explicit imports plus its parent, transitively.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, cast

import yaml

from core.constants import NODE_CONFIG_FIELD, NODE_IMPORTS_FIELD
from core.errors import TagrootStoreCreationError, TagrootStoreVersionError
from core.types import StoreNode

_VERSION_PART_PATTERN = re.compile(r"(\d+)")


class StoreTopology:
    """Import graph over the nodes of one store version."""

    def __init__(self, nodes: Iterable[StoreNode]) -> None:
        self._nodes = {node.path: node for node in nodes}

    @classmethod
    def from_payloads(cls, payloads: Mapping[str, str]) -> "StoreTopology":
        """Parse raw node payloads into a topology.

        Args:
            payloads: Mapping of node path to raw YAML text.

        Returns:
            Parsed topology.

        Raises:
            TagrootStoreCreationError: If any node payload is invalid.
        """
        return cls(parse_node(path, text) for path, text in payloads.items())

    def imported_by(self, tag_path: str, recursive: bool) -> list[str]:
        """Return nodes importing a tag node.

        Args:
            tag_path: Store-relative tag path.
            recursive: Follow transitive and inherited imports.

        Returns:
            Sorted importer node paths, never including the tag itself.
        """
        tag_path = normalize_node_path(tag_path)
        importers = []
        for node_path, node in self._nodes.items():
            if node_path == tag_path:
                continue
            if recursive:
                imported = tag_path in self.imports_recursively(node_path)
            else:
                imported = tag_path in node.imports
            if imported:
                importers.append(node_path)
        return sorted(importers)

    def imports_recursively(self, node_path: str) -> set[str]:
        """Return the transitive import closure of a node.

        Args:
            node_path: Store-relative node path.

        Returns:
            Every path reachable through imports and parent links.
        """
        closure: set[str] = set()
        pending = list(self._direct_imports(node_path))
        while pending:
            current = pending.pop()
            if current in closure:
                continue
            closure.add(current)
            pending.extend(self._direct_imports(current))
        return closure

    def resolve_config(self, node_path: str) -> dict[str, object]:
        """Resolve the effective config of a node.

        Own values win over imports, earlier imports win over later ones,
        and imports win over the parent.

        Args:
            node_path: Store-relative node path.

        Returns:
            Merged config mapping.
        """
        return self._resolve_config(normalize_node_path(node_path), frozenset())

    def _resolve_config(self, node_path: str, visiting: frozenset[str]) -> dict[str, object]:
        if node_path in visiting:
            return {}
        visiting = visiting | {node_path}
        node = self._nodes.get(node_path, StoreNode(path=node_path))
        resolved: dict[str, object] = {}
        if node.parent_path is not None:
            resolved.update(self._resolve_config(node.parent_path, visiting))
        for imported_path in reversed(node.imports):
            resolved.update(self._resolve_config(imported_path, visiting))
        resolved.update(node.config)
        return resolved

    def _direct_imports(self, node_path: str) -> tuple[str, ...]:
        node = self._nodes.get(node_path, StoreNode(path=node_path))
        if node.parent_path is None:
            return node.imports
        return (*node.imports, node.parent_path)


def parse_node(node_path: str, text: str) -> StoreNode:
    """Parse one ``node.yaml`` payload.

    Args:
        node_path: Store-relative node path.
        text: Raw YAML text, empty for nodes without a node file.

    Returns:
        Parsed store node.

    Raises:
        TagrootStoreCreationError: If the payload shape is invalid.
    """
    try:
        payload = cast(object, yaml.safe_load(text)) if text.strip() else None
    except yaml.YAMLError as error:
        raise TagrootStoreCreationError(
            f"Failed to parse config store node '{node_path}': {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        return StoreNode(path=node_path)
    if not isinstance(payload, dict):
        raise TagrootStoreCreationError(
            f"Invalid config store node '{node_path}': expected mapping, "
            f"got {type(payload).__name__}."
        )
    unknown_keys = sorted(str(key) for key in payload if key not in _NODE_FIELDS)
    if unknown_keys:
        raise TagrootStoreCreationError(
            f"Config store node '{node_path}' contains unknown fields: {', '.join(unknown_keys)}."
        )
    return StoreNode(
        path=node_path,
        imports=_parse_imports(node_path, payload.get(NODE_IMPORTS_FIELD)),
        config=_parse_config(node_path, payload.get(NODE_CONFIG_FIELD)),
    )


def normalize_node_path(raw_path: str) -> str:
    """Strip surrounding slashes from a store-relative path."""
    return raw_path.strip().strip("/")


def resolve_version(available: Iterable[str], pinned: str | None) -> str:
    """Pick the store version to read.

    Args:
        available: Version names present in the store.
        pinned: Optional explicitly requested version.

    Returns:
        The pinned version, or the greatest version in natural order.

    Raises:
        TagrootStoreVersionError: If no suitable version exists.
    """
    versions = sorted(set(available), key=_natural_key)
    if pinned is not None:
        if pinned not in versions:
            raise TagrootStoreVersionError(
                f"Config store version '{pinned}' does not exist. "
                f"Available versions: {', '.join(versions) or 'none'}."
            )
        return pinned
    if not versions:
        raise TagrootStoreVersionError(
            "Config store has no versions. Publish a store version and retry."
        )
    return versions[-1]


_NODE_FIELDS = (NODE_IMPORTS_FIELD, NODE_CONFIG_FIELD)


def _parse_imports(node_path: str, raw_imports: object) -> tuple[str, ...]:
    if raw_imports is None:
        return ()
    if not isinstance(raw_imports, list) or not all(isinstance(i, str) for i in raw_imports):
        raise TagrootStoreCreationError(
            f"Config store node '{node_path}' field '{NODE_IMPORTS_FIELD}' "
            "must be a list of node paths."
        )
    return tuple(normalize_node_path(item) for item in raw_imports)


def _parse_config(node_path: str, raw_config: object) -> Mapping[str, object]:
    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise TagrootStoreCreationError(
            f"Config store node '{node_path}' field '{NODE_CONFIG_FIELD}' must be a mapping."
        )
    return {str(key): value for key, value in raw_config.items()}


def _natural_key(version: str) -> tuple[tuple[int, object], ...]:
    parts = _VERSION_PART_PATTERN.split(version)
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in parts)
