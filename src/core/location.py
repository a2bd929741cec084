"""Location identifiers for config store nodes and datasets.

This module wraps URI strings in a typed, ordered value object.
Paths are canonicalized on construction, so locations compare by
identifier and sort by path.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit

from core.errors import TagrootLocationError


@dataclass(frozen=True)
class Location:
    """Opaque hierarchical identifier for a dataset or tag.

    Attributes:
        uri: Full identifier, e.g. ``file:///stores/main/data/tracking``.
            Repeated slashes, ``.`` and ``..`` segments, and a trailing
            slash are removed from the path.
    """

    uri: str
    _parts: SplitResult = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        uri, parts = _canonicalize(self.uri, _split_uri(self.uri))
        object.__setattr__(self, "uri", uri)
        object.__setattr__(self, "_parts", parts)

    @classmethod
    def parse(cls, raw_value: str) -> "Location":
        """Build a location from a raw identifier string.

        Args:
            raw_value: URI or absolute path string.

        Returns:
            Parsed location.

        Raises:
            TagrootLocationError: If the identifier is malformed.
        """
        return cls(raw_value)

    @property
    def scheme(self) -> str:
        """Return the URI scheme, empty for bare paths."""
        return self._parts.scheme

    @property
    def authority(self) -> str:
        """Return the URI authority (host or bucket)."""
        return self._parts.netloc

    @property
    def path(self) -> str:
        """Return the path component without scheme and authority."""
        return self._parts.path

    def with_path(self, path: str) -> "Location":
        """Return a location sharing scheme and authority with a new path."""
        parts = self._parts._replace(path=path, query="", fragment="")
        return Location(parts.geturl() if parts.scheme else path)

    def __lt__(self, other: "Location") -> bool:
        return (self.path, self.uri) < (other.path, other.uri)

    def __le__(self, other: "Location") -> bool:
        return (self.path, self.uri) <= (other.path, other.uri)

    def __gt__(self, other: "Location") -> bool:
        return (self.path, self.uri) > (other.path, other.uri)

    def __ge__(self, other: "Location") -> bool:
        return (self.path, self.uri) >= (other.path, other.uri)

    def __str__(self) -> str:
        return self.uri


def _split_uri(raw_value: object) -> SplitResult:
    """Validate and split a raw identifier.

    Args:
        raw_value: Candidate identifier.

    Returns:
        Split URI parts.

    Raises:
        TagrootLocationError: If identifier syntax is invalid.
    """
    if not isinstance(raw_value, str) or not raw_value:
        raise TagrootLocationError(
            f"Invalid location identifier {raw_value!r}: expected a non-empty string."
        )
    if any(char.isspace() or not char.isprintable() for char in raw_value):
        raise TagrootLocationError(
            f"Invalid location identifier '{raw_value}': whitespace and control "
            "characters are not allowed. Percent-encode them in the URI."
        )
    try:
        parts = urlsplit(raw_value)
        _ = parts.port
    except ValueError as error:
        raise TagrootLocationError(
            f"Invalid location identifier '{raw_value}': {error}."
        ) from error
    if not parts.path.startswith("/"):
        raise TagrootLocationError(
            f"Invalid location identifier '{raw_value}': path must be absolute. "
            "Use a URI such as file:///store/root or s3://bucket/prefix."
        )
    return parts


def _canonicalize(raw_value: str, parts: SplitResult) -> tuple[str, SplitResult]:
    """Rewrite an identifier around its normalized absolute path."""
    path = posixpath.normpath(parts.path)
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    if path == parts.path:
        return raw_value, parts
    head = ""
    if parts.scheme:
        head = f"{parts.scheme}:"
        if raw_value[len(head) :].startswith("//"):
            head += f"//{parts.netloc}"
    tail = raw_value[len(head) + len(parts.path) :]
    return head + path + tail, parts._replace(path=path)
