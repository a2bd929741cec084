"""Tagroot exception hierarchy.

This module defines traceable domain errors for discovery failures.
Configuration, location, store, and discovery problems each get a type.
"""

from __future__ import annotations


class TagrootError(Exception):
    """Base exception for all Tagroot failures."""


class TagrootConfigError(TagrootError):
    """Raised for missing or invalid job and runtime configuration."""


class TagrootLocationError(TagrootError):
    """Raised for malformed location identifiers."""


class TagrootStoreError(TagrootError):
    """Base exception for config store failures."""


class TagrootStoreFactoryError(TagrootStoreError):
    """Raised when no store backend handles a store URI scheme."""


class TagrootStoreCreationError(TagrootStoreError):
    """Raised when a config store cannot be opened or parsed."""


class TagrootStoreVersionError(TagrootStoreError):
    """Raised when a config store version cannot be resolved."""


class TagrootDiscoveryError(TagrootError):
    """Raised when a dataset discovery call aborts."""


class TagrootDependencyError(TagrootError):
    """Raised when an optional runtime dependency is missing."""
