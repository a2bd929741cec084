"""Core constants used across Tagroot modules.

This module centralizes job property keys and store layout names.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

STORE_URI_KEY = "config.store.uri"
STORE_VERSION_KEY = "config.store.version"
CONFIG_BASED_PREFIX = "configbased"
WHITELIST_TAG_KEY = f"{CONFIG_BASED_PREFIX}.whitelist.tag"
BLACKLIST_TAGS_KEY = f"{CONFIG_BASED_PREFIX}.blacklist.tags"
DATASET_COMMON_ROOT_KEY = f"{CONFIG_BASED_PREFIX}.dataset.common.root"
REQUIRED_JOB_KEYS = (STORE_URI_KEY, WHITELIST_TAG_KEY, DATASET_COMMON_ROOT_KEY)
BLACKLIST_SEPARATOR = ","

CONFIG_STORE_DIR_NAME = "_CONFIG_STORE"
NODE_FILE_NAME = "node.yaml"
NODE_IMPORTS_FIELD = "imports"
NODE_CONFIG_FIELD = "config"
LOCAL_STORE_SCHEMES = ("", "file")
S3_STORE_SCHEME = "s3"

DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
