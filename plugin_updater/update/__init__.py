"""
Update Resolution Package

Provides update resolution for a single plugin tracked on GitHub Releases.

Features:
- Parse "owner/repo" references from settings or the Plugin URI header
- Fetch release metadata with a 6-hour cache
- Strict dotted-numeric version comparison
- Credential injection scoped to the GitHub API host
- Rename extracted zipballs to the plugin's folder
"""

from plugin_updater.update.authorizer import RequestAuthorizer
from plugin_updater.update.cache import ResponseCache, cache_key
from plugin_updater.update.descriptor import UpdateDescriptorBuilder
from plugin_updater.update.engine import UpdaterEngine, create_engine
from plugin_updater.update.fetcher import MetadataFetcher
from plugin_updater.update.normalizer import PackageDirectoryNormalizer
from plugin_updater.update.repository import RepositoryReference
from plugin_updater.update.version import clean_version, compare_versions

__all__ = [
    "RequestAuthorizer",
    "ResponseCache",
    "cache_key",
    "UpdateDescriptorBuilder",
    "UpdaterEngine",
    "create_engine",
    "MetadataFetcher",
    "PackageDirectoryNormalizer",
    "RepositoryReference",
    "clean_version",
    "compare_versions",
]
