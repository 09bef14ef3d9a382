"""
GitHub Plugin Updater

Resolves updates for a single installed plugin from GitHub Releases.
"""

__version__ = "1.5.2"
__author__ = "Liam Nguyen"
__license__ = "MIT"

from plugin_updater.update.engine import UpdaterEngine, create_engine
from plugin_updater.update.models import (
    CheckRequest,
    CheckResult,
    ComponentIdentity,
    ReleaseMetadata,
    UpdateDescriptor,
)

__all__ = [
    "UpdaterEngine",
    "create_engine",
    "CheckRequest",
    "CheckResult",
    "ComponentIdentity",
    "ReleaseMetadata",
    "UpdateDescriptor",
]
