"""
Update Descriptor Builder

Combines the installed plugin's metadata with the resolved release and
decides whether an update should be offered to the host.
"""

import logging

from plugin_updater.core.config import Settings
from plugin_updater.core.validation import (
    esc_url_raw,
    is_trusted_package_url,
    sanitize_key,
    sanitize_plugin_basename,
    sanitize_text_field,
)
from plugin_updater.update.models import (
    ComponentIdentity,
    NoUpdate,
    PluginData,
    PluginInformation,
    ReleaseMetadata,
    UpdateDescriptor,
)
from plugin_updater.update.repository import RepositoryReference
from plugin_updater.update.version import Comparison, clean_version, compare_versions

logger = logging.getLogger(__name__)

DEFAULT_INSTALLED_VERSION = "0.0.0"
PLUGIN_INFORMATION_ACTION = "plugin_information"


class UpdateDescriptorBuilder:
    """
    Build update decisions for one component

    build() returns:
        UpdateDescriptor - remote release is newer and its package URL is trusted
        NoUpdate         - remote release is not newer
        None             - no decision (no release, invalid versions, untrusted package)
    """

    def __init__(self, settings: Settings, repository: RepositoryReference | None = None):
        self.settings = settings
        self.repository = repository

    def installed_version(self, identity: ComponentIdentity, plugin_data: PluginData) -> str:
        """Installed version reported by the host, falling back to the plugin header"""
        return clean_version(identity.installed_version or plugin_data.version or DEFAULT_INSTALLED_VERSION)

    def homepage_url(self, plugin_data: PluginData) -> str:
        if self.repository is not None:
            return self.repository.html_url
        return plugin_data.plugin_uri

    def build(
        self,
        identity: ComponentIdentity,
        plugin_data: PluginData,
        metadata: ReleaseMetadata,
    ) -> UpdateDescriptor | NoUpdate | None:
        """
        Decide whether metadata describes an update for identity

        Args:
            identity: Installed component
            plugin_data: Installed plugin header metadata
            metadata: Resolved release

        Returns:
            UpdateDescriptor, NoUpdate, or None when no decision can be made
        """
        if metadata.is_empty:
            return None

        current_version = self.installed_version(identity, plugin_data)
        new_version = clean_version(metadata.tag_name)

        comparison = compare_versions(new_version, current_version)
        if comparison is Comparison.INVALID:
            logger.warning(
                f"Skipping update check for {identity.slug}: "
                f"unrecognised version (installed={current_version!r}, remote={new_version!r})"
            )
            return None

        logger.info(f"{identity.slug}: installed {current_version}, latest {new_version}")

        if comparison is not Comparison.GREATER:
            return NoUpdate(basename=identity.basename, plugin_data=plugin_data)

        if not is_trusted_package_url(metadata.zipball_url, self.settings.api_host):
            logger.warning(
                f"Rejected update {new_version} for {identity.slug}: "
                f"package URL is not on https://{self.settings.api_host}/"
            )
            return None

        descriptor = UpdateDescriptor(
            slug=identity.slug,
            basename=identity.basename,
            new_version=new_version,
            tested_up_to=plugin_data.tested_up_to or self.settings.host_version,
            package_url=metadata.zipball_url,
            homepage_url=self.homepage_url(plugin_data),
        )
        if self.settings.sanitize_output_fields:
            descriptor = self._sanitize(descriptor)

        logger.info(f"Update available for {identity.slug}: {new_version}")
        return descriptor

    def _sanitize(self, descriptor: UpdateDescriptor) -> UpdateDescriptor:
        return UpdateDescriptor(
            slug=sanitize_key(descriptor.slug),
            basename=sanitize_plugin_basename(descriptor.basename),
            new_version=sanitize_text_field(descriptor.new_version),
            tested_up_to=sanitize_text_field(descriptor.tested_up_to),
            package_url=esc_url_raw(descriptor.package_url),
            homepage_url=esc_url_raw(descriptor.homepage_url),
        )

    def build_plugin_information(
        self,
        identity: ComponentIdentity,
        plugin_data: PluginData,
        metadata: ReleaseMetadata,
        action: str,
        slug: str | None,
    ) -> PluginInformation | None:
        """
        Build the plugin details dialog content

        Args:
            identity: Installed component
            plugin_data: Installed plugin header metadata
            metadata: Resolved release
            action: Host action name, only "plugin_information" is answered
            slug: Slug the host is asking about

        Returns:
            PluginInformation, or None if the request is not for this component
            or no release is known
        """
        if action != PLUGIN_INFORMATION_ACTION or not slug or slug != identity.slug:
            return None
        if metadata.is_empty or plugin_data.is_empty:
            return None

        return PluginInformation(
            name=plugin_data.name,
            slug=identity.slug,
            version=clean_version(metadata.tag_name),
            tested=plugin_data.tested_up_to or self.settings.host_version,
            requires=plugin_data.requires_wp or None,
            author=plugin_data.author,
            author_profile=plugin_data.author_uri or None,
            last_updated=metadata.published_at,
            homepage=plugin_data.plugin_uri or None,
            short_description=plugin_data.description,
            sections={
                "Description": plugin_data.description or "No description available.",
                "Updates": metadata.body or "No update details available.",
            },
            download_link=metadata.zipball_url,
        )
