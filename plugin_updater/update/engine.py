"""
Updater Engine

Single entry point for one plugin's update lifecycle. The engine exposes
capability methods that a host adapter wires into the host's filters:

- on_update_check       - decide whether an update is available
- on_authorize_request  - attach the credential to trusted requests
- on_post_extract       - rename the extracted package directory
- on_plugin_information - content for the plugin details dialog

Example:
    engine = create_engine("/srv/site/plugins/widget/widget.php", get_settings())
    result = engine.on_update_check(CheckRequest(engine.identity))
    if result.has_update:
        print(result.descriptor.new_version)
"""

import logging
from pathlib import Path

import httpx

from plugin_updater.core.config import Settings
from plugin_updater.core.exceptions import ConfigurationError
from plugin_updater.update.authorizer import RequestAuthorizer
from plugin_updater.update.cache import JsonFileCacheStore, ResponseCache, cache_key
from plugin_updater.update.descriptor import UpdateDescriptorBuilder
from plugin_updater.update.fetcher import MetadataFetcher
from plugin_updater.update.models import (
    CheckRequest,
    CheckResult,
    ComponentIdentity,
    NoUpdate,
    PluginData,
    PluginInformation,
    ReleaseMetadata,
)
from plugin_updater.update.normalizer import FileService, PackageDirectoryNormalizer
from plugin_updater.update.plugin_header import read_plugin_data
from plugin_updater.update.repository import RepositoryReference

logger = logging.getLogger(__name__)


class UpdaterEngine:
    """
    Update resolution for exactly one installed plugin

    Every check goes through the response cache, which decides when a
    release is refetched. The last resolved release is kept so the
    authorizer can recognise requests for its zipball.
    """

    def __init__(
        self,
        identity: ComponentIdentity,
        plugin_data: PluginData,
        repository: RepositoryReference | None,
        settings: Settings,
        cache: ResponseCache | None = None,
        fetcher: MetadataFetcher | None = None,
        authorizer: RequestAuthorizer | None = None,
        file_service: FileService | None = None,
    ):
        """
        Initialize engine

        Args:
            identity: Installed component
            plugin_data: Installed plugin header metadata
            repository: Tracked repository (None disables remote tracking)
            settings: Updater settings
            cache: Response cache (in-memory if not provided)
            fetcher: Release fetcher (created from settings if not provided)
            authorizer: Request authorizer (created from settings if not provided)
            file_service: Filesystem service for directory normalization
        """
        self.identity = identity
        self.plugin_data = plugin_data
        self.repository = repository
        self.settings = settings
        self.cache = cache or ResponseCache(ttl=settings.cache_ttl_seconds)
        self.fetcher = fetcher or MetadataFetcher(settings)
        self.authorizer = authorizer or RequestAuthorizer(
            settings.auth_token,
            api_host=settings.api_host,
            scheme=settings.auth_scheme,
            strict_token_validation=settings.strict_token_validation,
        )
        self.builder = UpdateDescriptorBuilder(settings, repository)
        self.normalizer = PackageDirectoryNormalizer(
            identity,
            file_service=file_service,
            replace_mode=settings.replace_mode,
        )
        self._release: ReleaseMetadata | None = None

        if repository is None:
            logger.info(f"No repository configured for {identity.slug}, remote tracking disabled")

    @property
    def cache_key(self) -> str:
        return cache_key(self.identity.slug)

    def resolve_release(self) -> ReleaseMetadata:
        """Resolve the current release through the cache"""
        release = self.fetcher.fetch(
            self.repository,
            self.cache,
            self.authorizer,
            self.cache_key,
        )
        if not release.is_empty:
            self._release = release
        return release

    def on_update_check(self, request: CheckRequest) -> CheckResult:
        """
        Run one update check

        Args:
            request: Check request; its identity carries the installed version

        Returns:
            CheckResult with a descriptor, a no-update record, or neither
        """
        identity = request.identity
        if identity.basename != self.identity.basename:
            return CheckResult(basename=identity.basename)

        release = self.resolve_release()
        decision = self.builder.build(identity, self.plugin_data, release)

        if decision is None:
            return CheckResult(basename=identity.basename)
        if isinstance(decision, NoUpdate):
            return CheckResult(basename=identity.basename, no_update=decision)
        return CheckResult(basename=identity.basename, descriptor=decision)

    def on_authorize_request(self, url: str, headers: dict[str, str] | None = None) -> dict[str, str]:
        """
        Return headers for an outbound request, with the credential when trusted

        Only consults the already-resolved release; never triggers a fetch.
        """
        zipball_url = self._release.zipball_url if self._release is not None else None
        return self.authorizer.authorize(url, headers, zipball_url=zipball_url)

    def on_post_extract(self, source: str, remote_source: str, hook_extra: dict | None) -> str:
        """Rename the extracted package for this plugin; other packages pass through"""
        return self.normalizer.normalize(source, remote_source, hook_extra)

    def on_plugin_information(self, action: str, slug: str | None) -> PluginInformation | None:
        """Plugin details for the host dialog, or None if the request is for another plugin"""
        if action != "plugin_information" or slug != self.identity.slug:
            return None
        release = self.resolve_release()
        return self.builder.build_plugin_information(
            self.identity,
            self.plugin_data,
            release,
            action,
            slug,
        )


def create_engine(
    plugin_file: str | Path,
    settings: Settings,
    plugin_data: PluginData | None = None,
    plugins_dir: str | Path | None = None,
    cache: ResponseCache | None = None,
    client: httpx.Client | None = None,
    file_service: FileService | None = None,
) -> UpdaterEngine:
    """
    Bootstrap an engine for one plugin file

    The repository comes from settings.repository, falling back to the
    plugin's "Plugin URI" header.

    Args:
        plugin_file: Path to the plugin's main file
        settings: Updater settings
        plugin_data: Header metadata (parsed from plugin_file if not provided)
        plugins_dir: Host plugins directory (defaults to the file's grandparent)
        cache: Response cache (JSON file cache from settings if not provided)
        client: HTTP client for the fetcher
        file_service: Filesystem service for directory normalization

    Returns:
        Configured UpdaterEngine

    Raises:
        ConfigurationError: If the plugin file does not exist or has no readable header
    """
    path = Path(plugin_file)
    if not path.is_file():
        raise ConfigurationError(
            f"Target plugin file not found: {path}",
            recovery_hint="Pass the path to the plugin's main file",
        )

    if plugin_data is None:
        plugin_data = read_plugin_data(path)
        if plugin_data is None:
            raise ConfigurationError(
                f"Could not read plugin header from {path}",
                recovery_hint="The main plugin file must start with a 'Plugin Name:' header",
            )

    identity = ComponentIdentity.from_plugin_file(
        path,
        plugins_dir=plugins_dir,
        installed_version=plugin_data.version,
    )
    repository = RepositoryReference.parse(settings.repository or plugin_data.plugin_uri)

    if cache is None:
        cache = ResponseCache(
            JsonFileCacheStore(settings.resolved_cache_file()),
            ttl=settings.cache_ttl_seconds,
        )

    logger.info(
        f"Tracking {identity.basename} v{identity.installed_version or '?'} "
        f"against {repository or 'no repository'}"
    )

    return UpdaterEngine(
        identity=identity,
        plugin_data=plugin_data,
        repository=repository,
        settings=settings,
        cache=cache,
        fetcher=MetadataFetcher(settings, client=client),
        file_service=file_service,
    )
