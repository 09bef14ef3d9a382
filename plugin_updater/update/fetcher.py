"""
Release Metadata Fetcher

Reads the latest release of a repository from the GitHub Releases API,
through the response cache.

A missing or broken upstream never raises to the caller: every failure
yields ReleaseMetadata.empty().
"""

import json
import logging

import httpx

from plugin_updater.core.config import Settings
from plugin_updater.core.exceptions import ReleaseFetchError
from plugin_updater.update.authorizer import RequestAuthorizer
from plugin_updater.update.cache import ResponseCache
from plugin_updater.update.models import ReleaseMetadata, ReleaseMode
from plugin_updater.update.repository import RepositoryReference

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"
RATE_LIMIT_STATUSES = (403, 429)


class MetadataFetcher:
    """
    Fetch and normalize release metadata

    Example:
        fetcher = MetadataFetcher(settings)
        release = fetcher.fetch(ref, cache, authorizer, cache_key("widget"))
        if not release.is_empty:
            print(release.tag_name)
    """

    def __init__(self, settings: Settings, client: httpx.Client | None = None):
        """
        Initialize fetcher

        Args:
            settings: Updater settings (API host, release mode, timeout, User-Agent)
            client: HTTP client (created per request if not provided)
        """
        self.settings = settings
        self.client = client

    @property
    def release_mode(self) -> ReleaseMode:
        return ReleaseMode(self.settings.release_mode)

    def releases_url(self, ref: RepositoryReference) -> str:
        """Releases endpoint for ref under the configured mode"""
        return ref.releases_url(self.settings.api_base_url, self.release_mode)

    def fetch(
        self,
        ref: RepositoryReference | None,
        cache: ResponseCache,
        authorizer: RequestAuthorizer,
        key: str,
    ) -> ReleaseMetadata:
        """
        Resolve the current release for a repository

        Args:
            ref: Repository reference (None disables tracking)
            cache: Response cache
            authorizer: Decides whether the credential is attached
            key: Cache key for this component

        Returns:
            ReleaseMetadata, empty if unavailable
        """
        if ref is None:
            logger.debug("No repository configured, skipping release lookup")
            return ReleaseMetadata.empty()

        try:
            entry = cache.get(key)
        except OSError as e:
            # Dropping an expired entry rewrites the store
            logger.warning(f"Release cache unavailable for {ref}: {e}")
            entry = None
        if entry is not None and entry.repository in ("", ref.full_name):
            logger.info(f"Using cached release {entry.value.tag_name} for {ref}")
            return entry.value
        if entry is not None:
            logger.info(f"Cached release belongs to {entry.repository}, refetching for {ref}")

        url = self.releases_url(ref)
        try:
            payload = self._request(url, authorizer)
            release = self._select_release(payload)
        except ReleaseFetchError as e:
            if e.status_code in RATE_LIMIT_STATUSES:
                logger.warning(
                    f"Release lookup for {ref} was refused (HTTP {e.status_code}), "
                    f"likely rate limited; set PLUGIN_UPDATER_AUTH_TOKEN to raise the limit"
                )
            else:
                logger.warning(f"Release lookup for {ref} failed: {e}")
            return ReleaseMetadata.empty()

        if release.is_empty:
            logger.info(f"No published release found for {ref}")
            return release

        try:
            cache.put(key, release, repository=ref.full_name)
        except OSError as e:
            logger.warning(f"Could not cache release for {ref}: {e}")

        logger.info(f"Fetched release {release.tag_name} for {ref}")
        return release

    def _request(self, url: str, authorizer: RequestAuthorizer) -> object:
        """
        GET the releases endpoint and decode the JSON body

        Raises:
            ReleaseFetchError: On transport errors, non-200 status, or an empty/invalid body
        """
        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": GITHUB_ACCEPT,
        }
        headers = authorizer.authorize(url, headers)

        logger.info(f"Checking for releases at {url}")
        try:
            if self.client is not None:
                response = self.client.get(url, headers=headers, timeout=self.settings.request_timeout)
            else:
                with httpx.Client(timeout=self.settings.request_timeout, verify=True) as client:
                    response = client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise ReleaseFetchError(f"Request timed out: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ReleaseFetchError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise ReleaseFetchError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )

        body = response.text
        if not body or not body.strip():
            raise ReleaseFetchError(f"Empty response body from {url}")

        try:
            return json.loads(body)
        except ValueError as e:
            # JSONDecodeError, or an integer beyond the interpreter's digit limit
            raise ReleaseFetchError(f"Invalid JSON from {url}: {e}") from e

    def _select_release(self, payload: object) -> ReleaseMetadata:
        """
        Pick the release out of a decoded response

        A list yields its first element, an object is used directly.

        Raises:
            ReleaseFetchError: If the payload is neither, or the release cannot be decoded
        """
        if isinstance(payload, list):
            if not payload:
                return ReleaseMetadata.empty()
            payload = payload[0]

        if not isinstance(payload, dict):
            raise ReleaseFetchError(f"Unexpected release payload type: {type(payload).__name__}")

        try:
            return ReleaseMetadata.model_validate(payload)
        except ValueError as e:
            raise ReleaseFetchError(f"Malformed release object: {e}") from e
