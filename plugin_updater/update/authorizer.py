"""
Request authorization

Decides per outbound request whether to attach the configured credential.
Credentials only ever go to the trusted API host or to the zipball URL of
the release currently being resolved.
"""

import logging
from urllib.parse import urlsplit

from plugin_updater.core.validation import is_trusted_package_url, is_valid_token

logger = logging.getLogger(__name__)


class RequestAuthorizer:
    """
    Attach an Authorization header to trusted requests only

    Example:
        authorizer = RequestAuthorizer("ghp_abc123")
        headers = authorizer.authorize("https://api.github.com/repos/acme/widget", {})
        # {"Authorization": "token ghp_abc123"}
    """

    def __init__(
        self,
        token: str | None,
        api_host: str = "api.github.com",
        scheme: str = "token",
        strict_token_validation: bool = True,
    ):
        """
        Initialize authorizer

        Args:
            token: Secret credential (None disables authorization)
            api_host: Trusted API host name
            scheme: Authorization scheme, "token" or "Bearer"
            strict_token_validation: Refuse tokens with characters outside [A-Za-z0-9_-]
        """
        self.api_host = api_host
        self.scheme = scheme
        self.strict_token_validation = strict_token_validation
        self._token = token or None

    @property
    def credential(self) -> str | None:
        """The usable credential, or None if absent or invalid"""
        if not self._token:
            return None
        if self.strict_token_validation and not is_valid_token(self._token):
            return None
        return self._token

    def is_trusted(self, url: str, zipball_url: str | None = None) -> bool:
        """
        Check whether a request URL may receive the credential

        Args:
            url: Outbound request URL
            zipball_url: Zipball URL of the currently resolved release

        Returns:
            True if the URL host is the API host or the URL starts with zipball_url
        """
        try:
            host = urlsplit(url).hostname
        except ValueError:
            return False
        if not host:
            return False

        if host == self.api_host:
            return True
        # The zipball URL itself must be rooted at the API host before its prefix is trusted
        if (
            zipball_url
            and is_trusted_package_url(zipball_url, self.api_host)
            and url.startswith(zipball_url)
        ):
            return True
        return False

    def authorize(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        zipball_url: str | None = None,
    ) -> dict[str, str]:
        """
        Return request headers, with the credential attached when allowed

        Args:
            url: Outbound request URL
            headers: Existing request headers (not modified)
            zipball_url: Zipball URL of the currently resolved release

        Returns:
            New headers dictionary
        """
        result = dict(headers or {})

        credential = self.credential
        if credential is None:
            return result

        if self.is_trusted(url, zipball_url):
            result["Authorization"] = f"{self.scheme} {credential}"
            logger.debug(f"Attached credential to request for {urlsplit(url).hostname}")

        return result
