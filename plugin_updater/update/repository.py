"""
Repository reference parsing

Turns an "owner/repo" string or a project URL into a RepositoryReference.
An unusable source parses to None, which means "no remote tracking".
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from plugin_updater.update.models import ReleaseMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryReference:
    """GitHub repository identity"""

    owner: str
    name: str

    @classmethod
    def parse(cls, source: object) -> "RepositoryReference | None":
        """
        Parse a repository reference

        Args:
            source: "owner/repo", or a URL such as "https://github.com/owner/repo/tree/main"

        Returns:
            RepositoryReference, or None if source is empty, malformed,
            or has fewer than two path segments
        """
        if not isinstance(source, str):
            return None

        text = source.strip()
        if not text:
            return None

        if "://" in text:
            try:
                path = urlsplit(text).path
            except ValueError:
                logger.debug(f"Unparseable repository URL: {text!r}")
                return None
        else:
            path = text

        segments = path.strip("/").split("/")
        if len(segments) < 2:
            return None

        owner, name = segments[0].strip(), segments[1].strip()
        if not owner or not name:
            return None

        if name.endswith(".git"):
            name = name[: -len(".git")]
            if not name:
                return None

        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        """Repository home page on github.com"""
        return f"https://github.com/{self.owner}/{self.name}"

    def releases_url(self, api_base_url: str, mode: ReleaseMode | str) -> str:
        """
        Build the releases endpoint for this repository

        Args:
            api_base_url: e.g. "https://api.github.com"
            mode: first_of_list lists all releases, latest_only asks for the latest one

        Returns:
            Endpoint URL
        """
        url = f"{api_base_url.rstrip('/')}/repos/{self.owner}/{self.name}/releases"
        if ReleaseMode(mode) is ReleaseMode.LATEST_ONLY:
            url += "/latest"
        return url

    def __str__(self) -> str:
        return self.full_name
