"""
Update data models
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ReleaseMode(str, Enum):
    """Which releases endpoint to query"""

    FIRST_OF_LIST = "first_of_list"
    LATEST_ONLY = "latest_only"


@dataclass(frozen=True)
class ComponentIdentity:
    """
    Identity of the installed plugin being tracked

    Attributes:
        slug: Short stable identifier (first segment of basename)
        basename: Host-relative plugin path (e.g., "widget/widget.php")
        installed_version: Version reported by the host, may be unnormalized
        plugin_file: Absolute path to the main plugin file, if known
    """

    slug: str
    basename: str
    installed_version: str = ""
    plugin_file: str | None = None

    @classmethod
    def from_basename(
        cls,
        basename: str,
        installed_version: str = "",
        plugin_file: str | None = None,
    ) -> "ComponentIdentity":
        """Build an identity, deriving the slug from the basename"""
        basename = basename.replace("\\", "/").strip("/")
        slug = basename.split("/", 1)[0]
        if "/" not in basename and slug.endswith(".php"):
            slug = slug[: -len(".php")]
        return cls(
            slug=slug,
            basename=basename,
            installed_version=installed_version,
            plugin_file=plugin_file,
        )

    @classmethod
    def from_plugin_file(
        cls,
        plugin_file: str | Path,
        plugins_dir: str | Path | None = None,
        installed_version: str = "",
    ) -> "ComponentIdentity":
        """
        Build an identity from the main plugin file

        Args:
            plugin_file: Path to the main plugin file
            plugins_dir: Host plugins directory (defaults to the file's grandparent)
            installed_version: Installed version string

        Returns:
            ComponentIdentity whose basename is relative to plugins_dir
        """
        path = Path(plugin_file).resolve()
        base_dir = Path(plugins_dir).resolve() if plugins_dir else path.parent.parent
        try:
            basename = path.relative_to(base_dir).as_posix()
        except ValueError:
            basename = path.name
        return cls.from_basename(basename, installed_version, plugin_file=str(path))

    def with_installed_version(self, version: str) -> "ComponentIdentity":
        """Copy of this identity with a different installed version"""
        return ComponentIdentity(self.slug, self.basename, version, self.plugin_file)


@dataclass(frozen=True)
class PluginData:
    """
    Header metadata of the installed plugin

    Read-only input supplied by the host (or parsed from the plugin file).
    """

    name: str = ""
    version: str = ""
    plugin_uri: str = ""
    author: str = ""
    author_uri: str = ""
    description: str = ""
    tested_up_to: str = ""
    requires_wp: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to the host's header field names"""
        return {
            "Name": self.name,
            "Version": self.version,
            "PluginURI": self.plugin_uri,
            "Author": self.author,
            "AuthorURI": self.author_uri,
            "Description": self.description,
            "TestedUpTo": self.tested_up_to,
            "RequiresWP": self.requires_wp,
        }

    @property
    def is_empty(self) -> bool:
        return not any(asdict(self).values())


class ReleaseMetadata(BaseModel):
    """
    A single GitHub release, decoded at the network boundary

    Unknown keys are ignored; missing or non-string fields become "".
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag_name: str = ""
    zipball_url: str = ""
    published_at: str = ""
    body: str = ""

    @field_validator("tag_name", "zipball_url", "published_at", "body", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if not isinstance(value, str):
            return ""
        return value

    @classmethod
    def empty(cls) -> "ReleaseMetadata":
        """The "no known release" value"""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.tag_name


@dataclass(frozen=True)
class CacheEntry:
    """
    Cached release metadata with an absolute expiry timestamp

    repository records which "owner/repo" the release was fetched from.
    """

    key: str
    value: ReleaseMetadata
    expires_at: float
    repository: str = ""

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> dict:
        return {
            "value": self.value.model_dump(),
            "expires_at": self.expires_at,
            "repository": self.repository,
        }

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "CacheEntry":
        return cls(
            key=key,
            value=ReleaseMetadata.model_validate(data["value"]),
            expires_at=float(data["expires_at"]),
            repository=str(data.get("repository") or ""),
        )


@dataclass(frozen=True)
class UpdateDescriptor:
    """
    An available update, in the shape the host stores it

    Only produced when the remote version is strictly newer.
    """

    slug: str
    basename: str
    new_version: str
    tested_up_to: str
    package_url: str
    homepage_url: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the host's update record field names"""
        return {
            "slug": self.slug,
            "plugin": self.basename,
            "new_version": self.new_version,
            "tested": self.tested_up_to,
            "package": self.package_url,
            "url": self.homepage_url,
        }


@dataclass(frozen=True)
class NoUpdate:
    """Remote release is not newer; carries the local metadata unchanged"""

    basename: str
    plugin_data: PluginData


@dataclass(frozen=True)
class CheckRequest:
    """One update check for one component"""

    identity: ComponentIdentity


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of one update check

    Exactly one of descriptor/no_update is set when a decision was made.
    Neither is set when tracking is disabled or release data is unavailable,
    meaning the host state should be left untouched.
    """

    basename: str
    descriptor: UpdateDescriptor | None = None
    no_update: NoUpdate | None = None

    @property
    def has_update(self) -> bool:
        return self.descriptor is not None

    @property
    def is_decided(self) -> bool:
        return self.descriptor is not None or self.no_update is not None


@dataclass(frozen=True)
class PluginInformation:
    """Details shown in the host's plugin information dialog"""

    name: str
    slug: str
    version: str
    tested: str
    requires: str | None = None
    author: str = ""
    author_profile: str | None = None
    last_updated: str = ""
    homepage: str | None = None
    short_description: str = ""
    sections: dict[str, str] = field(default_factory=dict)
    download_link: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
