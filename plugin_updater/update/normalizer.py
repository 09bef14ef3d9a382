"""
Package Directory Normalizer

GitHub zipballs extract to "<owner>-<repo>-<sha>/". After extraction the
folder is renamed to the plugin's own directory name so the host installs
it over the existing copy.
"""

import logging
import os
import shutil
from pathlib import Path, PurePosixPath
from typing import Literal, Protocol

from plugin_updater.core.exceptions import PackageRelocationError
from plugin_updater.core.validation import sanitize_file_name
from plugin_updater.update.models import ComponentIdentity

logger = logging.getLogger(__name__)

ReplaceMode = Literal["remove_then_move", "atomic_replace"]


class FileService(Protocol):
    """Protocol for the host's filesystem service"""

    def exists(self, path: str) -> bool:
        ...

    def delete(self, path: str) -> None:
        """Recursively delete path"""
        ...

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        """
        Move source to destination

        Raises:
            PackageRelocationError: If the move fails
        """
        ...


class LocalFileService:
    """FileService backed by the local filesystem"""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def delete(self, path: str) -> None:
        target = Path(path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        if self.exists(destination):
            if not overwrite:
                raise PackageRelocationError(f"Destination already exists: {destination}")
            # os.replace only swaps over an empty directory, so clear it first
            if Path(destination).is_dir():
                shutil.rmtree(destination)
        try:
            os.replace(source, destination)
        except OSError:
            # Fall back to a copying move across filesystems
            try:
                shutil.move(source, destination)
            except (OSError, shutil.Error) as e:
                raise PackageRelocationError(f"Failed to move {source} to {destination}: {e}") from e


class PackageDirectoryNormalizer:
    """
    Rename an extracted package to the plugin's installation folder

    Example:
        normalizer = PackageDirectoryNormalizer(identity, LocalFileService())
        final = normalizer.normalize(
            "/tmp/upgrade/acme-widget-1a2b3c/",
            "/tmp/upgrade/",
            {"plugin": "widget/widget.php"},
        )
        # "/tmp/upgrade/widget"
    """

    def __init__(
        self,
        identity: ComponentIdentity,
        file_service: FileService | None = None,
        replace_mode: ReplaceMode = "remove_then_move",
    ):
        """
        Initialize normalizer

        Args:
            identity: Installed component
            file_service: Filesystem service (local filesystem if not provided)
            replace_mode: "remove_then_move" deletes an existing target first,
                "atomic_replace" performs a single overwriting move
        """
        self.identity = identity
        self.file_service = file_service or LocalFileService()
        self.replace_mode = replace_mode

    def folder_name(self) -> str:
        """
        Installation folder name for this component

        The directory part of the basename, or the plugin file's stem when the
        plugin is a single file at the top of the plugins directory.
        """
        basename = PurePosixPath(self.identity.basename)
        parent = str(basename.parent)
        if parent not in ("", "."):
            folder = parent
        elif self.identity.plugin_file:
            folder = Path(self.identity.plugin_file).stem
        else:
            folder = basename.stem
        return sanitize_file_name(folder)

    def normalize(self, source: str, remote_source: str, hook_extra: dict | None) -> str:
        """
        Move the extracted package to remote_source/<folder>

        Args:
            source: Extracted package directory
            remote_source: Upgrade staging directory
            hook_extra: Operation context; "plugin" must equal this component's basename

        Returns:
            The new path on success, otherwise source unchanged
        """
        if not hook_extra or hook_extra.get("plugin") != self.identity.basename:
            return source

        folder = self.folder_name()
        if not folder:
            logger.warning(f"Cannot derive installation folder for {self.identity.basename}")
            return source

        new_source = os.path.join(remote_source.rstrip("/\\"), folder)
        if os.path.normpath(new_source) == os.path.normpath(source):
            return source

        extracted = source.rstrip("/\\") or source
        try:
            if self.replace_mode == "remove_then_move":
                if self.file_service.exists(new_source):
                    logger.info(f"Removing existing directory {new_source}")
                    self.file_service.delete(new_source)
                self.file_service.move(extracted, new_source, overwrite=False)
            else:
                self.file_service.move(extracted, new_source, overwrite=True)
        except (OSError, PackageRelocationError) as e:
            logger.error(f"Failed to relocate package for {self.identity.slug}: {e}")
            return source

        logger.info(f"Relocated package {source} -> {new_source}")
        return new_source
